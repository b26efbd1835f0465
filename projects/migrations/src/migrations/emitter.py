"""Up and down migration scripts from ordered creation statements."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

    from migrations.planner import OrderedMigration

# The next auto increment value is data, not schema
AUTO_INCREMENT = re.compile(r" AUTO_INCREMENT=[0-9]*\b")

STATEMENT_SEPARATOR = ";"


class MigrationScript(NamedTuple):
    """The pair of scripts creating and dropping one table."""

    sequence: int
    table: str
    up: str
    down: str

    @property
    def stem(self) -> str:
        """Return the file name shared by both scripts."""
        return f"{self.sequence}_create_{self.table}"

    @property
    def up_filename(self) -> str:
        """Return the file name of the up script."""
        return f"{self.stem}.up.sql"

    @property
    def down_filename(self) -> str:
        """Return the file name of the down script."""
        return f"{self.stem}.down.sql"


def up_script(create_statement: str) -> str:
    """Return the creation DDL without its auto increment start value."""
    return AUTO_INCREMENT.sub("", create_statement, count=1) + STATEMENT_SEPARATOR


def down_script(table: str) -> str:
    """Return the statement dropping a table."""
    return f"DROP TABLE IF EXISTS {table}{STATEMENT_SEPARATOR}"


def emit(ordered: Iterable[OrderedMigration], base_sequence: int) -> list[MigrationScript]:
    """Build the scripts for already ordered migrations.

    Sequence numbers increase by one per table from ``base_sequence`` so the
    lexical file order matches the planned order.
    """
    return [
        MigrationScript(
            sequence=base_sequence + index,
            table=migration.table,
            up=up_script(migration.create_statement),
            down=down_script(migration.table),
        )
        for index, migration in enumerate(ordered)
    ]
