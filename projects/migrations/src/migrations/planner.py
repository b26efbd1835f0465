"""Ordering of tables for migration generation."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

    from introspect import TableDescription


class OrderedMigration(NamedTuple):
    """A table's creation DDL with its ordering key."""

    table: str
    create_statement: str
    order: int = 0

    @property
    def sort_key(self) -> tuple[int, str]:
        """Order ascending, table name breaking ties."""
        return self.order, self.table


def plan(tables: Iterable[TableDescription]) -> list[OrderedMigration]:
    """Return migrations sorted by ordering directive, then table name.

    Introspection yields tables in no defined order, so the sort always runs.
    """
    migrations = [
        OrderedMigration(table.name, table.create_statement, table.order)
        for table in tables
    ]
    return sorted(migrations, key=lambda migration: migration.sort_key)
