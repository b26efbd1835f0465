"""MySQL schema introspection using SQLAlchemy."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import text

from introspect.normalization import normalize_column, normalize_table

if TYPE_CHECKING:
    from sqlalchemy import Connection

    from introspect.types import ColumnDescriptor, TableDescription

logger = getLogger(__name__)

TABLES_QUERY = text(
    """
    SELECT t.TABLE_NAME, c.COLUMN_COMMENT
    FROM information_schema.TABLES AS t
    LEFT JOIN information_schema.COLUMNS AS c
        ON c.TABLE_SCHEMA = t.TABLE_SCHEMA
        AND c.TABLE_NAME = t.TABLE_NAME
        AND c.COLUMN_KEY = 'PRI'
    WHERE t.TABLE_SCHEMA = :schema
    AND t.TABLE_TYPE = 'BASE TABLE'
    ORDER BY t.TABLE_NAME, c.ORDINAL_POSITION
    """,
)


class EmptySchemaError(LookupError):
    """Raised when a schema has no tables to generate from."""

    def __init__(self, schema: str) -> None:
        """Initialize with the name of the empty schema."""
        self.schema = schema
        super().__init__(f"Database {schema!r} has no tables")


def backtick(name: str) -> str:
    """Quote an identifier for use in a MySQL statement."""
    return "`" + name.replace("`", "``") + "`"


class SchemaInspector:
    """Reads table metadata for one schema over a held connection."""

    def __init__(self, connection: Connection, schema: str) -> None:
        """Initialize inspector with an open connection and a schema name."""
        self._connection = connection
        self.schema = schema

    def tables(self) -> dict[str, str]:
        """Return table names mapped to their primary key column comment."""
        tables: dict[str, str] = {}
        result = self._connection.execute(TABLES_QUERY, {"schema": self.schema})
        for name, comment in result:
            # First key column wins for composite keys
            tables.setdefault(name, comment or "")
        return tables

    def describe_table(self, name: str) -> tuple[ColumnDescriptor, ...]:
        """Return the columns of a table in physical order."""
        result = self._connection.execute(
            text(f"SHOW FULL COLUMNS FROM {backtick(name)}"),
        )
        return tuple(normalize_column(row) for row in result.mappings())

    def create_statement(self, name: str) -> str:
        """Return the engine's CREATE TABLE statement for a table."""
        result = self._connection.execute(text(f"SHOW CREATE TABLE {backtick(name)}"))
        _, statement = result.one()
        return statement

    def describe_schema(self) -> list[TableDescription]:
        """Describe every table of the schema.

        Raises:
            EmptySchemaError: If the schema contains no tables.

        """
        tables = self.tables()
        if not tables:
            raise EmptySchemaError(self.schema)

        descriptions: list[TableDescription] = []
        for name in sorted(tables):
            logger.debug("Describing table %s", name)
            descriptions.append(
                normalize_table(
                    name,
                    self.describe_table(name),
                    self.create_statement(name),
                    tables[name],
                ),
            )
        return descriptions
