"""Type definitions for introspected schema metadata."""

from __future__ import annotations

from typing import NamedTuple

PRIMARY_KEY = "PRI"


class ColumnDescriptor(NamedTuple):
    """One physical column as reported by the engine."""

    name: str
    type: str
    nullable: bool
    key: str = ""
    default: str | None = None
    extra: str | None = None
    comment: str | None = None

    @property
    def primary_key(self) -> bool:
        """Return whether the engine flags this column as the primary key."""
        return self.key == PRIMARY_KEY


class TableDescription(NamedTuple):
    """A table, its columns in physical order and its creation DDL."""

    name: str
    columns: tuple[ColumnDescriptor, ...]
    create_statement: str
    order: int = 0

    @property
    def primary_key(self) -> ColumnDescriptor | None:
        """Return the primary key column, or None for a keyless table."""
        return next((column for column in self.columns if column.primary_key), None)
