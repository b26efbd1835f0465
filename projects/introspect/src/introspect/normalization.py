"""Conversion of raw introspection rows into table descriptions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from introspect.ordering import parse_order
from introspect.types import ColumnDescriptor, TableDescription

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = getLogger(__name__)


def _optional(value: Any) -> str | None:  # noqa: ANN401
    """Collapse empty engine metadata to None."""
    if value is None or value == "":
        return None
    return str(value)


def normalize_column(row: Mapping[str, Any]) -> ColumnDescriptor:
    """Derive a ColumnDescriptor from a SHOW FULL COLUMNS row."""
    return ColumnDescriptor(
        name=row["Field"],
        type=row["Type"],
        nullable=row["Null"] == "YES",
        key=row.get("Key") or "",
        default=None if row.get("Default") is None else str(row["Default"]),
        extra=_optional(row.get("Extra")),
        comment=_optional(row.get("Comment")),
    )


def normalize_table(
    name: str,
    rows: Iterable[Mapping[str, Any] | ColumnDescriptor],
    create_statement: str,
    comment: str | None = None,
) -> TableDescription:
    """Build a TableDescription, parsing the ordering directive once.

    The directive is read from ``comment`` when given, otherwise from the
    comment of the primary key column.
    """
    columns = tuple(
        row if isinstance(row, ColumnDescriptor) else normalize_column(row)
        for row in rows
    )

    primary = [column for column in columns if column.primary_key]
    if len(primary) > 1:
        logger.warning(
            "Table %s has a composite primary key (%s), using %s",
            name,
            ", ".join(column.name for column in primary),
            primary[0].name,
        )

    if comment is None and primary:
        comment = primary[0].comment

    return TableDescription(
        name=name,
        columns=columns,
        create_statement=create_statement,
        order=parse_order(comment, name),
    )
