"""Schema introspection module for modelgen."""

from introspect.connection import ConnectionStringError, connect, connection_url
from introspect.inspector import EmptySchemaError, SchemaInspector
from introspect.normalization import normalize_column, normalize_table
from introspect.ordering import DIRECTIVE_PREFIX, parse_order
from introspect.types import ColumnDescriptor, TableDescription

__all__ = [
    "DIRECTIVE_PREFIX",
    "ColumnDescriptor",
    "ConnectionStringError",
    "EmptySchemaError",
    "SchemaInspector",
    "TableDescription",
    "connect",
    "connection_url",
    "normalize_column",
    "normalize_table",
    "parse_order",
]
