"""Module for mapping MySQL column types onto generated Python types."""

from __future__ import annotations

import re
from typing import Literal, NamedTuple

type Category = Literal[
    "integer",
    "float",
    "boolean",
    "text",
    "timestamp",
    "bytes",
    "json",
]

# Annotation used for a non-nullable field of each category
PYTHON_TYPES: dict[Category, str] = {
    "integer": "int",
    "float": "float",
    "boolean": "bool",
    "text": "str",
    "timestamp": "datetime",
    "bytes": "bytes",
    "json": "object",
}

# Nullable wrapper class, defined in the generated x_helpers module
NULL_WRAPPERS: dict[Category, str] = {
    "integer": "NullInt64",
    "float": "NullFloat64",
    "boolean": "NullBool",
    "text": "NullString",
    "timestamp": "NullTime",
    "bytes": "NullBytes",
    "json": "NullJSON",
}

DEPENDENCIES: dict[Category, str] = {
    "timestamp": "from datetime import datetime",
    "json": "import json",
}

# Modifiers only ever follow the qualifier, so enum and set values are untouched
TYPE_SHAPE = re.compile(
    r"(?P<base>[a-z ]+?)\s*"
    r"(?:\((?P<qualifier>.*)\))?"
    r"(?:\s+(?:unsigned|signed|zerofill))*",
    re.IGNORECASE,
)


class Rule(NamedTuple):
    """Maps base type names, optionally with an exact qualifier, to a category."""

    pattern: re.Pattern[str]
    category: Category
    qualifier: str | None = None

    def matches(self, base: str, qualifier: str | None) -> bool:
        """Check whether a normalized type matches this rule."""
        if self.qualifier is not None and self.qualifier != qualifier:
            return False
        return self.pattern.fullmatch(base) is not None


# Ordered, first match wins
RULES: tuple[Rule, ...] = (
    Rule(re.compile(r"tinyint|bit"), "boolean", qualifier="1"),
    Rule(re.compile(r"bool(ean)?"), "boolean"),
    Rule(re.compile(r"(tiny|small|medium|big)?int(eger)?|year"), "integer"),
    Rule(re.compile(r"dec(imal)?|numeric|fixed|float|double( precision)?|real"), "float"),
    Rule(re.compile(r"(var)?char|(tiny|medium|long)?text|enum|set"), "text"),
    Rule(re.compile(r"date|datetime|timestamp|time"), "timestamp"),
    Rule(re.compile(r"bit|(var)?binary|(tiny|medium|long)?blob"), "bytes"),
    Rule(re.compile(r"json"), "json"),
)


class UnrecognizedTypeError(ValueError):
    """Raised when a column type matches no mapping rule."""

    def __init__(
        self,
        raw_type: str,
        table: str | None = None,
        column: str | None = None,
    ) -> None:
        """Initialize with the raw type and, when known, where it was found."""
        self.raw_type = raw_type
        self.table = table
        self.column = column
        location = f" for column {table}.{column}" if table and column else ""
        super().__init__(f"Unrecognized column type {raw_type!r}{location}")


class MappedType(NamedTuple):
    """Semantic target type of a column."""

    category: Category
    nullable: bool = False

    @property
    def expression(self) -> str:
        """Return the plain Python annotation for the category."""
        return PYTHON_TYPES[self.category]

    @property
    def wrapper(self) -> str:
        """Return the name of the category's nullable wrapper."""
        return NULL_WRAPPERS[self.category]

    @property
    def annotation(self) -> str:
        """Return the annotation used in generated code."""
        return self.wrapper if self.nullable else self.expression

    @property
    def dependency(self) -> str | None:
        """Return the import the generated module needs for this type.

        Nullable wrappers carry their own conversions, so only the plain
        variant needs the category's import.
        """
        return None if self.nullable else dependency_for(self.category)


def normalize_type(raw_type: str) -> tuple[str, str | None]:
    """Split a raw type into its lower-cased base name and qualifier.

    Examples:
        VARCHAR(255) -> ("varchar", "255")
        int(10) unsigned -> ("int", "10")
        DOUBLE PRECISION -> ("double precision", None)

    """
    cleaned = raw_type.strip()
    if match := TYPE_SHAPE.fullmatch(cleaned):
        return " ".join(match["base"].lower().split()), match["qualifier"]
    return " ".join(cleaned.lower().split()), None


def map_type(raw_type: str, nullable: bool) -> MappedType:  # noqa: FBT001
    """Map a raw engine type and nullability flag onto a MappedType.

    Raises:
        UnrecognizedTypeError: If no rule matches the type.

    """
    base, qualifier = normalize_type(raw_type)
    for rule in RULES:
        if rule.matches(base, qualifier):
            return MappedType(rule.category, nullable)
    raise UnrecognizedTypeError(raw_type)


def dependency_for(category: Category) -> str | None:
    """Return the import line a category requires, if any."""
    return DEPENDENCIES.get(category)
