"""Assembly of render-ready table models from table descriptions."""

from __future__ import annotations

import keyword
from re import sub
from typing import TYPE_CHECKING, Literal, NamedTuple

from codegen.type_mapping import MappedType, UnrecognizedTypeError, map_type

if TYPE_CHECKING:
    from introspect import TableDescription

type Role = Literal["identity", "created", "updated", "ordinary"]

ROLES: dict[str, Role] = {
    "id": "identity",
    "created_at": "created",
    "updated_at": "updated",
}

DEFAULT_PK_NAME = "id"
DEFAULT_PK_TYPE = MappedType("integer")

# Names taken by the generated dataclass, or read in its class body
RESERVED = frozenset(
    {
        "TABLE",
        "COLUMNS",
        "from_row",
        "get",
        "all",
        "create",
        "update",
        "upsert",
        "delete",
        "field",
        "datetime",
    },
)


def pascal_case(name: str) -> str:
    """Convert name to PascalCase."""
    return "".join(word[0].upper() + word[1:] for word in name.split("_") if word)


def snake_case(name: str) -> str:
    """Convert name to snake_case."""
    return sub("([a-z0-9])([A-Z])|([A-Z])([A-Z][a-z])", r"\1\3_\2\4", name).lower()


def identifier(name: str) -> str:
    """Convert a column name into a safe Python attribute name."""
    attribute = sub(r"\W", "_", snake_case(name))
    if not attribute or attribute[0].isdigit():
        attribute = f"_{attribute}"
    if keyword.iskeyword(attribute) or attribute in RESERVED:
        attribute = f"{attribute}_"
    return attribute


def role_for(column: str) -> Role:
    """Resolve the naming-convention role of a column."""
    return ROLES.get(column, "ordinary")


class Field(NamedTuple):
    """A column of a table model."""

    name: str
    column: str
    type: MappedType
    role: Role = "ordinary"
    primary_key: bool = False

    @property
    def nullable(self) -> bool:
        """Return whether the column permits nulls."""
        return self.type.nullable


class TableModel(NamedTuple):
    """Render-ready projection of a table."""

    name: str
    table: str
    fields: tuple[Field, ...]
    pk_name: str = DEFAULT_PK_NAME
    pk_type: MappedType = DEFAULT_PK_TYPE
    pk_exists: bool = False
    dependencies: tuple[str, ...] = ()

    @property
    def pk_field(self) -> Field | None:
        """Return the field holding the primary key, if the table has one."""
        return next((field for field in self.fields if field.primary_key), None)


def assemble(table: TableDescription) -> TableModel:
    """Build a TableModel from a table description.

    Raises:
        UnrecognizedTypeError: Tagged with the table and column, when a
            column type cannot be mapped.

    """
    primary = table.primary_key
    fields: list[Field] = []
    dependencies: set[str] = set()

    for column in table.columns:
        try:
            mapped = map_type(column.type, column.nullable)
        except UnrecognizedTypeError as err:
            raise UnrecognizedTypeError(column.type, table.name, column.name) from err

        column_name = column.name.lower()
        fields.append(
            Field(
                name=identifier(column.name),
                column=column_name,
                type=mapped,
                role=role_for(column_name),
                primary_key=(
                    column.name == primary.name
                    if primary is not None
                    else (
                        column_name == DEFAULT_PK_NAME
                        and mapped.category == DEFAULT_PK_TYPE.category
                    )
                ),
            ),
        )
        if dependency := mapped.dependency:
            dependencies.add(dependency)

    # Keyless tables always fall back to an integer id
    if primary is not None:
        pk_name = primary.name.lower()
        pk_type = map_type(primary.type, nullable=False)
    else:
        pk_name, pk_type = DEFAULT_PK_NAME, DEFAULT_PK_TYPE

    class_name = pascal_case(table.name)
    if not class_name.isidentifier() or keyword.iskeyword(class_name):
        class_name = f"Table{class_name}"

    return TableModel(
        name=class_name,
        table=table.name,
        fields=tuple(fields),
        pk_name=pk_name,
        pk_type=pk_type,
        pk_exists=primary is not None,
        dependencies=tuple(sorted(dependencies)),
    )
