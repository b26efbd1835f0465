"""Template rendering of table models into Python data-access modules.

Clause synthesis follows a fixed naming convention, resolved into field roles
during assembly:

- ``id`` is auto-assigned and never inserted;
- ``created_at`` is set to ``NOW()`` on insert and never updated;
- ``updated_at`` is set to ``UTC_TIMESTAMP()`` on every update.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from codegen.assembly import Field, TableModel

TEMPLATE_DIR = Path(__file__).parent / "templates"
SUPPORT_DIR = Path(__file__).parent / "support"

TABLE_TEMPLATE = "table.py.jinja"
SUPPORT_MODULE = "x_helpers.py"
SUPPORT_TEST_TEMPLATE = "test_x_helpers.py.jinja"
PACKAGE_TEMPLATE = "__init__.py.jinja"

# Module names written next to the table modules
SUPPORT_FILES = ("__init__.py", SUPPORT_MODULE, "test_x_helpers.py")

PLACEHOLDER = "%s"
INSERT_NOW = "NOW()"
UPDATE_NOW = "UTC_TIMESTAMP()"

# Plain columns whose driver values need the wrapper's conversion, e.g.
# BIT(1) arrives as bytes, DATE and TIME as date and timedelta, DECIMAL as Decimal
COERCED = frozenset({"boolean", "timestamp", "float"})

ZERO_VALUES = {
    "integer": "0",
    "float": "0.0",
    "boolean": "False",
    "text": '""',
    "timestamp": "datetime.min",
    "bytes": 'b""',
    "json": "None",
}


class TemplateRenderError(RuntimeError):
    """Raised when a bundled template cannot be loaded or rendered."""

    def __init__(self, message: str, table: str | None = None) -> None:
        """Initialize with the message and, when known, the table being rendered."""
        self.table = table
        super().__init__(message)


def quote(name: str) -> str:
    """Quote an identifier with backticks."""
    return "`" + name.replace("`", "``") + "`"


def as_tuple(parts: Iterable[str]) -> str:
    """Render expressions as a Python tuple literal."""
    items = list(parts)
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def bind(field: Field) -> str:
    """Return the expression binding a field's attribute as a query argument."""
    attribute = f"self.{field.name}"
    if field.nullable:
        return f"{attribute}.to_db()"
    if field.type.category == "json":
        return f"json.dumps({attribute})"
    return attribute


def scan(field: Field, index: int) -> str:
    """Return the expression decoding one column of a result row."""
    value = f"row[{index}]"
    if field.nullable:
        return f"{field.type.wrapper}.from_db({value})"
    if field.type.category == "json":
        return f"json.loads({value})"
    if field.type.category in COERCED:
        return f"{field.type.wrapper}.coerce({value})"
    return value


def default(field: Field) -> str:
    """Return the dataclass default of a field."""
    if field.nullable:
        return f"field(default_factory={field.type.wrapper})"
    return ZERO_VALUES[field.type.category]


def primary_key(fields: Iterable[Field]) -> Field | None:
    """Return the primary key field, if any."""
    return next((field for field in fields if field.primary_key), None)


def select_fields(fields: Iterable[Field]) -> str:
    """Return every column, quoted, in model order."""
    return ", ".join(quote(field.column) for field in fields)


def scan_fields(fields: Iterable[Field]) -> list[str]:
    """Return the keyword arguments building a model from a selected row."""
    return [f"{field.name}={scan(field, index)}" for index, field in enumerate(fields)]


def insert_fields(fields: Iterable[Field]) -> str:
    """Return the columns of an INSERT, leaving the identity to the engine."""
    return ", ".join(quote(field.column) for field in fields if field.role != "identity")


def insert_values(fields: Iterable[Field]) -> str:
    """Return the VALUES of an INSERT."""
    parts: list[str] = []
    for field in fields:
        match field.role:
            case "identity":
                continue
            case "created":
                parts.append(INSERT_NOW)
            case _:
                parts.append(PLACEHOLDER)
    return ", ".join(parts)


def insert_args(fields: Iterable[Field]) -> str:
    """Return the arguments bound by insert_values placeholders."""
    return as_tuple(
        bind(field) for field in fields if field.role not in ("identity", "created")
    )


def update_values(fields: Iterable[Field]) -> str:
    """Return the SET assignments of an UPDATE."""
    parts: list[str] = []
    for field in fields:
        match field.role:
            case "identity" | "created":
                continue
            case "updated":
                parts.append(f"{quote(field.column)}={UPDATE_NOW}")
            case _:
                parts.append(f"{quote(field.column)}={PLACEHOLDER}")
    return ", ".join(parts)


def update_args(fields: Iterable[Field]) -> str:
    """Return the arguments of an UPDATE, the primary key last."""
    fields = tuple(fields)
    args = [bind(field) for field in fields if field.role == "ordinary"]
    if key := primary_key(fields):
        args.append(bind(key))
    return as_tuple(args)


def upsert_fields(fields: Iterable[Field]) -> str:
    """Return the columns of an upsert."""
    return ", ".join(quote(field.column) for field in fields)


def upsert_values(fields: Iterable[Field]) -> str:
    """Return the VALUES of an upsert."""
    return ", ".join(
        INSERT_NOW if field.role == "created" else PLACEHOLDER for field in fields
    )


def upsert_on_duplicate(fields: Iterable[Field]) -> str:
    """Return the ON DUPLICATE KEY UPDATE assignments of an upsert.

    The primary key resolves to the existing row, so the cursor reports its
    id; ``created_at`` is never touched on conflict.
    """
    parts: list[str] = []
    for field in fields:
        column = quote(field.column)
        if field.primary_key:
            if field.type.category == "integer":
                parts.append(f"{column}=LAST_INSERT_ID({column})")
            else:
                parts.append(f"{column}={column}")
            continue
        match field.role:
            case "created":
                continue
            case "updated":
                parts.append(f"{column}={UPDATE_NOW}")
            case _:
                parts.append(f"{column}=VALUES({column})")
    return ", ".join(parts)


def upsert_args(fields: Iterable[Field]) -> str:
    """Return the arguments bound by upsert_values placeholders."""
    return as_tuple(bind(field) for field in fields if field.role != "created")


def has_int_pk(model: TableModel) -> bool:
    """Check whether the model's primary key is an integer."""
    return model.pk_type.category == "integer"


def helper_imports(model: TableModel) -> list[str]:
    """Return the names the module imports from x_helpers."""
    wrappers = {
        field.type.wrapper
        for field in model.fields
        if field.nullable or field.type.category in COERCED
    }
    return sorted({"Querier", *wrappers})


def literal(text: str) -> str:
    """Render text as a Python string literal."""
    return repr(text)


HELPERS = {
    "quote": quote,
    "bind": bind,
    "default": default,
    "select_fields": select_fields,
    "scan_fields": scan_fields,
    "insert_fields": insert_fields,
    "insert_values": insert_values,
    "insert_args": insert_args,
    "update_values": update_values,
    "update_args": update_args,
    "upsert_fields": upsert_fields,
    "upsert_values": upsert_values,
    "upsert_on_duplicate": upsert_on_duplicate,
    "upsert_args": upsert_args,
    "has_int_pk": has_int_pk,
    "helper_imports": helper_imports,
}


def template_environment(template_dir: Path = TEMPLATE_DIR) -> Environment:
    """Create the Jinja2 environment with the clause helpers registered."""
    environment = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    environment.globals.update(HELPERS)
    environment.filters["literal"] = literal
    return environment


def _render(
    environment: Environment,
    template_name: str,
    table: str | None = None,
    **context: object,
) -> str:
    try:
        return environment.get_template(template_name).render(**context)
    except TemplateError as err:
        target = f" for table {table}" if table else ""
        msg = f"Cannot render template {template_name}{target}: {err}"
        raise TemplateRenderError(msg, table) from err


def render(
    model: TableModel,
    package: str,
    environment: Environment | None = None,
) -> str:
    """Render the data-access module for one table model.

    Raises:
        TemplateRenderError: If the table template is missing or malformed.

    """
    environment = environment or template_environment()
    return _render(
        environment,
        TABLE_TEMPLATE,
        model.table,
        model=model,
        package=package,
    )


def render_support_files(
    package: str,
    environment: Environment | None = None,
) -> dict[str, str]:
    """Return the package files written alongside the table modules."""
    environment = environment or template_environment()
    try:
        helpers = (SUPPORT_DIR / SUPPORT_MODULE).read_text(encoding="utf-8")
    except OSError as err:
        msg = f"Cannot load support module {SUPPORT_MODULE}: {err}"
        raise TemplateRenderError(msg) from err

    return {
        "__init__.py": _render(environment, PACKAGE_TEMPLATE, package=package),
        SUPPORT_MODULE: helpers,
        "test_x_helpers.py": _render(
            environment,
            SUPPORT_TEST_TEMPLATE,
            package=package,
        ),
    }
