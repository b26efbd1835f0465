"""Tests for writing generated packages and driving the generated models."""

import importlib
import sys
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from codegen import (
    ModuleNameError,
    UnrecognizedTypeError,
    generate_models,
    render_models,
)
from introspect import ColumnDescriptor, TableDescription

PACKAGE = "modelgen_generated_shop"


class RecordingCursor:
    """DB-API cursor double recording every statement."""

    def __init__(self, rows: list[tuple[Any, ...]]) -> None:
        """Initialize with the rows returned by fetches."""
        self.rows = rows
        self.executed: list[tuple[str, tuple[Any, ...]]] = []
        self.lastrowid = 41
        self.rowcount = 1
        self.closed = 0

    def execute(self, query: str, args: tuple[Any, ...] = ()) -> int:
        """Record a statement, checking placeholders match the arguments."""
        assert query.count("%s") == len(args)
        self.executed.append((query, args))
        return self.rowcount

    def fetchone(self) -> tuple[Any, ...] | None:
        """Return the first row, if any."""
        return self.rows[0] if self.rows else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        """Return every row."""
        return self.rows

    def close(self) -> None:
        """Count closes."""
        self.closed += 1


class RecordingConnection:
    """DB-API connection double handing out one recording cursor."""

    def __init__(self, rows: list[tuple[Any, ...]] | None = None) -> None:
        """Initialize with the rows returned by fetches."""
        self.cursor_ = RecordingCursor(rows or [])

    def cursor(self) -> RecordingCursor:
        """Return the recording cursor."""
        return self.cursor_

    @property
    def statements(self) -> list[str]:
        """Return the executed statements."""
        return [query for query, _ in self.cursor_.executed]


@pytest.fixture(name="tables")
def shop_tables() -> list[TableDescription]:
    """Create a small shop schema."""
    return [
        TableDescription(
            "customers",
            (
                ColumnDescriptor("id", "int(11) unsigned", nullable=False, key="PRI"),
                ColumnDescriptor("name", "varchar(255)", nullable=False),
                ColumnDescriptor("nickname", "varchar(64)", nullable=True),
                ColumnDescriptor("settings", "json", nullable=False),
                ColumnDescriptor("active", "tinyint(1)", nullable=False),
                ColumnDescriptor("created_at", "datetime", nullable=False),
                ColumnDescriptor("updated_at", "datetime", nullable=True),
            ),
            "CREATE TABLE `customers` (`id` int)",
        ),
        TableDescription(
            "countries",
            (
                ColumnDescriptor("code", "char(2)", nullable=False, key="PRI"),
                ColumnDescriptor("name", "varchar(64)", nullable=False),
            ),
            "CREATE TABLE `countries` (`code` char(2))",
        ),
        TableDescription(
            "readings",
            (
                ColumnDescriptor("id", "bigint(20)", nullable=False, key="PRI"),
                ColumnDescriptor("enabled", "bit(1)", nullable=False),
                ColumnDescriptor("opens", "time", nullable=False),
                ColumnDescriptor("taken_on", "date", nullable=False),
                ColumnDescriptor("price", "decimal(10,2)", nullable=False),
            ),
            "CREATE TABLE `readings` (`id` bigint(20))",
        ),
    ]


@pytest.fixture(name="package")
def generated_package(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    tables: list[TableDescription],
) -> Path:
    """Generate the shop package and make it importable."""
    output = tmp_path / PACKAGE
    generate_models(tables, output, PACKAGE)
    monkeypatch.syspath_prepend(str(tmp_path))
    for name in [name for name in sys.modules if name.startswith(PACKAGE)]:
        monkeypatch.delitem(sys.modules, name)
    return output


def test_render_models(tables: list[TableDescription]) -> None:
    """Test one module per table plus the support files."""
    files = render_models(tables, PACKAGE)

    assert sorted(files) == [
        "__init__.py",
        "countries.py",
        "customers.py",
        "readings.py",
        "test_x_helpers.py",
        "x_helpers.py",
    ]


def test_generate_models_writes_files(package: Path) -> None:
    """Test every file is written into the output directory."""
    assert sorted(path.name for path in package.iterdir()) == [
        "__init__.py",
        "countries.py",
        "customers.py",
        "readings.py",
        "test_x_helpers.py",
        "x_helpers.py",
    ]


def test_generate_models_archives_previous_output(
    tmp_path: Path,
    tables: list[TableDescription],
) -> None:
    """Test an existing output directory is moved aside first."""
    output = tmp_path / "models"
    output.mkdir()
    (output / "stale.py").write_text("", encoding="utf-8")

    generate_models(tables, output, "models")

    assert not (output / "stale.py").exists()
    archived = [path for path in tmp_path.iterdir() if path.name.startswith("models_")]
    assert len(archived) == 1
    assert (archived[0] / "stale.py").exists()


def test_unrecognized_type_leaves_output(
    tmp_path: Path,
    tables: list[TableDescription],
) -> None:
    """Test a mapping failure writes nothing and archives nothing."""
    output = tmp_path / "models"
    output.mkdir()
    (output / "kept.py").write_text("", encoding="utf-8")
    broken = TableDescription(
        "places",
        (ColumnDescriptor("location", "geometry", nullable=False),),
        "",
    )

    with pytest.raises(UnrecognizedTypeError, match=r"places\.location"):
        generate_models([*tables, broken], output, "models")

    assert [path.name for path in tmp_path.iterdir()] == ["models"]
    assert (output / "kept.py").exists()


@pytest.mark.usefixtures("package")
def test_generated_crud() -> None:
    """Test the generated model issues the expected statements."""
    module = importlib.import_module(f"{PACKAGE}.customers")
    helpers = importlib.import_module(f"{PACKAGE}.x_helpers")
    customer = module.Customers(name="Ada", settings={"theme": "dark"}, active=True)
    db = RecordingConnection()

    customer.create(db)
    assert customer.id == 41
    query, args = db.cursor_.executed[-1]
    assert query == (
        "INSERT INTO `customers` (`name`, `nickname`, `settings`, `active`, "
        "`created_at`, `updated_at`) VALUES (%s, %s, %s, %s, NOW(), %s)"
    )
    assert args == ("Ada", None, '{"theme": "dark"}', True, None)

    customer.nickname = helpers.NullString("")
    assert customer.update(db) == 1
    query, args = db.cursor_.executed[-1]
    assert query == (
        "UPDATE `customers` SET `name`=%s, `nickname`=%s, `settings`=%s, "
        "`active`=%s, `updated_at`=UTC_TIMESTAMP() WHERE `id` = %s"
    )
    assert args == ("Ada", "", '{"theme": "dark"}', True, 41)

    customer.upsert(db)
    assert db.statements[-1].endswith(
        "ON DUPLICATE KEY UPDATE `id`=LAST_INSERT_ID(`id`), `name`=VALUES(`name`), "
        "`nickname`=VALUES(`nickname`), `settings`=VALUES(`settings`), "
        "`active`=VALUES(`active`), `updated_at`=UTC_TIMESTAMP()",
    )

    assert customer.delete(db) == 1
    assert db.cursor_.executed[-1] == ("DELETE FROM `customers` WHERE `id` = %s", (41,))
    assert db.cursor_.closed == 4


@pytest.mark.usefixtures("package")
def test_generated_reads() -> None:
    """Test rows are decoded into typed fields."""
    module = importlib.import_module(f"{PACKAGE}.customers")
    helpers = importlib.import_module(f"{PACKAGE}.x_helpers")
    created = datetime(2024, 1, 1, 9, 30)
    row = (7, "Ada", None, '{"theme": "dark"}', 1, created, created)
    db = RecordingConnection([row])

    customer = module.Customers.get(db, 7)
    assert customer is not None
    assert customer.id == 7
    assert customer.nickname == helpers.NullString()
    assert customer.settings == {"theme": "dark"}
    assert customer.active is True
    assert customer.updated_at == helpers.NullTime(created)
    assert db.statements[-1].endswith("FROM `customers` WHERE `id` = %s")

    assert module.Customers.all(db) == [customer]
    assert module.Customers.COLUMNS[0] == "id"


@pytest.mark.usefixtures("package")
def test_generated_text_key() -> None:
    """Test a text key is bound by value and never read from lastrowid."""
    module = importlib.import_module(f"{PACKAGE}.countries")
    country = module.Countries(code="NZ", name="New Zealand")
    db = RecordingConnection()

    country.create(db)
    country.upsert(db)

    assert country.code == "NZ"
    assert db.cursor_.executed[0][1] == ("NZ", "New Zealand")
    assert db.statements[-1].endswith("`code`=`code`, `name`=VALUES(`name`)")


@pytest.mark.usefixtures("package")
def test_generated_reads_convert_driver_values() -> None:
    """Test NOT NULL columns get the same conversions as their nullable wrappers."""
    module = importlib.import_module(f"{PACKAGE}.readings")

    off = module.Readings.from_row(
        (1, b"\x00", timedelta(hours=8, minutes=30), date(2024, 5, 1), Decimal("9.95")),
    )
    on = module.Readings.from_row(
        (2, b"\x01", timedelta(0), date(2024, 5, 2), Decimal("0.50")),
    )

    assert off.enabled is False
    assert on.enabled is True
    assert off.opens == datetime.min + timedelta(hours=8, minutes=30)
    assert type(off.taken_on) is datetime
    assert off.taken_on == datetime(2024, 5, 1)
    assert type(off.price) is float
    assert off.price == 9.95


@pytest.mark.parametrize("name", ["x_helpers", "__init__", "test_x_helpers"])
def test_support_file_collision(
    tmp_path: Path,
    tables: list[TableDescription],
    name: str,
) -> None:
    """Test a table named like a support file is rejected before writing."""
    clash = TableDescription(
        name,
        (ColumnDescriptor("id", "int", nullable=False, key="PRI"),),
        "",
    )

    with pytest.raises(ModuleNameError, match=name) as excinfo:
        generate_models([*tables, clash], tmp_path / "models", "models")

    assert excinfo.value.table == name
    assert not (tmp_path / "models").exists()
