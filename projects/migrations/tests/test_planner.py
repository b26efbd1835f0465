"""Tests for ordering migrations."""

from introspect import TableDescription
from migrations.planner import OrderedMigration, plan


def table(name: str, order: int = 0) -> TableDescription:
    """Build a table description with a stub creation statement."""
    return TableDescription(name, (), f"CREATE TABLE `{name}` ()", order)


def test_plan_orders_by_directive() -> None:
    """Test lower directives come first regardless of name."""
    ordered = plan([table("orders", 2), table("customers", 1)])

    assert [migration.table for migration in ordered] == ["customers", "orders"]


def test_plan_breaks_ties_by_name() -> None:
    """Test equal orders fall back to table name."""
    ordered = plan([table("logs"), table("audit")])

    assert [migration.table for migration in ordered] == ["audit", "logs"]


def test_plan_negative_orders_first() -> None:
    """Test negative directives sort before undirected tables."""
    ordered = plan([table("zeta"), table("alpha", 5), table("bootstrap", -1)])

    assert [migration.table for migration in ordered] == ["bootstrap", "zeta", "alpha"]


def test_plan_single_table() -> None:
    """Test a single table is planned as-is."""
    assert plan([table("only", 3)]) == [
        OrderedMigration("only", "CREATE TABLE `only` ()", 3),
    ]


def test_plan_empty() -> None:
    """Test no tables plan no migrations."""
    assert plan([]) == []


def test_plan_accepts_iterators() -> None:
    """Test tables may be streamed."""
    ordered = plan(iter([table("b"), table("a")]))

    assert [migration.table for migration in ordered] == ["a", "b"]
