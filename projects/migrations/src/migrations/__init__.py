"""Migration script generation module for modelgen."""

from migrations.emitter import MigrationScript, down_script, emit, up_script
from migrations.main import generate_migrations
from migrations.planner import OrderedMigration, plan

__all__ = [
    "MigrationScript",
    "OrderedMigration",
    "down_script",
    "emit",
    "generate_migrations",
    "plan",
    "up_script",
]
