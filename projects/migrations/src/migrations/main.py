"""Main module for writing migration files from a schema."""

from __future__ import annotations

from logging import getLogger
from time import time
from typing import TYPE_CHECKING

from archive import archive

from migrations.emitter import emit
from migrations.planner import plan

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from introspect import TableDescription

logger = getLogger(__name__)


def generate_migrations(
    tables: Iterable[TableDescription],
    output: Path,
    base_sequence: int | None = None,
) -> list[Path]:
    """Write up and down scripts for every table into ``output``.

    Args:
        tables: Described tables, in any order
        output: Directory receiving the scripts; archived first if it exists
        base_sequence: First sequence number, the current Unix time by default

    Returns:
        Paths written, in planned order

    """
    base = int(time()) if base_sequence is None else base_sequence
    scripts = emit(plan(tables), base)

    archive(output)
    output.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for script in scripts:
        up = output / script.up_filename
        up.write_text(script.up, encoding="utf-8")
        down = output / script.down_filename
        down.write_text(script.down, encoding="utf-8")
        logger.debug("Wrote migration %s", script.stem)
        written.extend((up, down))
    return written
