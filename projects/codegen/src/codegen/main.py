"""Main module for generating data-access modules from a schema."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from archive import archive

from codegen.assembly import assemble
from codegen.rendering import (
    SUPPORT_FILES,
    render,
    render_support_files,
    template_environment,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from introspect import TableDescription

logger = getLogger(__name__)


class ModuleNameError(ValueError):
    """Raised when a table module would overwrite a support file."""

    def __init__(self, table: str) -> None:
        """Initialize with the name of the colliding table."""
        self.table = table
        super().__init__(
            f"Table {table!r} collides with the generated support file {table}.py",
        )


def render_models(tables: Iterable[TableDescription], package: str) -> dict[str, str]:
    """Render every file of the generated package, keyed by file name.

    Raises:
        ModuleNameError: If a table name matches a support file name.

    """
    environment = template_environment()
    files: dict[str, str] = {}
    for table in tables:
        name = f"{table.name}.py"
        if name in SUPPORT_FILES:
            raise ModuleNameError(table.name)
        files[name] = render(assemble(table), package, environment)
    files.update(render_support_files(package, environment))
    return files


def generate_models(
    tables: Iterable[TableDescription],
    output: Path,
    package: str,
) -> list[Path]:
    """Write one module per table plus the support files into ``output``.

    Everything is rendered before the output directory is touched, so a type
    or template error leaves prior output in place. An existing output
    directory is archived before writing.
    """
    files = render_models(tables, package)

    archive(output)
    output.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for name, content in files.items():
        path = output / name
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
