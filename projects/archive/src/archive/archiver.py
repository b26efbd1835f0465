"""Archival of previously generated output directories."""

from __future__ import annotations

from datetime import datetime
from logging import getLogger
from pathlib import Path

logger = getLogger(__name__)

ARCHIVE_FORMAT = "%Y_%m_%d_%H_%M_%S"


class ArchiveError(OSError):
    """Raised when an existing output directory cannot be moved aside."""


def archive_path(path: Path, now: datetime | None = None) -> Path:
    """Return the timestamped name an output directory is archived under."""
    stamp = (now or datetime.now()).strftime(ARCHIVE_FORMAT)  # noqa: DTZ005
    return path.with_name(f"{path.name}_{stamp}")


def archive(path: Path, now: datetime | None = None) -> Path | None:
    """Move an existing output directory aside so it can be rolled back to.

    Missing paths and paths that are not directories are left alone.

    Returns:
        The archived location, or None when there was nothing to archive.

    Raises:
        ArchiveError: If the directory exists but cannot be renamed.

    """
    path = Path(path)
    if not path.is_dir():
        logger.debug("Nothing to archive at %s", path)
        return None

    target = archive_path(path, now)
    try:
        path.rename(target)
    except OSError as err:
        msg = f"Cannot archive {path} to {target}: {err}"
        raise ArchiveError(msg) from err

    logger.info("Archived %s to %s", path, target)
    return target
