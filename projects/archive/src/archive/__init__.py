"""Module for archiving previously generated output."""

from archive.archiver import ARCHIVE_FORMAT, ArchiveError, archive, archive_path

__all__ = [
    "ARCHIVE_FORMAT",
    "ArchiveError",
    "archive",
    "archive_path",
]
