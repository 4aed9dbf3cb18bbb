"""Archive Reader: flat (logical path, stream) view over directories and nested zips."""

from descriptor_spine.archive.reader import (
    ARCHIVE_SUFFIX,
    ENTRY_SEPARATOR,
    ArchiveEntry,
    entry_name,
    is_archive,
    traverse,
)
from descriptor_spine.archive.streams import EntryStream

__all__ = [
    "ARCHIVE_SUFFIX",
    "ENTRY_SEPARATOR",
    "ArchiveEntry",
    "EntryStream",
    "entry_name",
    "is_archive",
    "traverse",
]
