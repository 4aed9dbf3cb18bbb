"""Archive Reader — flatten a job directory and its nested zips.

``traverse(root)`` walks a directory tree and lazily yields one
``ArchiveEntry`` per regular file. Files ending in ``.zip`` are not yielded
themselves: they are opened as containers and their entries are yielded
instead, recursively, with logical paths of the form::

    /jobs/42/study.zip:/lib/deps.zip:/renv.lock

Architecture:

    .. code-block:: text

        traverse(root)
          └── _walk_file(path)          with open(path) → EntryStream
                ├── plain file          → yield ArchiveEntry
                └── *.zip               → _walk_zip(logical, stream)
                      └── per member    with zf.open(member) → EntryStream
                            ├── plain   → yield ArchiveEntry
                            └── *.zip   → _walk_zip(...)   (any depth)

Every handle is owned by a ``with`` block inside the generator, so handles are
released on normal completion, when the consumer raises, and when the consumer
stops early and closes the generator.

Each yielded stream is only valid until the generator is advanced.

Tags:
    descriptor-spine, archive, zip, traversal, streaming

Doc-Types:
    api-reference
"""

from __future__ import annotations

import os
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from descriptor_spine.archive.streams import EntryStream
from descriptor_spine.core.errors import ArchiveTraversalError
from descriptor_spine.core.logging import get_logger

logger = get_logger(__name__)

ARCHIVE_SUFFIX = ".zip"
ENTRY_SEPARATOR = ":/"

_OPEN_ERRORS = (OSError, RuntimeError, NotImplementedError, zipfile.BadZipFile)


@dataclass(frozen=True)
class ArchiveEntry:
    """One file found during traversal."""

    logical_path: str
    stream: EntryStream

    @property
    def name(self) -> str:
        return entry_name(self.logical_path)


def entry_name(logical_path: str) -> str:
    """Final path component of a logical path, inside the innermost container."""
    tail = logical_path.rsplit(ENTRY_SEPARATOR, 1)[-1]
    return tail.replace("\\", "/").rsplit("/", 1)[-1]


def is_archive(name: str) -> bool:
    return name.lower().endswith(ARCHIVE_SUFFIX)


def traverse(root: str | os.PathLike[str]) -> Iterator[ArchiveEntry]:
    """Lazily yield every file under ``root``, descending into zips.

    ``root`` may also be a single file (or a single zip).

    Raises:
        ArchiveTraversalError: ``root`` is missing or any file, directory
            or container cannot be opened or read.
    """
    root_path = Path(root)
    is_file, is_dir = _kind(root_path)
    if is_file:
        yield from _walk_file(root_path)
        return
    if not is_dir:
        raise ArchiveTraversalError(str(root_path), "no such file or directory")

    for path in _iter_files(root_path):
        yield from _walk_file(path)


def _iter_files(directory: Path) -> Iterator[Path]:
    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise ArchiveTraversalError(str(directory), str(exc), cause=exc) from exc

    for child in children:
        is_file, is_dir = _kind(child, follow_links=False)
        if is_dir:
            yield from _iter_files(child)
        elif is_file:
            yield child


def _kind(path: Path, *, follow_links: bool = True) -> tuple[bool, bool]:
    """``(is_file, is_dir)`` for ``path``, with stat failures wrapped.

    Without ``follow_links`` a symlinked directory counts as neither.
    """
    try:
        if path.is_file():
            return True, False
        return False, path.is_dir() and (follow_links or not path.is_symlink())
    except OSError as exc:
        raise ArchiveTraversalError(str(path), str(exc), cause=exc) from exc


def _walk_file(path: Path) -> Iterator[ArchiveEntry]:
    logical = str(path)
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise ArchiveTraversalError(logical, str(exc), cause=exc) from exc

    with handle:
        size = os.fstat(handle.fileno()).st_size
        with EntryStream(handle, size, name=logical) as stream:
            yield from _expand(logical, stream)


def _expand(logical: str, stream: EntryStream) -> Iterator[ArchiveEntry]:
    if is_archive(logical):
        yield from _walk_zip(logical, stream)
    else:
        yield ArchiveEntry(logical, stream)


def _walk_zip(logical: str, stream: EntryStream) -> Iterator[ArchiveEntry]:
    try:
        container = zipfile.ZipFile(stream)
    except _OPEN_ERRORS as exc:
        raise ArchiveTraversalError(logical, f"cannot open zip container: {exc}", cause=exc) from exc

    with container:
        members = [info for info in container.infolist() if not info.is_dir()]
        logger.debug("archive.opened", path=logical, entries=len(members))

        for info in members:
            entry_path = f"{logical}{ENTRY_SEPARATOR}{info.filename}"
            try:
                member = container.open(info)
            except _OPEN_ERRORS as exc:
                raise ArchiveTraversalError(entry_path, f"cannot open zip entry: {exc}", cause=exc) from exc

            with member, EntryStream(member, info.file_size, name=entry_path) as entry_stream:
                yield from _expand(entry_path, entry_stream)
