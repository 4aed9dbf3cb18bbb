"""Bounded, read-once views over a parent stream.

An ``EntryStream`` exposes one file, or one zip entry, as a raw binary stream
limited to that entry's size. It never closes the stream it wraps, so the
parent container stays usable for the next entry, and it records whether
anything has been read from it so extractor dispatch can refuse to hand a
consumed stream to a second extractor.

When the parent is seekable the view is seekable too (positions are relative
to the entry start), which is what lets ``zipfile.ZipFile`` open a nested
archive directly over an entry without extracting it to disk.
"""

from __future__ import annotations

import errno
import io
import os
import zipfile
import zlib
from typing import BinaryIO

from descriptor_spine.core.errors import ArchiveTraversalError

_READ_ERRORS = (OSError, EOFError, zipfile.BadZipFile, zlib.error)


class EntryStream(io.RawIOBase):
    """Read-only window of ``length`` bytes over ``source``.

    Args:
        source: Parent stream positioned at the start of the entry.
        length: Entry size in bytes; reads stop there even if the parent
            has more data.
        name: Logical path, used in error messages and by ``zipfile``.
    """

    def __init__(self, source: BinaryIO, length: int, *, name: str) -> None:
        super().__init__()
        self._source = source
        self._length = max(length, 0)
        self._position = 0
        self._start: int | None = None
        self._touched = False
        self.name = name

        if source.seekable():
            try:
                self._start = source.tell()
            except OSError:
                self._start = None

    # -- state ---------------------------------------------------------------

    @property
    def length(self) -> int:
        return self._length

    @property
    def remaining(self) -> int:
        return self._length - self._position

    @property
    def touched(self) -> bool:
        """True once any byte has been read or the position moved."""
        return self._touched

    # -- io.RawIOBase --------------------------------------------------------

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return self._start is not None

    def tell(self) -> int:
        self._checkClosed()
        return self._position

    def readinto(self, buffer) -> int:
        self._checkClosed()
        self._touched = True
        want = min(len(buffer), self.remaining)
        if want <= 0:
            return 0
        try:
            data = self._source.read(want)
        except _READ_ERRORS as exc:
            raise ArchiveTraversalError(self.name, f"read failed: {exc}", cause=exc) from exc
        count = len(data)
        buffer[:count] = data
        self._position += count
        return count

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._checkClosed()
        if self._start is None:
            raise io.UnsupportedOperation(f"{self.name} is not seekable")

        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._position + offset
        elif whence == os.SEEK_END:
            target = self._length + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if target < 0:
            raise OSError(errno.EINVAL, f"negative seek position {target}")
        target = min(target, self._length)

        self._touched = True
        try:
            self._source.seek(self._start + target)
        except _READ_ERRORS as exc:
            raise ArchiveTraversalError(self.name, f"seek failed: {exc}", cause=exc) from exc
        self._position = target
        return target

    def __repr__(self) -> str:
        return f"EntryStream({self.name!r}, length={self._length}, position={self._position})"
