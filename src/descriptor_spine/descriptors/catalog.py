"""Descriptor Catalog — descriptor records loaded from a flat directory.

Every regular file directly inside the catalog directory whose name starts
with ``descriptor`` holds one JSON descriptor record. Files are read in name
order, which is the catalog iteration order the matcher relies on for
tie-breaking.

Failure policy:

* directory not configured, or does not exist → empty catalog
* path is not a directory, or cannot be listed/read → ``CatalogReadError``
* any malformed record → ``DescriptorParseError`` for the whole load

Nothing is cached: each ``load()`` re-reads the directory, so descriptors
dropped in by operators are picked up by the next job.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from descriptor_spine.core.errors import CatalogReadError, DescriptorParseError
from descriptor_spine.core.logging import get_logger
from descriptor_spine.descriptors.models import Descriptor

logger = get_logger(__name__)

DESCRIPTOR_PREFIX = "descriptor"


class DescriptorCatalog:
    """Loads descriptors from ``directory`` on demand.

    Example:
        >>> catalog = DescriptorCatalog("/opt/runtimes")
        >>> [d.id for d in catalog.load()]
        ['r-4.1-hades', 'r-4.2']
        >>> catalog.lookup("r-4.2")
        [Descriptor(id='r-4.2', ...)]
    """

    def __init__(self, directory: str | os.PathLike[str] | None) -> None:
        self._directory = Path(directory) if directory is not None else None

    @property
    def directory(self) -> Path | None:
        return self._directory

    def load(self) -> tuple[Descriptor, ...]:
        """Parse every descriptor file, in file-name order."""
        if self._directory is None:
            return ()
        if not self._stat(self._directory, Path.exists):
            logger.info("catalog.missing", directory=str(self._directory))
            return ()
        if not self._stat(self._directory, Path.is_dir):
            raise CatalogReadError(
                f"Catalog path [{self._directory}] is not a directory",
                path=str(self._directory),
            )

        descriptors = tuple(self._read(path) for path in self._descriptor_files())
        logger.debug("catalog.loaded", directory=str(self._directory), descriptors=len(descriptors))
        return descriptors

    def lookup(self, descriptor_id: str) -> list[Descriptor]:
        """Every descriptor whose ``id`` equals ``descriptor_id``, in load order."""
        return [descriptor for descriptor in self.load() if descriptor.id == descriptor_id]

    def _descriptor_files(self) -> list[Path]:
        try:
            children = sorted(self._directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise CatalogReadError(
                f"Error traversing [{self._directory}]: {exc}",
                path=str(self._directory),
                cause=exc,
            ) from exc
        return [p for p in children if p.name.startswith(DESCRIPTOR_PREFIX) and self._stat(p, Path.is_file)]

    @staticmethod
    def _stat(path: Path, check: Callable[[Path], bool]) -> bool:
        try:
            return check(path)
        except OSError as exc:
            raise CatalogReadError(f"Error checking [{path}]: {exc}", path=str(path), cause=exc) from exc

    @staticmethod
    def _read(path: Path) -> Descriptor:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise CatalogReadError(
                f"Error reading descriptor file [{path.name}]: {exc}",
                path=str(path),
                cause=exc,
            ) from exc

        try:
            return Descriptor.model_validate_json(raw)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
            raise DescriptorParseError(str(path), f"{location}: {first.get('msg', 'invalid')}", cause=exc) from exc
