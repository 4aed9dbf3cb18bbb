"""Bundle Resolver — descriptor → existing bundle file.

A missing bundle is never an error here: the matcher treats ``None`` as a
soft miss and moves on to the next precedence rule. A bundle path that
cannot be checked at all (permission denied on the archive folder) raises
``CatalogReadError``.
"""

from __future__ import annotations

import os
from pathlib import Path

from descriptor_spine.core.errors import CatalogReadError
from descriptor_spine.core.logging import get_logger
from descriptor_spine.descriptors.models import Descriptor, DescriptorBundle

logger = get_logger(__name__)


class BundleResolver:
    """Resolves ``bundle_name`` against the archive folder."""

    def __init__(self, archive_folder: str | os.PathLike[str] | None = None) -> None:
        self._archive_folder = Path(archive_folder) if archive_folder is not None else None

    @property
    def archive_folder(self) -> Path | None:
        return self._archive_folder

    def candidate_path(self, descriptor: Descriptor) -> Path:
        if self._archive_folder is None:
            return Path(descriptor.bundle_name)
        return self._archive_folder / descriptor.bundle_name

    def resolve(self, descriptor: Descriptor) -> DescriptorBundle | None:
        path = self.candidate_path(descriptor)
        try:
            exists = bool(descriptor.bundle_name) and path.is_file()
        except OSError as exc:
            raise CatalogReadError(
                f"Error checking bundle file [{path}]: {exc}",
                path=str(path),
                cause=exc,
            ).with_context(descriptor_id=descriptor.id) from exc

        if exists:
            return DescriptorBundle(path, descriptor)

        logger.info(
            "bundle.not_found",
            descriptor=descriptor.display_name,
            descriptor_id=descriptor.id,
            path=str(path),
        )
        return None
