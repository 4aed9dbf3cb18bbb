"""Runtime Fingerprint Resolver — at most one fingerprint per job directory.

Drives ``archive.traverse`` over a job's execution directory and offers every
entry to the extractor chain. A job directory is expected to carry zero or one
lockfile; a second one is a packaging defect, so resolution aborts with
``AmbiguousFingerprintError`` naming both logical paths instead of picking one.

The traversal generator is closed on every exit path, which unwinds all open
file and zip handles even when resolution aborts halfway through a nested
archive.
"""

from __future__ import annotations

import os
from contextlib import closing

from descriptor_spine.archive.reader import traverse
from descriptor_spine.core.errors import AmbiguousFingerprintError
from descriptor_spine.core.logging import get_logger
from descriptor_spine.runtimes._types import RuntimeFingerprint
from descriptor_spine.runtimes.extractors import (
    DEFAULT_EXTRACTORS,
    FingerprintExtractor,
    extract_fingerprint,
)

logger = get_logger(__name__)


class FingerprintResolver:
    """Fingerprints a job directory using an ordered extractor chain.

    Stateless; one instance can serve concurrent jobs.
    """

    def __init__(self, extractors: tuple[FingerprintExtractor, ...] = DEFAULT_EXTRACTORS) -> None:
        self._extractors = tuple(extractors)

    @property
    def extractors(self) -> tuple[FingerprintExtractor, ...]:
        return self._extractors

    def resolve(self, root: str | os.PathLike[str]) -> RuntimeFingerprint | None:
        """Return the single fingerprint under ``root``, or ``None``.

        Raises:
            AmbiguousFingerprintError: A second fingerprint was found.
            ArchiveTraversalError: The directory or a container could not be read.
            FingerprintParseError: A lockfile was recognized but malformed.
        """
        found: RuntimeFingerprint | None = None

        with closing(traverse(root)) as entries:
            for entry in entries:
                fingerprint = extract_fingerprint(entry.logical_path, entry.stream, self._extractors)
                if fingerprint is None:
                    continue
                logger.info("fingerprint.detected", path=entry.logical_path, fingerprint=str(fingerprint))
                if found is not None:
                    logger.error(
                        "fingerprint.ambiguous",
                        first=found.source,
                        second=fingerprint.source,
                    )
                    raise AmbiguousFingerprintError([found.source, fingerprint.source])
                found = fingerprint

        if found is None:
            logger.info("fingerprint.none_found", root=str(root))
        return found

    def resolve_all(self, root: str | os.PathLike[str]) -> list[RuntimeFingerprint]:
        """Return every fingerprint under ``root`` without the ambiguity check."""
        fingerprints: list[RuntimeFingerprint] = []
        with closing(traverse(root)) as entries:
            for entry in entries:
                fingerprint = extract_fingerprint(entry.logical_path, entry.stream, self._extractors)
                if fingerprint is not None:
                    logger.info("fingerprint.detected", path=entry.logical_path, fingerprint=str(fingerprint))
                    fingerprints.append(fingerprint)
        return fingerprints
