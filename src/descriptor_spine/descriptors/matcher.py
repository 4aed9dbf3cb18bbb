"""Descriptor Matcher — pick the bundle a job runs with.

Selection precedence (first rule that yields an existing bundle wins):

    .. code-block:: text

        select(execution_directory, requested_id)
          │
          ├── catalog empty ─────────────────────────────────────▶ default
          │
          ├── 1. explicit request (requested_id set)
          │      ├── 0 descriptors with that id ── soft miss ──┐
          │      ├── >1 descriptors with that id ── DuplicateDescriptorError
          │      └── 1 descriptor ── bundle exists? ── yes ──▶ bundle
          │                                           no ─────┤
          │                                                   ▼
          ├── 2. dependency matching (if enabled)
          │      ├── no fingerprint ── soft miss ──────────────┐
          │      ├── >1 fingerprint ── AmbiguousFingerprintError
          │      ├── nothing matched ── log reasons ───────────┤
          │      └── first match in catalog order ── bundle? ──▶ bundle
          │                                                   ▼
          └── 3. default bundle ─────────────────────────────▶ default

Soft misses are logged at info level and fall through; fatal errors (catalog
read/parse failures, duplicate ids, ambiguous or unreadable fingerprints)
propagate to the caller untouched.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

import structlog

from descriptor_spine.core.errors import DuplicateDescriptorError
from descriptor_spine.core.logging import get_logger
from descriptor_spine.descriptors.bundles import BundleResolver
from descriptor_spine.descriptors.catalog import DescriptorCatalog
from descriptor_spine.descriptors.models import Descriptor, DescriptorBundle, DescriptorMatch
from descriptor_spine.runtimes._types import RuntimeFingerprint
from descriptor_spine.runtimes.resolver import FingerprintResolver

logger = get_logger(__name__)


class DescriptorMatcher:
    """Applies the selection precedence for one job at a time.

    Holds no mutable state; the catalog is reloaded on every ``select``.

    Args:
        catalog: Source of descriptors.
        bundles: Maps a descriptor to an existing bundle file.
        default_bundle: Returned when no rule produces a bundle.
        dependency_matching: Enables rule 2.
        fingerprints: Resolver used by rule 2.
    """

    def __init__(
        self,
        catalog: DescriptorCatalog,
        bundles: BundleResolver,
        default_bundle: DescriptorBundle,
        *,
        dependency_matching: bool = True,
        fingerprints: FingerprintResolver | None = None,
    ) -> None:
        self._catalog = catalog
        self._bundles = bundles
        self._default_bundle = default_bundle
        self._dependency_matching = dependency_matching
        self._fingerprints = fingerprints or FingerprintResolver()

    @property
    def default_bundle(self) -> DescriptorBundle:
        return self._default_bundle

    @property
    def dependency_matching(self) -> bool:
        return self._dependency_matching

    def select(
        self,
        execution_directory: str | os.PathLike[str],
        requested_id: str | None = None,
        *,
        analysis_id: Any = None,
    ) -> DescriptorBundle:
        log = logger
        if analysis_id is not None and "analysis_id" not in structlog.contextvars.get_contextvars():
            # Direct callers; DescriptorEngine already binds it through LogContext.
            log = logger.bind(analysis_id=analysis_id)
        available = self._catalog.load()

        if not available:
            log.info("descriptor.catalog_empty", requested_id=requested_id)
            return self._default_bundle

        if requested_id:
            bundle = self._select_requested(available, requested_id, analysis_id, log)
            if bundle is not None:
                return bundle

        if not self._dependency_matching:
            log.info("descriptor.matching_disabled")
            return self._use_default(log)

        log.info("descriptor.matching_started", candidates=len(available))
        fingerprint = self._fingerprints.resolve(execution_directory)
        if fingerprint is None:
            log.info("descriptor.no_fingerprint", directory=str(execution_directory))
            return self._use_default(log)

        bundle = self._select_matching(available, fingerprint, log)
        if bundle is not None:
            return bundle
        return self._use_default(log)

    @staticmethod
    def evaluate(descriptors: Sequence[Descriptor], fingerprint: RuntimeFingerprint) -> list[DescriptorMatch]:
        """Match every descriptor against ``fingerprint``, preserving order."""
        return [descriptor.match(fingerprint) for descriptor in descriptors]

    # -- rules ---------------------------------------------------------------

    def _select_requested(
        self,
        available: Sequence[Descriptor],
        requested_id: str,
        analysis_id: Any,
        log: Any,
    ) -> DescriptorBundle | None:
        found = [descriptor for descriptor in available if descriptor.id == requested_id]

        if not found:
            log.info("descriptor.requested_not_found", requested_id=requested_id)
            return None

        if len(found) > 1:
            bundle_names = [descriptor.bundle_name for descriptor in found]
            log.error("descriptor.requested_duplicate", requested_id=requested_id, bundles=bundle_names)
            error = DuplicateDescriptorError(requested_id, bundle_names)
            if analysis_id is not None:
                error.with_context(analysis_id=str(analysis_id))
            raise error

        descriptor = found[0]
        bundle = self._bundles.resolve(descriptor)
        if bundle is None:
            log.info("descriptor.requested_bundle_missing", requested_id=requested_id)
            return None

        log.info("descriptor.requested_selected", requested_id=requested_id, bundle=str(bundle.path))
        return bundle

    def _select_matching(
        self,
        available: Sequence[Descriptor],
        fingerprint: RuntimeFingerprint,
        log: Any,
    ) -> DescriptorBundle | None:
        results = self.evaluate(available, fingerprint)
        matched = [result for result in results if result.matched]

        if not matched:
            log.info(
                "descriptor.none_matched",
                total=len(available),
                fingerprint=fingerprint.source,
            )
            for result in results:
                log.info(
                    "descriptor.not_matched",
                    descriptor=result.descriptor.display_name,
                    reason=result.reason(),
                )
            return None

        chosen, *discarded = matched
        for extra in discarded:
            log.info(
                "descriptor.match_discarded",
                descriptor=extra.descriptor.display_name,
                bundle=extra.descriptor.bundle_name,
                kept=chosen.descriptor.bundle_name,
            )

        bundle = self._bundles.resolve(chosen.descriptor)
        if bundle is None:
            log.info("descriptor.matched_bundle_missing", descriptor=chosen.descriptor.display_name)
            return None

        log.info("descriptor.matched", descriptor=chosen.descriptor.display_name, bundle=str(bundle.path))
        return bundle

    def _use_default(self, log: Any) -> DescriptorBundle:
        log.info("descriptor.using_default", bundle=str(self._default_bundle.path))
        return self._default_bundle
