"""DescriptorEngine — the entry point the job dispatcher calls.

Wires settings into a ``DescriptorMatcher`` once (the default bundle is built
here and injected), then serves ``select_bundle`` calls. Each call binds the
analysis id into the logging context and reports fatal errors at error level
before re-raising them as job-start failures.

Example:
    >>> engine = DescriptorEngine.from_settings()
    >>> bundle = engine.select_bundle("/jobs/42", analysis_id=42)
    >>> bundle.path, bundle.is_default
    (PosixPath('/opt/runtimes/r41_hades.tar.gz'), False)

Tags:
    descriptor-spine, execution, engine, entry-point

Doc-Types:
    api-reference
"""

from __future__ import annotations

import os
from typing import Any

from descriptor_spine.core.errors import DescriptorSpineError
from descriptor_spine.core.logging import LogContext, get_logger
from descriptor_spine.core.settings import DescriptorSettings, get_settings
from descriptor_spine.descriptors.bundles import BundleResolver
from descriptor_spine.descriptors.catalog import DescriptorCatalog
from descriptor_spine.descriptors.matcher import DescriptorMatcher
from descriptor_spine.descriptors.models import DescriptorBundle
from descriptor_spine.runtimes.extractors import DEFAULT_EXTRACTORS, FingerprintExtractor
from descriptor_spine.runtimes.resolver import FingerprintResolver

logger = get_logger(__name__)


class DescriptorEngine:
    """Stateless bundle selection for incoming jobs; safe to share across threads."""

    def __init__(self, matcher: DescriptorMatcher) -> None:
        self._matcher = matcher

    @classmethod
    def from_settings(
        cls,
        settings: DescriptorSettings | None = None,
        *,
        extractors: tuple[FingerprintExtractor, ...] = DEFAULT_EXTRACTORS,
    ) -> DescriptorEngine:
        settings = settings or get_settings()
        matcher = DescriptorMatcher(
            DescriptorCatalog(settings.effective_catalog_dir),
            BundleResolver(settings.archive_folder),
            DescriptorBundle.default(settings.default_archive),
            dependency_matching=settings.dependency_matching,
            fingerprints=FingerprintResolver(extractors),
        )
        return cls(matcher)

    @property
    def matcher(self) -> DescriptorMatcher:
        return self._matcher

    @property
    def default_bundle(self) -> DescriptorBundle:
        return self._matcher.default_bundle

    def select_bundle(
        self,
        execution_directory: str | os.PathLike[str],
        analysis_id: Any = None,
        requested_descriptor_id: str | None = None,
    ) -> DescriptorBundle:
        """Choose the bundle for one job.

        Args:
            execution_directory: Files the job will run with.
            analysis_id: Opaque id, used only to correlate log lines.
            requested_descriptor_id: Descriptor explicitly asked for, if any.

        Raises:
            DescriptorSpineError: Any fatal catalog or fingerprint condition.
        """
        with LogContext(analysis_id=analysis_id):
            try:
                bundle = self._matcher.select(
                    execution_directory,
                    requested_descriptor_id,
                    analysis_id=analysis_id,
                )
            except DescriptorSpineError as exc:
                if exc.context.analysis_id is None and analysis_id is not None:
                    exc.with_context(analysis_id=str(analysis_id))
                logger.error("bundle.selection_failed", error=exc.to_dict())
                raise

            logger.info(
                "bundle.selected",
                descriptor_id=bundle.descriptor.id,
                label=bundle.descriptor.display_name,
                path=str(bundle.path),
                default=bundle.is_default,
            )
            return bundle


def select_bundle(
    execution_directory: str | os.PathLike[str],
    analysis_id: Any = None,
    requested_descriptor_id: str | None = None,
    *,
    settings: DescriptorSettings | None = None,
) -> DescriptorBundle:
    """One-shot ``DescriptorEngine.from_settings(settings).select_bundle(...)``."""
    engine = DescriptorEngine.from_settings(settings)
    return engine.select_bundle(execution_directory, analysis_id, requested_descriptor_id)
