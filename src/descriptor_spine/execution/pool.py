"""SelectionPool — ThreadPool-bounded bundle selection.

Archive extraction holds file handles for as long as a traversal runs, so a
host dispatching many jobs at once should bound how many selections run
concurrently. ``SelectionPool`` runs each ``select_bundle`` call on a worker
from a fixed-size ``ThreadPoolExecutor`` and reports how many are in flight.

ARCHITECTURE
────────────
::

    SelectionPool(engine, max_workers=4)
      ├── .submit(dir, analysis_id, descriptor_id) ─ Future[DescriptorBundle]
      ├── .active_tasks                           ─ selections running now
      └── .shutdown()                             ─ drain pool

Fatal selection errors surface through ``Future.result()``.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from descriptor_spine.core.logging import get_logger
from descriptor_spine.core.settings import DescriptorSettings, get_settings
from descriptor_spine.descriptors.models import DescriptorBundle
from descriptor_spine.execution.engine import DescriptorEngine

logger = get_logger(__name__)


class SelectionPool:
    """Bounded worker pool in front of a ``DescriptorEngine``.

    Example:
        >>> with SelectionPool(DescriptorEngine.from_settings(), max_workers=2) as pool:
        ...     future = pool.submit("/jobs/42", analysis_id=42)
        ...     bundle = future.result()
    """

    def __init__(self, engine: DescriptorEngine, max_workers: int = 4) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._engine = engine
        self._max_workers = max_workers
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="descriptor-select")
        self._lock = threading.Lock()
        self._active = 0

    @classmethod
    def from_settings(cls, settings: DescriptorSettings | None = None) -> SelectionPool:
        settings = settings or get_settings()
        return cls(DescriptorEngine.from_settings(settings), max_workers=settings.max_workers)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def active_tasks(self) -> int:
        with self._lock:
            return self._active

    def submit(
        self,
        execution_directory: str | os.PathLike[str],
        analysis_id: Any = None,
        requested_descriptor_id: str | None = None,
    ) -> Future[DescriptorBundle]:
        """Queue one selection; returns immediately."""

        def run() -> DescriptorBundle:
            with self._lock:
                self._active += 1
            try:
                return self._engine.select_bundle(execution_directory, analysis_id, requested_descriptor_id)
            finally:
                with self._lock:
                    self._active -= 1

        logger.debug("selection.submitted", analysis_id=analysis_id)
        return self._pool.submit(run)

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> SelectionPool:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=True)
