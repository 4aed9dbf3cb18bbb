"""Tests for SelectionPool."""

import threading

import pytest

from descriptor_spine.core.errors import AmbiguousFingerprintError
from descriptor_spine.core.settings import DescriptorSettings
from descriptor_spine.descriptors.models import DescriptorBundle
from descriptor_spine.execution.engine import DescriptorEngine
from descriptor_spine.execution.pool import SelectionPool
from tests._support.builders import renv_lock, write_file


class _BlockingEngine:
    """Engine stand-in that holds every selection until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = []

    def select_bundle(self, execution_directory, analysis_id=None, requested_descriptor_id=None):
        self.calls.append((execution_directory, analysis_id, requested_descriptor_id))
        self.started.set()
        assert self.release.wait(timeout=5)
        return DescriptorBundle.default("default.tar.gz")


def test_rejects_non_positive_workers():
    with pytest.raises(ValueError):
        SelectionPool(_BlockingEngine(), max_workers=0)


def test_active_tasks_tracks_running_selections():
    engine = _BlockingEngine()
    with SelectionPool(engine, max_workers=2) as pool:
        future = pool.submit("/jobs/1", analysis_id=1, requested_descriptor_id="r41")
        assert engine.started.wait(timeout=5)
        assert pool.active_tasks == 1

        engine.release.set()
        assert future.result(timeout=5).is_default

    assert pool.active_tasks == 0
    assert engine.calls == [("/jobs/1", 1, "r41")]


def test_runs_real_selection(runtimes_dir, job_dir):
    settings = DescriptorSettings(_env_file=None, archive_folder=runtimes_dir, max_workers=3)
    with SelectionPool.from_settings(settings) as pool:
        assert pool.max_workers == 3
        futures = [pool.submit(job_dir, analysis_id=i) for i in range(5)]
        assert all(f.result(timeout=10).is_default for f in futures)


def test_errors_surface_through_future(runtimes_dir, job_dir):
    write_file(runtimes_dir / "descriptor_a.json", '{"id": "a", "bundleName": "a.tar.gz"}')
    write_file(job_dir / "renv.lock", renv_lock())
    write_file(job_dir / "sub" / "renv.lock", renv_lock())
    engine = DescriptorEngine.from_settings(DescriptorSettings(_env_file=None, archive_folder=runtimes_dir))

    with SelectionPool(engine, max_workers=1) as pool:
        future = pool.submit(job_dir)
        with pytest.raises(AmbiguousFingerprintError):
            future.result(timeout=10)
        assert pool.active_tasks == 0


def test_submit_after_shutdown_fails():
    pool = SelectionPool(_BlockingEngine(), max_workers=1)
    pool.shutdown()
    with pytest.raises(RuntimeError):
        pool.submit("/jobs/1")
