"""
Shared pytest fixtures and configuration for descriptor-spine tests.

This module provides:
- Isolation from the caller's ``DESCRIPTOR_SPINE_*`` environment
- structlog / settings / log-context reset between tests
- Temporary runtime (bundle + descriptor) and job directories
- A matcher factory wired to those directories

Usage:
    Fixtures are auto-discovered by pytest. Builders for lockfiles, zips and
    descriptor records live in ``tests._support.builders``.
"""

import errno
import os
import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

# Ensure descriptor_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from descriptor_spine.core.logging import clear_context
from descriptor_spine.core.settings import clear_settings_cache
from descriptor_spine.descriptors.bundles import BundleResolver
from descriptor_spine.descriptors.catalog import DescriptorCatalog
from descriptor_spine.descriptors.matcher import DescriptorMatcher
from descriptor_spine.descriptors.models import DescriptorBundle
from descriptor_spine.runtimes.resolver import FingerprintResolver


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every collected test as a unit test."""
    for item in items:
        if item.get_closest_marker("unit") is None:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Strip ``DESCRIPTOR_SPINE_*`` variables and reset global state.

    Settings are cached and structlog is configured process-wide, so both
    are reset before and after every test.
    """
    for key in list(os.environ):
        if key.startswith("DESCRIPTOR_SPINE_"):
            monkeypatch.delenv(key, raising=False)

    clear_settings_cache()
    clear_context()
    yield
    clear_settings_cache()
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def deny_stat(monkeypatch: pytest.MonkeyPatch) -> Callable[[str, Path], None]:
    """
    Make one ``Path`` check (``is_file``, ``is_dir``, ...) raise
    ``PermissionError`` for a single path; every other path is unaffected.

        deny_stat("is_file", job_dir / "locked")
    """

    def deny(method: str, target: Path) -> None:
        original = getattr(Path, method)

        def checked(self, *args, **kwargs):
            if self == target:
                raise PermissionError(errno.EACCES, "Permission denied", str(self))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, method, checked)

    return deny


@pytest.fixture
def runtimes_dir(tmp_path: Path) -> Path:
    """Directory holding bundles and descriptor files (the archive folder)."""
    path = tmp_path / "runtimes"
    path.mkdir()
    return path


@pytest.fixture
def job_dir(tmp_path: Path) -> Path:
    """An empty job execution directory."""
    path = tmp_path / "job"
    path.mkdir()
    return path


@pytest.fixture
def default_bundle(runtimes_dir: Path) -> DescriptorBundle:
    return DescriptorBundle.default(runtimes_dir / "default-runtime.tar.gz")


@pytest.fixture
def make_matcher(
    runtimes_dir: Path, default_bundle: DescriptorBundle
) -> Callable[..., DescriptorMatcher]:
    """
    Factory for a matcher reading descriptors and bundles from ``runtimes_dir``.

        matcher = make_matcher(dependency_matching=False)
    """

    def factory(*, dependency_matching: bool = True, catalog_dir: Path | None = None) -> DescriptorMatcher:
        return DescriptorMatcher(
            DescriptorCatalog(catalog_dir if catalog_dir is not None else runtimes_dir),
            BundleResolver(runtimes_dir),
            default_bundle,
            dependency_matching=dependency_matching,
            fingerprints=FingerprintResolver(),
        )

    return factory
