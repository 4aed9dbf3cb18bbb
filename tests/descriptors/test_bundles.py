"""Tests for BundleResolver."""

import pytest
from structlog.testing import capture_logs

from descriptor_spine.core.errors import CatalogReadError
from descriptor_spine.descriptors.bundles import BundleResolver
from descriptor_spine.descriptors.models import Descriptor
from tests._support.builders import write_file


def test_existing_bundle_resolves(runtimes_dir):
    write_file(runtimes_dir / "r41.tar.gz", b"bundle")
    descriptor = Descriptor(id="r41", bundle_name="r41.tar.gz")

    bundle = BundleResolver(runtimes_dir).resolve(descriptor)

    assert bundle.path == runtimes_dir / "r41.tar.gz"
    assert bundle.descriptor is descriptor
    assert not bundle.is_default


def test_missing_bundle_is_soft(runtimes_dir):
    descriptor = Descriptor(id="r41", label="R 4.1", bundle_name="r41.tar.gz")

    with capture_logs() as logs:
        assert BundleResolver(runtimes_dir).resolve(descriptor) is None

    assert logs[0]["event"] == "bundle.not_found"
    assert logs[0]["descriptor"] == "R 4.1"
    assert logs[0]["path"] == str(runtimes_dir / "r41.tar.gz")


def test_directory_is_not_a_bundle(runtimes_dir):
    (runtimes_dir / "r41.tar.gz").mkdir()
    assert BundleResolver(runtimes_dir).resolve(Descriptor(id="r41", bundle_name="r41.tar.gz")) is None


def test_empty_bundle_name_never_resolves(runtimes_dir):
    assert BundleResolver(runtimes_dir).resolve(Descriptor(id="x", bundle_name="")) is None


def test_without_archive_folder_bundle_name_is_the_path(tmp_path):
    bundle_path = write_file(tmp_path / "abs.tar.gz", b"bundle")
    resolver = BundleResolver()

    assert resolver.archive_folder is None
    assert resolver.resolve(Descriptor(id="x", bundle_name=str(bundle_path))).path == bundle_path


def test_unstattable_bundle_path_is_fatal(runtimes_dir, deny_stat):
    path = runtimes_dir / "r41.tar.gz"
    deny_stat("is_file", path)

    with pytest.raises(CatalogReadError) as excinfo:
        BundleResolver(runtimes_dir).resolve(Descriptor(id="r41", bundle_name="r41.tar.gz"))

    assert excinfo.value.context.path == str(path)
    assert excinfo.value.context.descriptor_id == "r41"
    assert isinstance(excinfo.value.cause, PermissionError)
