"""Tests for FingerprintResolver (zero-or-one fingerprint per job directory)."""

import pytest
from structlog.testing import capture_logs

from descriptor_spine.core.errors import AmbiguousFingerprintError, FingerprintParseError
from descriptor_spine.runtimes.resolver import FingerprintResolver
from tests._support.builders import renv_lock, write_file, write_zip, zip_bytes


@pytest.fixture
def resolver() -> FingerprintResolver:
    return FingerprintResolver()


class TestResolve:
    def test_no_lockfile(self, resolver, job_dir):
        write_file(job_dir / "main.R", "print('hi')")

        with capture_logs() as logs:
            assert resolver.resolve(job_dir) is None

        assert logs[-1]["event"] == "fingerprint.none_found"

    def test_top_level_lockfile(self, resolver, job_dir):
        write_file(job_dir / "renv.lock", renv_lock({"pkgA": "2.0"}))

        fingerprint = resolver.resolve(job_dir)

        assert fingerprint.type == "R"
        assert fingerprint.dependencies == {"pkgA": "2.0"}
        assert fingerprint.source == str(job_dir / "renv.lock")

    def test_lockfile_two_zips_deep(self, resolver, job_dir):
        inner = zip_bytes({"renv.lock": renv_lock({"pkgA": "2.0"})})
        write_zip(job_dir / "study.zip", {"lib/deps.zip": inner, "main.R": b""})

        fingerprint = resolver.resolve(job_dir)

        assert fingerprint.source == f"{job_dir / 'study.zip'}:/lib/deps.zip:/renv.lock"

    def test_nested_and_top_level_parse_identically(self, resolver, tmp_path):
        lock = renv_lock({"pkgA": "2.0", "pkgB": "1.0-3"})
        top = write_file(tmp_path / "top" / "renv.lock", lock)
        nested = write_zip(tmp_path / "nested" / "a.zip", {"b.zip": zip_bytes({"renv.lock": lock})})

        from_top = resolver.resolve(top.parent)
        from_nested = resolver.resolve(nested.parent)

        assert from_top.dependencies == from_nested.dependencies
        assert from_top.interpreter_version == from_nested.interpreter_version
        assert from_top.source != from_nested.source

    def test_resolves_single_file_root(self, resolver, job_dir):
        lock = write_file(job_dir / "renv.lock", renv_lock())
        assert resolver.resolve(lock).source == str(lock)


class TestAmbiguity:
    def test_two_identical_lockfiles_are_ambiguous(self, resolver, job_dir):
        lock = renv_lock({"pkgA": "2.0"})
        write_file(job_dir / "renv.lock", lock)
        write_file(job_dir / "sub" / "renv.lock", lock)

        with capture_logs() as logs, pytest.raises(AmbiguousFingerprintError) as excinfo:
            resolver.resolve(job_dir)

        assert excinfo.value.paths == [str(job_dir / "renv.lock"), str(job_dir / "sub" / "renv.lock")]
        assert any(log["event"] == "fingerprint.ambiguous" and log["log_level"] == "error" for log in logs)

    def test_top_level_and_nested_are_ambiguous(self, resolver, job_dir):
        write_file(job_dir / "renv.lock", renv_lock())
        write_zip(job_dir / "study.zip", {"renv.lock": renv_lock()})

        with pytest.raises(AmbiguousFingerprintError) as excinfo:
            resolver.resolve(job_dir)

        assert excinfo.value.paths[1] == f"{job_dir / 'study.zip'}:/renv.lock"

    def test_resolve_all_reports_every_lockfile(self, resolver, job_dir):
        write_file(job_dir / "renv.lock", renv_lock())
        write_zip(job_dir / "study.zip", {"renv.lock": renv_lock()})

        assert len(resolver.resolve_all(job_dir)) == 2


class TestFailures:
    def test_malformed_lockfile_is_fatal(self, resolver, job_dir):
        write_file(job_dir / "renv.lock", "{ truncated")
        with pytest.raises(FingerprintParseError):
            resolver.resolve(job_dir)

    def test_custom_extractor_chain(self, job_dir):
        write_file(job_dir / "renv.lock", renv_lock())
        resolver = FingerprintResolver(extractors=())

        assert resolver.extractors == ()
        assert resolver.resolve(job_dir) is None
