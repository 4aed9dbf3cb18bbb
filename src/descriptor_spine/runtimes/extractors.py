"""Runtime fingerprint extractors.

An extractor looks at one (logical path, stream) pair and either returns a
``RuntimeFingerprint`` or declines with ``None``. Extractors are kept in a fixed,
ordered tuple; ``extract_fingerprint`` tries them in order and the first
non-empty result wins.

Streams can only be read once. Extractors decline on the file name alone,
without touching the stream, whenever they can; once an extractor has read
from a stream, no later extractor is offered it. Adding a new environment
type means appending an extractor to ``DEFAULT_EXTRACTORS``.

Example:
    >>> with open("renv.lock", "rb") as fh:
    ...     stream = EntryStream(fh, os.fstat(fh.fileno()).st_size, name="renv.lock")
    ...     fingerprint = extract_fingerprint("renv.lock", stream)
    >>> fingerprint.type
    'R'
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from descriptor_spine.archive.reader import entry_name
from descriptor_spine.archive.streams import EntryStream
from descriptor_spine.core.errors import FingerprintParseError
from descriptor_spine.core.logging import get_logger
from descriptor_spine.runtimes._types import RuntimeFingerprint

logger = get_logger(__name__)


@runtime_checkable
class FingerprintExtractor(Protocol):
    """Recognize-and-parse capability for one environment type.

    ``try_parse`` may consume ``stream``; it must not be called again on the
    same stream afterwards.
    """

    runtime_type: str

    def try_parse(self, logical_path: str, stream: EntryStream) -> RuntimeFingerprint | None:
        ...


# ---------------------------------------------------------------------------
# renv.lock
# ---------------------------------------------------------------------------


class _RenvPackage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str = Field(alias="Version")


class _RenvInterpreter(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str | None = Field(default=None, alias="Version")


class _RenvLock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    r: _RenvInterpreter | None = Field(default=None, alias="R")
    packages: dict[str, _RenvPackage] = Field(default_factory=dict, alias="Packages")


class RenvLockExtractor:
    """Parses R ``renv.lock`` files into ``"R"`` fingerprints.

    The interpreter version comes from ``R.Version`` and each entry of
    ``Packages`` contributes ``name → Version``. A file named ``renv.lock``
    that is not a valid lockfile is an error, not a decline.
    """

    runtime_type = "R"
    file_name = "renv.lock"

    def try_parse(self, logical_path: str, stream: EntryStream) -> RuntimeFingerprint | None:
        if entry_name(logical_path) != self.file_name:
            return None

        raw = stream.read()
        try:
            lock = _RenvLock.model_validate_json(raw)
        except ValidationError as exc:
            raise FingerprintParseError(logical_path, _summarize(exc), cause=exc) from exc

        return RuntimeFingerprint(
            type=self.runtime_type,
            dependencies={name: package.version for name, package in lock.packages.items()},
            source=logical_path,
            interpreter_version=lock.r.version if lock.r else None,
        )


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{location}: {first.get('msg', 'invalid')}"


DEFAULT_EXTRACTORS: tuple[FingerprintExtractor, ...] = (RenvLockExtractor(),)


def extract_fingerprint(
    logical_path: str,
    stream: EntryStream,
    extractors: tuple[FingerprintExtractor, ...] = DEFAULT_EXTRACTORS,
) -> RuntimeFingerprint | None:
    """Return the first fingerprint any extractor finds in ``stream``."""
    for extractor in extractors:
        fingerprint = extractor.try_parse(logical_path, stream)
        if fingerprint is not None:
            return fingerprint
        if stream.touched:
            logger.debug(
                "fingerprint.stream_consumed",
                path=logical_path,
                extractor=type(extractor).__name__,
            )
            return None
    return None
