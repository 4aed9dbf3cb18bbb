"""Runtime types — requirements, fingerprints and structured mismatches.

A ``RuntimeRequirement`` is what a descriptor declares it can run; a
``RuntimeFingerprint`` is what an extractor observed in a job directory.
Comparing the two yields a ``RequirementCheck`` holding zero or more
mismatch records. Mismatches stay structured so the comparison itself is
testable; they are only rendered to text for log lines.

Architecture:

    .. code-block:: text

        RuntimeRequirement (declared)        RuntimeFingerprint (observed)
        ┌──────────────────────────┐         ┌──────────────────────────┐
        │ type: "R"                │         │ type: "R"                │
        │ version: ">=4.0"         │  check  │ interpreter_version 4.1.2│
        │ dependencies:            │ ──────▶ │ dependencies:            │
        │   pkgA: ">=2.0"          │         │   pkgA: "2.0"            │
        └──────────────────────────┘         │ source: job/renv.lock    │
                     │                       └──────────────────────────┘
                     ▼
        RequirementCheck(mismatches=(DependencyMismatch|InterpreterMismatch, ...))

Tags:
    descriptor-spine, runtimes, fingerprint, requirements, matching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from descriptor_spine.runtimes.versions import satisfies


# =============================================================================
# Observed
# =============================================================================


@dataclass(frozen=True)
class RuntimeFingerprint:
    """Dependency/version set observed in a job directory.

    Attributes:
        type: Extractor family tag (``"R"`` for renv lockfiles)
        dependencies: package name → observed version
        source: Logical path the fingerprint was read from
        interpreter_version: Interpreter version recorded by the lockfile
    """

    type: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    source: str = ""
    interpreter_version: str | None = None

    def __str__(self) -> str:
        version = f" {self.interpreter_version}" if self.interpreter_version else ""
        return f"{self.type}{version} with {len(self.dependencies)} dependencies from [{self.source}]"


# =============================================================================
# Mismatches
# =============================================================================


@dataclass(frozen=True)
class DependencyMismatch:
    """A required dependency is absent or has an unacceptable version."""

    name: str
    required: str
    observed: str | None

    def __str__(self) -> str:
        if self.observed is None:
            return f"{self.name} required [{self.required}] but not present"
        return f"{self.name} required [{self.required}] but found [{self.observed}]"


@dataclass(frozen=True)
class InterpreterMismatch:
    """The interpreter version does not meet the requirement."""

    required: str
    observed: str | None

    def __str__(self) -> str:
        if self.observed is None:
            return f"interpreter required [{self.required}] but version unknown"
        return f"interpreter required [{self.required}] but found [{self.observed}]"


Mismatch = Union[DependencyMismatch, InterpreterMismatch]


@dataclass(frozen=True)
class RequirementCheck:
    """Result of comparing one requirement against one fingerprint."""

    requirement: RuntimeRequirement
    mismatches: tuple[Mismatch, ...] = ()

    @property
    def matched(self) -> bool:
        return not self.mismatches

    def reason(self) -> str:
        return "; ".join(str(m) for m in self.mismatches)


# =============================================================================
# Declared
# =============================================================================


class RuntimeRequirement(BaseModel):
    """One descriptor's constraints for a given environment type."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    version: str | None = None

    @field_validator("dependencies", mode="before")
    @classmethod
    def _stringify_versions(cls, value):
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value):
        if value is None:
            return None
        return str(value)

    def check(self, fingerprint: RuntimeFingerprint) -> RequirementCheck:
        """Compare against ``fingerprint``; the caller has matched ``type``."""
        mismatches: list[Mismatch] = []

        if self.version is not None and not satisfies(fingerprint.interpreter_version, self.version):
            mismatches.append(InterpreterMismatch(self.version, fingerprint.interpreter_version))

        for name, required in self.dependencies.items():
            observed = fingerprint.dependencies.get(name)
            if not satisfies(observed, required):
                mismatches.append(DependencyMismatch(name, required, observed))

        return RequirementCheck(self, tuple(mismatches))
