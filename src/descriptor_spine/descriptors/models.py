"""Descriptor data model.

A descriptor is one JSON record from the catalog directory::

    {
      "id": "r-4.1-hades",
      "label": "R 4.1 with HADES 1.3",
      "bundleName": "r41_hades.tar.gz",
      "executionRuntimes": [
        {"type": "R", "version": ">=4.1", "dependencies": {"DatabaseConnector": ">=5.0"}}
      ]
    }

Unknown fields are ignored. ``DescriptorBundle`` pairs a descriptor with the
existing bundle file that provides it; ``DescriptorBundle.default`` pairs the
configured default archive with ``DEFAULT_DESCRIPTOR``, which has no
requirements.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from descriptor_spine.runtimes._types import RequirementCheck, RuntimeFingerprint, RuntimeRequirement


class Descriptor(BaseModel):
    """Declarative environment record: requirements plus a bundle reference."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    label: str | None = None
    bundle_name: str = Field(alias="bundleName")
    execution_runtimes: tuple[RuntimeRequirement, ...] = Field(default=(), alias="executionRuntimes")

    @property
    def display_name(self) -> str:
        return self.label or self.id

    @property
    def runtime_types(self) -> list[str]:
        return sorted({runtime.type for runtime in self.execution_runtimes})

    def match(self, fingerprint: RuntimeFingerprint) -> DescriptorMatch:
        """Check every requirement of the fingerprint's type."""
        checks = tuple(
            runtime.check(fingerprint)
            for runtime in self.execution_runtimes
            if runtime.type == fingerprint.type
        )
        return DescriptorMatch(self, fingerprint.type, checks)


DEFAULT_DESCRIPTOR = Descriptor(id="default", label="Default", bundle_name="")


@dataclass(frozen=True)
class DescriptorMatch:
    """Outcome of matching one descriptor against one fingerprint.

    The descriptor matches when at least one of its requirements of the
    fingerprint's type has no mismatches.
    """

    descriptor: Descriptor
    runtime_type: str
    checks: tuple[RequirementCheck, ...] = ()

    @property
    def matched(self) -> bool:
        return any(check.matched for check in self.checks)

    @property
    def matched_requirement(self) -> RuntimeRequirement | None:
        for check in self.checks:
            if check.matched:
                return check.requirement
        return None

    def reason(self) -> str | None:
        """Why the descriptor did not match, or ``None`` if it did."""
        if self.matched:
            return None
        if not self.checks:
            return f"no execution runtime of type [{self.runtime_type}] declared"
        if len(self.checks) == 1:
            return self.checks[0].reason()
        return " | ".join(f"runtime #{i}: {check.reason()}" for i, check in enumerate(self.checks, 1))


@dataclass(frozen=True)
class DescriptorBundle:
    """A resolved bundle path and the descriptor it satisfies."""

    path: Path
    descriptor: Descriptor

    @classmethod
    def default(cls, path: str | Path) -> DescriptorBundle:
        return cls(Path(path), DEFAULT_DESCRIPTOR)

    @property
    def is_default(self) -> bool:
        return self.descriptor is DEFAULT_DESCRIPTOR

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "descriptor_id": self.descriptor.id,
            "label": self.descriptor.display_name,
            "default": self.is_default,
        }
