"""Runtime fingerprints: what a job directory actually needs.

Architecture::

    _types.py       RuntimeRequirement, RuntimeFingerprint, mismatch records
    versions.py     exact / range / wildcard version satisfaction
    extractors.py   FingerprintExtractor protocol + RenvLockExtractor
    resolver.py     FingerprintResolver (zero-or-one fingerprint per job)
"""

from descriptor_spine.runtimes._types import (
    DependencyMismatch,
    InterpreterMismatch,
    Mismatch,
    RequirementCheck,
    RuntimeFingerprint,
    RuntimeRequirement,
)
from descriptor_spine.runtimes.extractors import (
    DEFAULT_EXTRACTORS,
    FingerprintExtractor,
    RenvLockExtractor,
    extract_fingerprint,
)
from descriptor_spine.runtimes.resolver import FingerprintResolver
from descriptor_spine.runtimes.versions import satisfies

__all__ = [
    "RuntimeFingerprint",
    "RuntimeRequirement",
    "RequirementCheck",
    "DependencyMismatch",
    "InterpreterMismatch",
    "Mismatch",
    "FingerprintExtractor",
    "RenvLockExtractor",
    "DEFAULT_EXTRACTORS",
    "extract_fingerprint",
    "FingerprintResolver",
    "satisfies",
]
