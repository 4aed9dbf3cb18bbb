"""
descriptor-spine - runtime bundle selection for analysis jobs.

Inspects a job's execution directory, fingerprints the runtime environment it
declares (``renv.lock`` files, nested zips included), and resolves that
fingerprint against a catalog of descriptors to choose the runtime bundle the
job runs with, falling back to a default bundle.

- descriptor_spine.archive: directory + nested zip traversal
- descriptor_spine.runtimes: fingerprint extraction and version rules
- descriptor_spine.descriptors: catalog, bundle resolution, matcher
- descriptor_spine.execution: engine entry point and bounded pool
- descriptor_spine.core: errors, logging, settings
"""

__version__ = "0.1.0"

from descriptor_spine.core.errors import DescriptorSpineError  # noqa: E402
from descriptor_spine.descriptors.models import Descriptor, DescriptorBundle  # noqa: E402
from descriptor_spine.execution.engine import DescriptorEngine, select_bundle  # noqa: E402
from descriptor_spine.runtimes._types import RuntimeFingerprint, RuntimeRequirement  # noqa: E402

__all__ = [
    "__version__",
    "Descriptor",
    "DescriptorBundle",
    "DescriptorEngine",
    "DescriptorSpineError",
    "RuntimeFingerprint",
    "RuntimeRequirement",
    "select_bundle",
]
