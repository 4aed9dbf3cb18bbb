"""
Structured error types for descriptor-spine.

Every failure that must abort a job's bundle selection is raised as a
``DescriptorSpineError`` subclass. Soft conditions (requested descriptor not
found, bundle file missing, nothing matched) are never raised: the matcher logs
them and falls through to the next precedence rule.

Manifesto:
    - **Fatal means fatal:** Anything raised here propagates to the caller
      and is reported as a job-start failure, never masked by the default
      bundle
    - **Rich Context:** Errors carry analysis id, descriptor id and path
    - **Error Chaining:** The underlying ``OSError`` / ``ValueError`` is kept

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                    DescriptorSpineError                       │
        │              (category, context, cause)                       │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  CatalogError                    FingerprintError             │
        │       │                               │                       │
        │  CatalogReadError (STORAGE)      ArchiveTraversalError        │
        │  DescriptorParseError (PARSE)    FingerprintParseError        │
        │  DuplicateDescriptorError        AmbiguousFingerprintError    │
        │  (VALIDATION)                    (VALIDATION)                 │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = DuplicateDescriptorError("r-4.1", ["a.zip", "b.zip"])
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.with_context(analysis_id="42").context.analysis_id
    '42'

Tags:
    error-handling, exception-hierarchy, error-context, descriptor-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        STORAGE: Disk and file system errors (listing, opening, reading)
        PARSE: Malformed descriptor records or lockfiles
        VALIDATION: Integrity violations (duplicate ids, ambiguous fingerprints)
        CONFIG: Invalid settings
        INTERNAL: Bugs, unexpected state
    """

    STORAGE = "STORAGE"
    PARSE = "PARSE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        analysis_id: Job the failure happened for (diagnostic correlation only)
        descriptor_id: Descriptor id involved, if any
        path: File or directory involved, if any
        metadata: Additional key-value pairs
    """

    analysis_id: str | None = None
    descriptor_id: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["analysis_id", "descriptor_id", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DescriptorSpineError(Exception):
    """
    Base exception for all descriptor-spine errors.

    Subclasses set ``default_category``; callers may override it per
    instance. The optional ``cause`` is chained as ``__cause__`` so
    tracebacks show the original I/O or parse failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DescriptorSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CatalogReadError("Cannot list", path=str(d)).with_context(
                analysis_id="42"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CATALOG ERRORS
# =============================================================================


class CatalogError(DescriptorSpineError):
    """Descriptor catalog could not be loaded or violates integrity."""

    default_category = ErrorCategory.CONFIG


class CatalogReadError(CatalogError):
    """Catalog directory or a descriptor file could not be read."""

    default_category = ErrorCategory.STORAGE

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if path is not None:
            self.context.path = path


class DescriptorParseError(CatalogError):
    """A descriptor file is not a valid descriptor record."""

    default_category = ErrorCategory.PARSE

    def __init__(self, path: str, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Error getting descriptor from file [{path}]: {reason}", **kwargs)
        self.context.path = path


class DuplicateDescriptorError(CatalogError):
    """More than one descriptor carries the requested id."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, descriptor_id: str, bundle_names: Sequence[str], **kwargs: Any):
        self.descriptor_id = descriptor_id
        self.bundle_names = list(bundle_names)
        joined = ", ".join(f"[{name}]" for name in self.bundle_names)
        super().__init__(
            f"Multiple descriptors found for requested id [{descriptor_id}]: {joined}",
            **kwargs,
        )
        self.context.descriptor_id = descriptor_id


# =============================================================================
# FINGERPRINT ERRORS
# =============================================================================


class FingerprintError(DescriptorSpineError):
    """Runtime fingerprint of a job directory could not be determined."""

    default_category = ErrorCategory.STORAGE


class ArchiveTraversalError(FingerprintError):
    """I/O failure walking a job directory or opening a (nested) zip."""

    def __init__(self, path: str, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Error traversing [{path}]: {reason}", **kwargs)
        self.context.path = path


class FingerprintParseError(FingerprintError):
    """A file recognized as a lockfile could not be parsed."""

    default_category = ErrorCategory.PARSE

    def __init__(self, path: str, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Error parsing runtime lockfile [{path}]: {reason}", **kwargs)
        self.context.path = path


class AmbiguousFingerprintError(FingerprintError):
    """More than one runtime fingerprint was found in one job directory."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, paths: Sequence[str], **kwargs: Any):
        self.paths = list(paths)
        joined = " and ".join(f"[{p}]" for p in self.paths)
        super().__init__(f"Multiple environment fingerprints detected: {joined}, aborting", **kwargs)
        self.context.metadata["paths"] = self.paths


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DescriptorSpineError",
    "CatalogError",
    "CatalogReadError",
    "DescriptorParseError",
    "DuplicateDescriptorError",
    "FingerprintError",
    "ArchiveTraversalError",
    "FingerprintParseError",
    "AmbiguousFingerprintError",
]
