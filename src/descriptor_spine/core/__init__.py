"""Core primitives: typed errors, structured logging, settings."""

from descriptor_spine.core.errors import (
    AmbiguousFingerprintError,
    ArchiveTraversalError,
    CatalogError,
    CatalogReadError,
    DescriptorParseError,
    DescriptorSpineError,
    DuplicateDescriptorError,
    ErrorCategory,
    ErrorContext,
    FingerprintError,
    FingerprintParseError,
)
from descriptor_spine.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from descriptor_spine.core.settings import DescriptorSettings, clear_settings_cache, get_settings

__all__ = [
    # errors
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
    # logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
    # settings
    "DescriptorSettings",
    "get_settings",
    "clear_settings_cache",
]
