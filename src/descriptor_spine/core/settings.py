"""
Centralized settings for descriptor-spine.

Manifesto:
    The engine reads three things from the environment: where bundles live,
    which bundle is the default, and whether dependency matching is on.
    ``DescriptorSettings`` validates them once at startup; the default bundle
    built from them is injected into the matcher rather than looked up
    globally.

All fields can be set via ``DESCRIPTOR_SPINE_*`` environment variables (e.g.
``DESCRIPTOR_SPINE_ARCHIVE_FOLDER=/opt/runtimes``) or a ``.env`` file.

Tags:
    descriptor-spine, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DescriptorSettings(BaseSettings):
    """Descriptor-spine configuration.

    Fields
    ──────
    archive_folder      : Directory holding runtime bundles (and descriptors)
    catalog_dir         : Descriptor directory, defaults to ``archive_folder``
    default_archive     : Bundle used when nothing else resolves
    dependency_matching : Match job lockfiles against descriptors
    max_workers         : Bounded selection pool size
    log_level           : Structlog log level
    log_format          : ``json`` or ``console``
    """

    model_config = SettingsConfigDict(
        env_prefix="DESCRIPTOR_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Bundles ──────────────────────────────────────────────────
    archive_folder: Path | None = Field(default=None, description="Runtime bundle directory")
    catalog_dir: Path | None = Field(default=None, description="Descriptor directory (defaults to archive_folder)")
    default_archive: Path = Field(default=Path("default-runtime.tar.gz"))

    # ── Matching ─────────────────────────────────────────────────
    dependency_matching: bool = Field(default=True)

    # ── Execution ────────────────────────────────────────────────
    max_workers: int = Field(default=4, ge=1)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        if value not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got {value!r}")
        return value

    @property
    def effective_catalog_dir(self) -> Path | None:
        return self.catalog_dir if self.catalog_dir is not None else self.archive_folder


_settings_cache: dict[str, DescriptorSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DescriptorSettings:
    """Load, validate, and cache a :class:`DescriptorSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = DescriptorSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
