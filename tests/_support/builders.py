"""
Builders for on-disk test material: renv lockfiles, (nested) zips and
descriptor records.

Kept out of conftest because several helpers compose (a zip built in memory
becomes a member of another zip) and read better as plain functions.
"""

from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path
from typing import Any


def renv_lock(packages: dict[str, str] | None = None, r_version: str | None = "4.1.2") -> bytes:
    """Serialize a minimal but realistic ``renv.lock``."""
    payload: dict[str, Any] = {
        "Packages": {
            name: {
                "Package": name,
                "Version": version,
                "Source": "Repository",
                "Repository": "CRAN",
            }
            for name, version in (packages or {}).items()
        }
    }
    if r_version is not None:
        payload["R"] = {
            "Version": r_version,
            "Repositories": [{"Name": "CRAN", "URL": "https://cloud.r-project.org"}],
        }
    return json.dumps(payload, indent=2).encode("utf-8")


def zip_bytes(members: dict[str, bytes]) -> bytes:
    """Build a zip in memory; directory members end with ``/``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buffer.getvalue()


def write_zip(path: Path, members: dict[str, bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(zip_bytes(members))
    return path


def write_file(path: Path, data: bytes | str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        data = data.encode("utf-8")
    path.write_bytes(data)
    return path


def descriptor_record(
    descriptor_id: str,
    bundle_name: str,
    *,
    label: str | None = None,
    runtimes: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": descriptor_id,
        "bundleName": bundle_name,
        "executionRuntimes": runtimes or [],
        **extra,
    }
    if label is not None:
        record["label"] = label
    return record


def write_descriptor(directory: Path, file_name: str, record: dict[str, Any]) -> Path:
    """Write one descriptor JSON file into the catalog directory."""
    return write_file(directory / file_name, json.dumps(record))


def r_runtime(dependencies: dict[str, str] | None = None, version: str | None = None) -> dict[str, Any]:
    runtime: dict[str, Any] = {"type": "R", "dependencies": dependencies or {}}
    if version is not None:
        runtime["version"] = version
    return runtime
