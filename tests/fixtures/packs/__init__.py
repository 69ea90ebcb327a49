"""Builders for pack manifests and helpers for inspecting release archives."""

from __future__ import annotations

import io
import zipfile
from typing import Any

WORK_DIR = "/work"

BP_UUID = "8f3b2c1a-0000-4000-8000-000000000001"
RP_UUID = "8f3b2c1a-0000-4000-8000-000000000002"


def make_manifest(
    uuid: str,
    version: Any = "1.2.3",
    *,
    name: str = "Example Pack",
    description: str = "An example pack",
    modules: list[dict[str, Any]] | None = None,
    dependencies: list[dict[str, Any]] | None = None,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a pack manifest document."""
    manifest: dict[str, Any] = {
        "format_version": 2,
        "header": {
            "name": name,
            "description": description,
            "uuid": uuid,
            "version": version,
            "min_engine_version": [1, 21, 0],
        },
        "modules": modules
        if modules is not None
        else [{"type": "data", "uuid": uuid[:-1] + "f", "version": version}],
    }
    if dependencies is not None:
        manifest["dependencies"] = dependencies
    if metadata is not None:
        manifest["metadata"] = metadata
    return manifest


def read_zip(content: bytes) -> dict[str, bytes]:
    """Map every entry name of a zip archive to its bytes (directories end with '/')."""
    with zipfile.ZipFile(io.BytesIO(content)) as zf:
        return {info.filename: zf.read(info) for info in zf.infolist()}


def zip_comments(content: bytes) -> dict[str, str]:
    """Map every entry name of a zip archive to its decoded comment."""
    with zipfile.ZipFile(io.BytesIO(content)) as zf:
        return {info.filename: info.comment.decode("utf-8") for info in zf.infolist()}
