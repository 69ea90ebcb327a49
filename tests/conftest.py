"""Shared pytest fixtures for Add-On Releaser tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from addon_releaser.core.config.models import ReleaserConfig
from addon_releaser.core.io import AbsolutePath, FakeByteFetcher, FakeFileSystem, absolute_path
from tests.fixtures.packs import WORK_DIR

# ============================================================================
# Filesystem Fixtures
# ============================================================================


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide a fresh in-memory filesystem."""
    return FakeFileSystem()


@pytest.fixture
def fetcher() -> FakeByteFetcher:
    """Provide a byte fetcher with no canned responses."""
    return FakeByteFetcher()


@pytest.fixture
def work_dir() -> AbsolutePath:
    """Invocation directory used by pipeline tests."""
    return absolute_path(WORK_DIR)


@pytest.fixture
def add_pack(fs: FakeFileSystem):
    """Seed a pack folder: ``add_pack("packs/BP", manifest, {"a.txt": "x"})``."""

    def _add(
        path: str,
        manifest: dict[str, Any] | str | None,
        files: dict[str, bytes | str] | None = None,
    ) -> Path:
        root = Path(WORK_DIR) / path
        if manifest is not None:
            text = manifest if isinstance(manifest, str) else json.dumps(manifest, indent=2)
            fs.add_file(root / "manifest.json", text)
        for name, content in (files or {}).items():
            fs.add_file(root / name, content)
        return root

    return _add


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def make_config():
    """Build a validated ``ReleaserConfig`` from keyword overrides."""

    def _make(**overrides: Any) -> ReleaserConfig:
        data: dict[str, Any] = {"destination": "dist"}
        data.update(overrides)
        return ReleaserConfig.model_validate(data)

    return _make
