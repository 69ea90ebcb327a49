"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import json5
import yaml

from addon_releaser.core.config.models import ReleaserConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE_NAME = "add-on-releaser-config.json"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("add-on-releaser-config.json")
        'json'
        >>> detect_format("release.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    text = path.read_text(encoding="utf-8-sig")

    if fmt == "json":
        try:
            data: Any = json5.loads(text)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if data is None:
            data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def load_releaser_config(path: str | Path = DEFAULT_CONFIG_FILE_NAME) -> ReleaserConfig:
    """Load and validate a releaser configuration file.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated ReleaserConfig instance

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If the file is not valid JSON/YAML
        ValidationError: If config is invalid

    Example:
        >>> config = load_releaser_config("add-on-releaser-config.json")
    """
    raw_config = load_config(path)
    config = ReleaserConfig.model_validate(raw_config)
    logger.debug("Loaded configuration from %s (%d packs)", path, len(config.packs))
    return config


@contextmanager
def _import_path_prepended(directory: str | Path | None) -> Iterator[None]:
    if directory is None:
        yield
        return
    entry = str(directory)
    sys.path.insert(0, entry)
    importlib.invalidate_caches()
    try:
        yield
    finally:
        if entry in sys.path:
            sys.path.remove(entry)


def load_version_callback(
    import_path: str, search_path: str | Path | None = None
) -> Callable[..., Any]:
    """Resolve a ``package.module:function`` import path to a callable.

    The console script runs with its own ``bin/`` directory on ``sys.path``,
    so hook modules kept next to the configuration are only importable when
    their directory is passed as ``search_path``.

    Args:
        import_path: Module path and attribute separated by ':'
        search_path: Directory searched before ``sys.path`` while importing

    Returns:
        The referenced callable

    Raises:
        ValueError: If the import path is malformed or does not name a callable
        ImportError: If the module cannot be imported

    Example:
        >>> fn = load_version_callback("my_release_hooks:format_version", project_dir)
    """
    module_name, sep, attr_path = import_path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(
            f"Invalid callback import path {import_path!r}; expected 'package.module:function'"
        )

    with _import_path_prepended(search_path):
        target: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ValueError(f"{module_name!r} has no attribute {attr_path!r}") from e

    if not callable(target):
        raise ValueError(f"Callback {import_path!r} is not callable")
    return target
