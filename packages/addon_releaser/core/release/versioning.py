"""Conversion between the version representations found in pack manifests.

A manifest version is either a numeric tuple of up to three integers
(``[1, 2, 3]``) or a semantic-version string (``"1.2.3-beta.1+build.5"``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any, Protocol

from addon_releaser.core.config.models import (
    FileNameVersionFormat,
    PackConfig,
    ReleaseVersionFormat,
)
from addon_releaser.core.release.errors import InvalidVersionTypeError

logger = logging.getLogger(__name__)

VersionValue = list[int] | str

_SUFFIX_RE = re.compile(r"[-+]")


class VersionCallback(Protocol):
    """Renders a pack's header version for use in a release file name."""

    def __call__(self, version: VersionValue, pack: PackConfig) -> Any: ...


def _is_tuple(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str)


def strip_suffix(version: str) -> str:
    """Drop pre-release and build metadata from a semver string.

    Example:
        >>> strip_suffix("1.2.3-preview.20+BUILD.1")
        '1.2.3'
    """
    return _SUFFIX_RE.split(version, maxsplit=1)[0]


def to_numeric_triple(value: Any) -> Any:
    """Convert a semver string to a numeric tuple of at most three parts.

    Tuples pass through unchanged. A string whose leading segments are not
    integers also passes through unchanged.

    Example:
        >>> to_numeric_triple("1.20.3-beta.1")
        [1, 20, 3]
        >>> to_numeric_triple([1, 2])
        [1, 2]
    """
    if not isinstance(value, str):
        return value
    try:
        return [int(part) for part in strip_suffix(value).split(".")[:3]]
    except ValueError:
        logger.warning("Version %r is not numeric; leaving it unchanged", value)
        return value


def to_semantic(value: Any) -> Any:
    """Convert a numeric tuple to a ``major.minor.patch`` string.

    Missing components default to 0. Strings pass through unchanged.

    Example:
        >>> to_semantic([1, 2])
        '1.2.0'
    """
    if not _is_tuple(value):
        return value
    parts = list(value)
    return ".".join(
        str(parts[i]) if i < len(parts) and parts[i] is not None else "0" for i in range(3)
    )


def strip_semantic(version: str, *, strip_build: bool, strip_preview: bool) -> str:
    """Optionally drop build metadata and/or the pre-release part of a semver string.

    Example:
        >>> strip_semantic("1.2.3-preview.20+BUILD.1", strip_build=True, strip_preview=False)
        '1.2.3-preview.20'
    """
    if strip_preview:
        return strip_suffix(version)
    if strip_build:
        return version.split("+", 1)[0]
    return version


def render_dotted(value: VersionValue) -> str:
    """Render a version for ``${version}`` substitution in file contents.

    Example:
        >>> render_dotted([1, 2, 3])
        '1.2.3'
    """
    if _is_tuple(value):
        return ".".join(str(part) for part in value)
    return str(value)


def _convert(
    value: Any,
    fmt: ReleaseVersionFormat,
    strip_build: bool,
    strip_preview: bool,
) -> Any:
    if fmt is ReleaseVersionFormat.TUPLE:
        return to_numeric_triple(value)
    if fmt is ReleaseVersionFormat.SEMVER:
        if isinstance(value, str):
            return strip_semantic(value, strip_build=strip_build, strip_preview=strip_preview)
        return to_semantic(value)
    return value


def normalize_manifest_versions(
    manifest: dict[str, Any],
    fmt: ReleaseVersionFormat,
    *,
    strip_build: bool = False,
    strip_preview: bool = False,
) -> None:
    """Rewrite every version field of a parsed manifest in place.

    Converts ``header.version``, each ``modules[].version`` and the version
    of each ``dependencies[]`` entry that references a pack by ``uuid``.
    When the header version string is converted to a tuple, occurrences of
    the original string in the header name and description are replaced
    with the string stripped of its suffix.
    """
    if fmt is ReleaseVersionFormat.CURRENT:
        return

    header = manifest.get("header")
    if isinstance(header, dict) and "version" in header:
        original = header["version"]
        converted = _convert(original, fmt, strip_build, strip_preview)
        if isinstance(original, str) and converted != original:
            replacement = converted if isinstance(converted, str) else strip_suffix(original)
            for key in ("name", "description"):
                if isinstance(header.get(key), str):
                    header[key] = header[key].replace(original, replacement)
        header["version"] = converted

    for module in manifest.get("modules") or []:
        if isinstance(module, dict) and "version" in module:
            module["version"] = _convert(module["version"], fmt, strip_build, strip_preview)

    for dependency in manifest.get("dependencies") or []:
        # dependencies referenced by module_name keep their version untouched
        if isinstance(dependency, dict) and "uuid" in dependency and "version" in dependency:
            dependency["version"] = _convert(
                dependency["version"], fmt, strip_build, strip_preview
            )


def render_file_name_version(
    version: VersionValue,
    fmt: FileNameVersionFormat,
    pack: PackConfig,
    callback: VersionCallback | None = None,
) -> str:
    """Render a header version for a release file name.

    Args:
        version: Header version of the version-source pack
        fmt: dashed, current, or callback
        pack: Pack owning the version (passed to the callback)
        callback: Strategy used when ``fmt`` is callback

    Raises:
        InvalidVersionTypeError: If the callback returns a non-string
        ValueError: If ``fmt`` is callback but no callback is configured

    Example:
        >>> render_file_name_version("1.2.3", FileNameVersionFormat.DASHED, pack)
        '1-2-3'
    """
    if fmt is FileNameVersionFormat.CALLBACK:
        if callback is None:
            raise ValueError("file_name_version.format is 'callback' but no callback is configured")
        rendered = callback(version, pack)
        if not isinstance(rendered, str):
            raise InvalidVersionTypeError(rendered)
        return rendered

    if fmt is FileNameVersionFormat.DASHED:
        if _is_tuple(version):
            return "-".join(str(part) for part in version)
        return str(version).replace(".", "-")

    return render_dotted(version)
