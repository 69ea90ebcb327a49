"""Utility functions for HTTP client operations."""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urljoin

# scheme followed by "://", e.g. "https://", "file://"
_ABSOLUTE_URI_RE = re.compile(r"^[^:/\\]+://")


def is_absolute_uri(value: str) -> bool:
    """Check whether a string names a remote resource rather than a local path.

    Example:
        >>> is_absolute_uri("https://example.com/icon.png")
        True
        >>> is_absolute_uri("assets/icon.png")
        False
        >>> is_absolute_uri("C:\\\\assets\\\\icon.png")
        False
    """
    return bool(_ABSOLUTE_URI_RE.match(value))


def join_url(base_url: str, path: str) -> str:
    """Join base URL with path in a predictable way.

    Absolute URIs are returned unchanged; an empty base URL means every
    request path must be absolute.

    Args:
        base_url: Base URL (e.g. "https://pypi.org") or ""
        path: Request path (e.g. "/pypi/addon-releaser/json") or absolute URI

    Returns:
        Joined URL
    """
    if is_absolute_uri(path) or not base_url:
        return path
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, path.lstrip("/"))


def safe_snippet(content: bytes, limit: int) -> str:
    """Extract a text snippet from response content for error messages.

    Truncates content and decodes as UTF-8 with replacement for invalid bytes.
    """
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def redact_headers(headers: Mapping[str, str], redact: tuple[str, ...]) -> dict[str, str]:
    """Copy ``headers`` with the values of ``redact`` (case-insensitive) masked."""
    red = {name.lower() for name in redact}
    return {k: ("***REDACTED***" if k.lower() in red else v) for k, v in headers.items()}
