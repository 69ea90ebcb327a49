"""Glob matching of pack-relative paths.

Patterns are matched segment by segment with ``fnmatch``; ``**`` matches
zero or more whole segments and ``{a,b}`` expands to alternatives.
Backslashes in paths and patterns are normalised to ``/``.
"""

from __future__ import annotations

import fnmatch
from functools import lru_cache

from addon_releaser.core.archive import split_path


def _expand_braces(pattern: str) -> list[str]:
    """Expand the first ``{a,b}`` group recursively.

    Example:
        >>> _expand_braces("*.{js,ts}")
        ['*.js', '*.ts']
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    options: list[str] = []
    option_start = start + 1
    for i in range(start, len(pattern)):
        char = pattern[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[option_start:i])
                head, tail = pattern[:start], pattern[i + 1 :]
                expanded: list[str] = []
                for option in options:
                    expanded.extend(_expand_braces(head + option + tail))
                return expanded
        elif char == "," and depth == 1:
            options.append(pattern[option_start:i])
            option_start = i + 1

    # unbalanced brace: treat literally
    return [pattern]


def _match_segments(path: tuple[str, ...], pattern: tuple[str, ...]) -> bool:
    if not pattern:
        return not path
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_segments(path[i:], rest) for i in range(len(path) + 1))
    if not path:
        return False
    return fnmatch.fnmatchcase(path[0], head) and _match_segments(path[1:], rest)


@lru_cache(maxsize=512)
def _compile(pattern: str) -> tuple[tuple[str, ...], ...]:
    return tuple(tuple(split_path(option)) for option in _expand_braces(pattern))


def matches_glob(path: str, pattern: str) -> bool:
    """Check whether a pack-relative path matches a glob pattern.

    Example:
        >>> matches_glob("logs/debug/out.log", "**/*.log")
        True
        >>> matches_glob("out.log", "**/*.log")
        True
        >>> matches_glob("scripts\\\\main.js", "scripts/*.js")
        True
    """
    segments = tuple(split_path(path))
    return any(_match_segments(segments, option) for option in _compile(pattern))


def matches_any(path: str, patterns: list[str]) -> bool:
    """Check whether a path matches at least one of ``patterns``."""
    return any(matches_glob(path, pattern) for pattern in patterns)
