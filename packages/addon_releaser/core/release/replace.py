"""Find-and-replace directives applied to file text.

Configurations are written for a JavaScript ``String.prototype.replace``
contract, so the same rules apply here:

- a literal ``find`` replaces its first occurrence only;
- a regex replaces its first match unless ``flags`` contains ``g``;
- replacement templates understand ``$$``, ``$&``, ``$``` ``, ``$'``,
  ``$1``-``$99`` and ``$<name>``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from addon_releaser.core.config.models import FindAndReplaceInFileModification

logger = logging.getLogger(__name__)

VERSION_PLACEHOLDER = "${version}"

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,  # Python patterns are unicode-aware already
}

# JS named group "(?<name>" but not lookbehind "(?<=" / "(?<!"
_JS_NAMED_GROUP_RE = re.compile(r"\(\?<(?![=!])")
_TEMPLATE_TOKEN_RE = re.compile(r"\$(\$|&|`|'|\d{1,2}|<[^>]*>)")


def compile_js_regex(find: str, flags: str = "") -> tuple[re.Pattern[str], bool]:
    """Compile a JavaScript-style regex source and flag string.

    Returns:
        The compiled pattern and whether every match should be replaced

    Raises:
        re.error: If the pattern is invalid
        ValueError: If ``flags`` contains an unknown flag
    """
    compiled_flags = 0
    global_replace = False
    for flag in flags:
        if flag == "g":
            global_replace = True
        elif flag == "y":
            logger.debug("Sticky regex flag 'y' is treated as a plain match")
        elif flag in _FLAG_MAP:
            compiled_flags |= _FLAG_MAP[flag]
        else:
            raise ValueError(f"Unsupported regex flag {flag!r} in {flags!r}")
    source = _JS_NAMED_GROUP_RE.sub("(?P<", find)
    return re.compile(source, compiled_flags), global_replace


def expand_js_template(template: str, match: re.Match[str]) -> str:
    """Expand a JavaScript replacement template against one match.

    Example:
        >>> m = re.search(r"v(\\d+)", "build v42")
        >>> expand_js_template("[$1|$&]", m)
        '[42|v42]'
    """
    group_count = len(match.groups())
    subject = match.string

    def token(m: re.Match[str]) -> str:
        key = m.group(1)
        if key == "$":
            return "$"
        if key == "&":
            return match.group(0)
        if key == "`":
            return subject[: match.start()]
        if key == "'":
            return subject[match.end() :]
        if key.startswith("<"):
            name = key[1:-1]
            if name not in match.re.groupindex:
                return m.group(0)
            return match.group(name) or ""
        # two-digit references fall back to one digit when the group does not exist
        index = int(key)
        if 1 <= index <= group_count:
            return match.group(index) or ""
        if len(key) == 2 and 1 <= int(key[0]) <= group_count:
            return (match.group(int(key[0])) or "") + key[1]
        return m.group(0)

    return _TEMPLATE_TOKEN_RE.sub(token, template)


def apply_find_and_replace(
    text: str, modification: FindAndReplaceInFileModification, version: str
) -> str:
    """Apply one find-and-replace directive to ``text``.

    ``${version}`` in the replacement is substituted with ``version`` first.
    """
    replacement = modification.replace.replace(VERSION_PLACEHOLDER, version)

    if modification.regex:
        pattern, global_replace = compile_js_regex(modification.find, modification.flags)
    else:
        pattern, global_replace = re.compile(re.escape(modification.find)), False

    return pattern.sub(
        lambda m: expand_js_template(replacement, m),
        text,
        count=0 if global_replace else 1,
    )


def apply_all(
    text: str, modifications: Iterable[FindAndReplaceInFileModification], version: str
) -> str:
    """Apply directives to ``text`` in order, each seeing the previous result."""
    for modification in modifications:
        text = apply_find_and_replace(text, modification, version)
    return text
