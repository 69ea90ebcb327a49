"""Tests for find-and-replace directives."""

from __future__ import annotations

import re

import pytest

from addon_releaser.core.config.models import FindAndReplaceInFileModification
from addon_releaser.core.release.replace import (
    apply_all,
    apply_find_and_replace,
    compile_js_regex,
    expand_js_template,
)


def directive(**kwargs) -> FindAndReplaceInFileModification:
    kwargs.setdefault("target", "**/*")
    return FindAndReplaceInFileModification(**kwargs)


class TestLiteral:
    def test_replaces_first_occurrence_only(self) -> None:
        result = apply_find_and_replace("a-a-a", directive(find="a", replace="b"), "1.0.0")
        assert result == "b-a-a"

    def test_regex_characters_are_literal(self) -> None:
        result = apply_find_and_replace("x.y.z", directive(find=".", replace="!"), "1.0.0")
        assert result == "x!y.z"

    def test_version_placeholder(self) -> None:
        result = apply_find_and_replace(
            'const VERSION = "dev";',
            directive(find='"dev"', replace='"${version}"'),
            "1.2.3",
        )
        assert result == 'const VERSION = "1.2.3";'

    def test_no_match_leaves_text(self) -> None:
        assert apply_find_and_replace("abc", directive(find="z", replace="y"), "1") == "abc"


class TestRegex:
    def test_first_match_without_global_flag(self) -> None:
        result = apply_find_and_replace(
            "a1 a2", directive(find=r"a(\d)", replace="<$1>", regex=True), ""
        )
        assert result == "<1> a2"

    def test_global_flag_replaces_every_match(self) -> None:
        result = apply_find_and_replace(
            "a1 a2", directive(find=r"a(\d)", replace="<$1>", regex=True, flags="g"), ""
        )
        assert result == "<1> <2>"

    def test_ignore_case_flag(self) -> None:
        result = apply_find_and_replace(
            "Hello HELLO", directive(find="hello", replace="bye", regex=True, flags="gi"), ""
        )
        assert result == "bye bye"

    def test_version_and_capture_group(self) -> None:
        result = apply_find_and_replace(
            "build TOKEN_abc here",
            directive(find=r"TOKEN_(\w+)", replace="${version}-$1", regex=True),
            "1.2.3",
        )
        assert result == "build 1.2.3-abc here"

    def test_named_group(self) -> None:
        result = apply_find_and_replace(
            "key=value",
            directive(find=r"(?<k>\w+)=(?<v>\w+)", replace="$<v>=$<k>", regex=True),
            "",
        )
        assert result == "value=key"

    def test_unknown_flag_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unsupported regex flag"):
            compile_js_regex("a", "gx")

    def test_flag_mapping(self) -> None:
        pattern, global_replace = compile_js_regex("^a.b$", "ims")
        assert global_replace is False
        assert pattern.flags & re.IGNORECASE
        assert pattern.flags & re.MULTILINE
        assert pattern.flags & re.DOTALL


class TestTemplate:
    @pytest.fixture
    def match(self) -> re.Match[str]:
        m = re.search(r"(b)(c)", "abcd")
        assert m is not None
        return m

    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            ("$$", "$"),
            ("[$&]", "[bc]"),
            ("$`", "a"),
            ("$'", "d"),
            ("$2$1", "cb"),
            ("$01", "b"),
            ("$3", "$3"),
            ("$10", "b0"),
            ("$<missing>", "$<missing>"),
            ("plain", "plain"),
        ],
    )
    def test_tokens(self, match: re.Match[str], template: str, expected: str) -> None:
        assert expand_js_template(template, match) == expected


def test_apply_all_chains_results_in_order() -> None:
    directives = [
        directive(find="one", replace="two"),
        directive(find="two", replace="three"),
    ]
    assert apply_all("one", directives, "") == "three"
