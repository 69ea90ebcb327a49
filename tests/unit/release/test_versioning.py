"""Tests for manifest version conversion and file name rendering."""

from __future__ import annotations

import logging

import pytest

from addon_releaser.core.config.models import (
    FileNameVersionFormat,
    PackConfig,
    ReleaseVersionFormat,
)
from addon_releaser.core.release.errors import InvalidVersionTypeError
from addon_releaser.core.release.versioning import (
    normalize_manifest_versions,
    render_dotted,
    render_file_name_version,
    strip_semantic,
    strip_suffix,
    to_numeric_triple,
    to_semantic,
)
from tests.fixtures.packs import BP_UUID, make_manifest


@pytest.fixture
def pack() -> PackConfig:
    return PackConfig(path="packs/BP")


class TestCodec:
    """Tests for the tuple/semver conversions."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.2.3", [1, 2, 3]),
            ("1.20.3-beta.1", [1, 20, 3]),
            ("1.2.3+build.7", [1, 2, 3]),
            ("1.2.3.4", [1, 2, 3]),
            ("2", [2]),
            ([1, 2], [1, 2]),
        ],
    )
    def test_to_numeric_triple(self, value, expected) -> None:
        assert to_numeric_triple(value) == expected

    def test_to_numeric_triple_passes_non_numeric_through(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            assert to_numeric_triple("latest") == "latest"
        assert "not numeric" in caplog.text

    @pytest.mark.parametrize(
        ("value", "expected"),
        [([1, 2, 3], "1.2.3"), ([1, 2], "1.2.0"), ([4], "4.0.0"), ([], "0.0.0"), ("9.9", "9.9")],
    )
    def test_to_semantic(self, value, expected) -> None:
        assert to_semantic(value) == expected

    @pytest.mark.parametrize("value", [[1], [1, 2], [1, 2, 3], [0, 0, 0], [10, 200, 3000]])
    def test_semantic_round_trip_is_stable(self, value) -> None:
        rendered = to_semantic(value)
        assert to_semantic(to_numeric_triple(rendered)) == rendered

    def test_strip_suffix(self) -> None:
        assert strip_suffix("1.2.3-preview.20+BUILD.1") == "1.2.3"
        assert strip_suffix("1.2.3") == "1.2.3"

    def test_strip_semantic_options(self) -> None:
        version = "1.2.3-preview.20+BUILD.1"
        assert strip_semantic(version, strip_build=False, strip_preview=False) == version
        assert strip_semantic(version, strip_build=True, strip_preview=False) == "1.2.3-preview.20"
        assert strip_semantic(version, strip_build=False, strip_preview=True) == "1.2.3"

    def test_render_dotted(self) -> None:
        assert render_dotted([1, 2, 3]) == "1.2.3"
        assert render_dotted("1.2.3-beta") == "1.2.3-beta"


class TestNormalizeManifest:
    """Tests for rewriting every version field of a manifest."""

    def test_tuple_mode_converts_header_modules_and_uuid_dependencies(self) -> None:
        manifest = make_manifest(
            BP_UUID,
            "1.2.3-beta",
            name="Pack v1.2.3-beta",
            description="Release 1.2.3-beta (1.2.3-beta)",
            dependencies=[
                {"uuid": "dep-1", "version": "2.0.0"},
                {"module_name": "@minecraft/server", "version": "1.9.0"},
            ],
        )

        normalize_manifest_versions(manifest, ReleaseVersionFormat.TUPLE)

        header = manifest["header"]
        assert header["version"] == [1, 2, 3]
        assert header["name"] == "Pack v1.2.3"
        assert header["description"] == "Release 1.2.3 (1.2.3)"
        assert manifest["modules"][0]["version"] == [1, 2, 3]
        assert manifest["dependencies"][0]["version"] == [2, 0, 0]
        assert manifest["dependencies"][1]["version"] == "1.9.0"

    def test_semver_mode_converts_tuples(self) -> None:
        manifest = make_manifest(
            BP_UUID,
            [1, 2],
            dependencies=[
                {"uuid": "dep-1", "version": [3, 1, 4]},
                {"module_name": "@minecraft/server", "version": "1.9.0"},
            ],
        )

        normalize_manifest_versions(manifest, ReleaseVersionFormat.SEMVER)

        assert manifest["header"]["version"] == "1.2.0"
        assert manifest["modules"][0]["version"] == "1.2.0"
        assert manifest["dependencies"][0]["version"] == "3.1.4"
        assert manifest["dependencies"][1]["version"] == "1.9.0"

    def test_semver_mode_leaves_strings_unless_stripping(self) -> None:
        manifest = make_manifest(BP_UUID, "1.2.3-rc.1+build.5", name="Pack 1.2.3-rc.1+build.5")
        normalize_manifest_versions(manifest, ReleaseVersionFormat.SEMVER)
        assert manifest["header"]["version"] == "1.2.3-rc.1+build.5"

        normalize_manifest_versions(manifest, ReleaseVersionFormat.SEMVER, strip_build=True)
        assert manifest["header"]["version"] == "1.2.3-rc.1"
        assert manifest["header"]["name"] == "Pack 1.2.3-rc.1"

    def test_current_mode_changes_nothing(self) -> None:
        manifest = make_manifest(BP_UUID, "1.2.3-beta", name="Pack 1.2.3-beta")
        before = make_manifest(BP_UUID, "1.2.3-beta", name="Pack 1.2.3-beta")

        normalize_manifest_versions(manifest, ReleaseVersionFormat.CURRENT)

        assert manifest == before

    def test_missing_optional_sections(self) -> None:
        manifest = {"header": {"uuid": BP_UUID, "name": "x", "version": "1.0.0"}}
        normalize_manifest_versions(manifest, ReleaseVersionFormat.TUPLE)
        assert manifest["header"]["version"] == [1, 0, 0]


class TestFileNameVersion:
    """Tests for rendering the version used in release file names."""

    def test_dashed(self, pack: PackConfig) -> None:
        assert render_file_name_version([1, 2, 3], FileNameVersionFormat.DASHED, pack) == "1-2-3"
        assert render_file_name_version("1.2.3-b.1", FileNameVersionFormat.DASHED, pack) == (
            "1-2-3-b-1"
        )

    def test_current(self, pack: PackConfig) -> None:
        assert render_file_name_version([1, 2, 3], FileNameVersionFormat.CURRENT, pack) == "1.2.3"
        assert render_file_name_version("1.2.3", FileNameVersionFormat.CURRENT, pack) == "1.2.3"

    def test_callback_receives_version_and_pack(self, pack: PackConfig) -> None:
        seen = []

        def callback(version, owner):
            seen.append((version, owner))
            return "v" + "_".join(str(p) for p in version)

        rendered = render_file_name_version(
            [1, 2, 3], FileNameVersionFormat.CALLBACK, pack, callback
        )

        assert rendered == "v1_2_3"
        assert seen == [([1, 2, 3], pack)]

    def test_callback_must_return_string(self, pack: PackConfig) -> None:
        with pytest.raises(InvalidVersionTypeError):
            render_file_name_version(
                [1, 2, 3], FileNameVersionFormat.CALLBACK, pack, lambda v, p: 123
            )

    def test_callback_format_requires_callback(self, pack: PackConfig) -> None:
        with pytest.raises(ValueError, match="no callback"):
            render_file_name_version([1, 2, 3], FileNameVersionFormat.CALLBACK, pack)
