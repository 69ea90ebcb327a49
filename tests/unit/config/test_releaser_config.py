"""Tests for releaser configuration models and loading."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from addon_releaser.core.config import (
    AddFolderModification,
    ConflictResolution,
    FileNameVersionFormat,
    FileType,
    FindAndReplaceInFileModification,
    ReleaserConfig,
    ReleaseVersionFormat,
    load_releaser_config,
    load_version_callback,
)
from addon_releaser.core.config.loader import detect_format


class TestModels:
    def test_defaults(self) -> None:
        config = ReleaserConfig()
        assert config.cwd == "./"
        assert config.destination == "./Release Files"
        assert config.file_type is FileType.MCADDON
        assert config.release_version_format is ReleaseVersionFormat.TUPLE
        assert config.file_name == "myaddon-v${version}"
        assert config.file_name_version.format is FileNameVersionFormat.DASHED
        assert config.file_name_version.source_pack == ""
        assert config.strip_build_version is False
        assert config.strip_preview_version is False
        assert config.packs == []

    def test_modifications_are_discriminated_by_type(self) -> None:
        config = ReleaserConfig.model_validate(
            {
                "packs": [
                    {
                        "path": "BP",
                        "modifications": [
                            {"type": "add_folder", "source": "extra", "destination": "x"},
                            {
                                "type": "find_and_replace_in_file",
                                "target": "*.js",
                                "find": "a",
                                "replace": "b",
                            },
                        ],
                    }
                ]
            }
        )
        add_folder, replace = config.packs[0].modifications
        assert isinstance(add_folder, AddFolderModification)
        assert add_folder.conflict_resolution is ConflictResolution.MERGE
        assert isinstance(replace, FindAndReplaceInFileModification)
        assert (replace.regex, replace.flags) == (False, "")

    def test_unknown_directive_type(self) -> None:
        with pytest.raises(ValidationError):
            ReleaserConfig.model_validate(
                {"packs": [{"path": "BP", "modifications": [{"type": "explode"}]}]}
            )

    def test_directive_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            ReleaserConfig.model_validate(
                {
                    "packs": [
                        {
                            "path": "BP",
                            "modifications": [
                                {"type": "delete_files", "targets": [], "target": "typo"}
                            ],
                        }
                    ]
                }
            )

    def test_source_pack_alias(self) -> None:
        config = ReleaserConfig.model_validate({"file_name_version": {"sourcePack": "abc"}})
        assert config.file_name_version.source_pack == "abc"

    def test_ignores_schema_key(self) -> None:
        config = ReleaserConfig.model_validate({"$schema": "https://example.test/schema.json"})
        assert config.file_type is FileType.MCADDON

    def test_invalid_enum(self) -> None:
        with pytest.raises(ValidationError):
            ReleaserConfig.model_validate({"file_type": "zip"})


class TestLoader:
    def test_detect_format(self) -> None:
        assert detect_format("a.json") == "json"
        assert detect_format("a.YAML") == "yaml"
        with pytest.raises(ValueError, match="Unsupported"):
            detect_format("a.toml")

    def test_load_json_with_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "add-on-releaser-config.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps({"file_type": "mcpack"}).encode())
        assert load_releaser_config(path).file_type is FileType.MCPACK

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "release.yaml"
        path.write_text(
            "destination: out\npacks:\n  - path: packs/BP\n    release_name: BP\n",
            encoding="utf-8",
        )
        config = load_releaser_config(path)
        assert config.destination == "out"
        assert config.packs[0].release_name == "BP"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "release.yml"
        path.write_text("", encoding="utf-8")
        assert load_releaser_config(path) == ReleaserConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_releaser_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_releaser_config(path)

    def test_json_with_comments(self, tmp_path: Path) -> None:
        path = tmp_path / "add-on-releaser-config.json"
        path.write_text(
            "// release settings\n"
            '{"file_type": "mcpack", /* all packs */ "packs": [{"path": "BP"},],}',
            encoding="utf-8",
        )
        config = load_releaser_config(path)
        assert config.file_type is FileType.MCPACK
        assert [pack.path for pack in config.packs] == ["BP"]

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a mapping"):
            load_releaser_config(path)


class TestVersionCallback:
    def test_resolves_module_attribute(self) -> None:
        assert load_version_callback("json:dumps") is json.dumps

    @pytest.mark.parametrize("path", ["json", ":dumps", "json:"])
    def test_malformed(self, path: str) -> None:
        with pytest.raises(ValueError, match="Invalid callback"):
            load_version_callback(path)

    def test_missing_attribute(self) -> None:
        with pytest.raises(ValueError, match="no attribute"):
            load_version_callback("json:nope")

    def test_not_callable(self) -> None:
        with pytest.raises(ValueError, match="not callable"):
            load_version_callback("json:__name__")

    def test_missing_module(self) -> None:
        with pytest.raises(ImportError):
            load_version_callback("no_such_module_for_tests:fn")

    def test_imports_from_search_path(self, tmp_path: Path, monkeypatch) -> None:
        (tmp_path / "hooks_beside_config.py").write_text(
            "def render(version, pack):\n    return 'beside'\n", encoding="utf-8"
        )
        monkeypatch.delitem(sys.modules, "hooks_beside_config", raising=False)
        path_before = list(sys.path)

        fn = load_version_callback("hooks_beside_config:render", search_path=tmp_path)

        assert fn((1, 0, 0), None) == "beside"
        assert sys.path == path_before
        sys.modules.pop("hooks_beside_config", None)

    def test_search_path_is_not_kept(self, tmp_path: Path) -> None:
        (tmp_path / "hooks_not_on_path.py").write_text("def render(v, p):\n    return ''\n")
        with pytest.raises(ImportError):
            load_version_callback("hooks_not_on_path:render")
