"""Tests for TreeIngester."""

from __future__ import annotations

from pathlib import Path

import pytest

from addon_releaser.core.archive import ROOT_ID, ArchiveTree
from addon_releaser.core.config.models import PackConfig
from addon_releaser.core.io import AbsolutePath, FakeFileSystem
from addon_releaser.core.release.constants import DIRECTORY_COMMENT, FILE_COMMENT
from addon_releaser.core.release.ingest import TreeIngester
from tests.fixtures.packs import BP_UUID, make_manifest


@pytest.fixture
def tree() -> ArchiveTree:
    return ArchiveTree()


@pytest.fixture
def ingester(fs: FakeFileSystem, tree: ArchiveTree) -> TreeIngester:
    return TreeIngester(fs, tree)


def modifications(*items: dict) -> list:
    return PackConfig.model_validate({"path": "BP", "modifications": list(items)}).modifications


async def test_mirrors_folder_structure(add_pack, ingester: TreeIngester, tree: ArchiveTree):
    root = add_pack(
        "packs/BP",
        make_manifest(BP_UUID),
        {"scripts/main.js": "main", "scripts/lib/util.js": "util", "pack_icon.png": b"\x89PNG"},
    )

    written = await ingester.ingest(AbsolutePath(root), ROOT_ID)

    assert written == 4
    assert sorted(tree.leaf_paths()) == [
        "manifest.json",
        "pack_icon.png",
        "scripts/lib/util.js",
        "scripts/main.js",
    ]
    icon = tree.entry(tree.find(ROOT_ID, "pack_icon.png"))
    assert icon.content == b"\x89PNG"
    assert icon.comment == FILE_COMMENT
    assert tree.entry(tree.find(ROOT_ID, "scripts")).comment == DIRECTORY_COMMENT


async def test_root_manifest_uses_canonical_text(add_pack, ingester, tree: ArchiveTree):
    root = add_pack("packs/BP", make_manifest(BP_UUID), {"sub/manifest.json": "{}"})

    await ingester.ingest(AbsolutePath(root), ROOT_ID, manifest_text='{"canonical": true}')

    assert tree.entry(tree.find(ROOT_ID, "manifest.json")).content == b'{"canonical": true}'
    assert tree.entry(tree.find(ROOT_ID, "sub/manifest.json")).content == b"{}"


async def test_skips_reserved_config_file(add_pack, ingester, tree: ArchiveTree):
    root = add_pack("packs/BP", None, {"add-on-releaser-config.json": "{}", "a.txt": "a"})

    await ingester.ingest(AbsolutePath(root), ROOT_ID)

    assert tree.leaf_paths() == ["a.txt"]


async def test_deleted_files_and_folders(add_pack, ingester, tree: ArchiveTree):
    root = add_pack(
        "packs/BP",
        None,
        {
            "debug.log": "x",
            "deep/er/trace.log": "x",
            "keep.txt": "k",
            "node_modules/pkg/index.js": "x",
            "src/node_modules/pkg/index.js": "x",
            "src/main.ts": "ts",
        },
    )

    await ingester.ingest(
        AbsolutePath(root),
        ROOT_ID,
        modifications=modifications(
            {"type": "delete_files", "targets": ["**/*.log"]},
            {"type": "delete_folders", "targets": ["**/node_modules"]},
        ),
    )

    assert sorted(tree.leaf_paths()) == ["keep.txt", "src/main.ts"]
    # The folder holding only deleted files is still mirrored
    assert tree.find(ROOT_ID, "deep/er") is not None
    assert tree.find(ROOT_ID, "node_modules") is None


async def test_find_and_replace_applies_matching_directives_in_order(
    add_pack, ingester, tree: ArchiveTree
):
    root = add_pack(
        "packs/BP",
        None,
        {"scripts/main.js": 'const V = "dev"; // dev', "scripts/data.json": '"dev"'},
    )

    await ingester.ingest(
        AbsolutePath(root),
        ROOT_ID,
        modifications=modifications(
            {
                "type": "find_and_replace_in_file",
                "target": "scripts/*.js",
                "find": '"dev"',
                "replace": '"${version}"',
            },
            {
                "type": "find_and_replace_in_file",
                "target": "**/*.js",
                "find": "dev",
                "replace": "release",
            },
        ),
        version="1.2.3",
    )

    main = tree.entry(tree.find(ROOT_ID, "scripts/main.js"))
    assert main.content == b'const V = "1.2.3"; // release'
    assert main.comment == ""
    assert tree.entry(tree.find(ROOT_ID, "scripts/data.json")).content == b'"dev"'


async def test_missing_source_folder(ingester):
    with pytest.raises(FileNotFoundError):
        await ingester.ingest(AbsolutePath(Path("/work/missing")), ROOT_ID)
