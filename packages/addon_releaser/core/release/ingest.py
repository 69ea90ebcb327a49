"""Mirror a pack folder on disk into the archive tree."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from addon_releaser.core.archive import ArchiveTree
from addon_releaser.core.config.loader import DEFAULT_CONFIG_FILE_NAME
from addon_releaser.core.config.models import (
    DeleteFilesModification,
    DeleteFoldersModification,
    FindAndReplaceInFileModification,
    Modification,
)
from addon_releaser.core.io import AbsolutePath, FileSystem
from addon_releaser.core.release.constants import (
    DIRECTORY_COMMENT,
    FILE_COMMENT,
    MANIFEST_FILE_NAME,
)
from addon_releaser.core.release.globs import matches_any, matches_glob
from addon_releaser.core.release.replace import apply_all

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"


class TreeIngester:
    """Copies a source folder into a directory of the archive tree.

    Files are routed through one of three paths:

    - the root ``manifest.json`` is replaced by the precomputed manifest text;
    - files matched by a find/replace directive are rewritten as text;
    - everything else is copied byte for byte.

    Files and folders matched by ``delete_files``/``delete_folders`` globs are
    left out. Glob patterns are matched against paths relative to the source
    folder.

    Example:
        >>> ingester = TreeIngester(fs, tree)
        >>> await ingester.ingest(
        ...     absolute_path("packs/BP"),
        ...     pack_dir,
        ...     modifications=pack.modifications,
        ...     manifest_text=rewritten.text,
        ...     version="1.2.3",
        ... )
    """

    def __init__(self, fs: FileSystem, tree: ArchiveTree) -> None:
        self.fs = fs
        self.tree = tree

    async def ingest(
        self,
        source: AbsolutePath,
        destination_id: int,
        *,
        modifications: Sequence[Modification] = (),
        manifest_text: str | None = None,
        version: str = "",
    ) -> int:
        """Recursively copy ``source`` below ``destination_id``.

        Args:
            source: Folder to copy
            destination_id: Directory entry receiving the folder's contents
            modifications: Directives of the pack; only the delete and
                find/replace kinds are consulted here
            manifest_text: Canonical text for the root ``manifest.json``;
                ``None`` copies it like any other file
            version: Dotted header version substituted for ``${version}``

        Returns:
            Number of files written into the tree

        Raises:
            FileNotFoundError: If ``source`` does not exist
        """
        deleted_files = [
            target
            for m in modifications
            if isinstance(m, DeleteFilesModification)
            for target in m.targets
        ]
        deleted_folders = [
            target
            for m in modifications
            if isinstance(m, DeleteFoldersModification)
            for target in m.targets
        ]
        replacements = [m for m in modifications if isinstance(m, FindAndReplaceInFileModification)]

        return await self._ingest_folder(
            Path(source),
            "",
            destination_id,
            deleted_files=deleted_files,
            deleted_folders=deleted_folders,
            replacements=replacements,
            manifest_text=manifest_text,
            version=version,
        )

    async def _ingest_folder(
        self,
        folder: Path,
        relative: str,
        directory_id: int,
        *,
        deleted_files: list[str],
        deleted_folders: list[str],
        replacements: list[FindAndReplaceInFileModification],
        manifest_text: str | None,
        version: str,
    ) -> int:
        written = 0
        for item in await self.fs.scandir(AbsolutePath(folder)):
            item_relative = f"{relative}/{item.name}" if relative else item.name
            item_path = AbsolutePath(folder / item.name)

            if item.is_file:
                if item.name == DEFAULT_CONFIG_FILE_NAME:
                    logger.debug("Skipping releaser config file %s", item_path)
                    continue
                if matches_any(item_relative, deleted_files):
                    logger.debug("Excluded file %s", item_relative)
                    continue

                if manifest_text is not None and item_relative == MANIFEST_FILE_NAME:
                    self.tree.add_text(directory_id, item.name, manifest_text)
                    written += 1
                    continue

                matching = [m for m in replacements if matches_glob(item_relative, m.target)]
                content = await self.fs.read_bytes(item_path)
                if matching:
                    text = content.decode(TEXT_ENCODING, errors="surrogateescape")
                    self.tree.add_text(
                        directory_id, item.name, apply_all(text, matching, version)
                    )
                else:
                    self.tree.add_blob(directory_id, item.name, content, comment=FILE_COMMENT)
                written += 1

            elif item.is_dir:
                if matches_any(item_relative, deleted_folders):
                    logger.debug("Excluded folder %s", item_relative)
                    continue
                child_id = self.tree.add_directory(
                    directory_id, item.name, comment=DIRECTORY_COMMENT
                )
                written += await self._ingest_folder(
                    folder / item.name,
                    item_relative,
                    child_id,
                    deleted_files=deleted_files,
                    deleted_folders=deleted_folders,
                    replacements=replacements,
                    manifest_text=manifest_text,
                    version=version,
                )

        return written
