"""Post-ingestion modification directives applied to one pack's subtree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import assert_never

from addon_releaser.core.api.http.utils import is_absolute_uri
from addon_releaser.core.archive import ArchiveTree, split_path
from addon_releaser.core.config.models import (
    AddFileModification,
    AddFolderModification,
    ConflictResolution,
    DeleteFilesModification,
    DeleteFoldersModification,
    FindAndReplaceInFileModification,
    Modification,
    MoveFileModification,
    MoveFolderModification,
    PackConfig,
    RenameFileModification,
    RenameFolderModification,
)
from addon_releaser.core.io import AbsolutePath, ByteFetcher, FileSystem
from addon_releaser.core.release.constants import (
    DIRECTORY_COMMENT,
    FILE_COMMENT,
    PROVENANCE_FILE_NAME,
    provenance_text,
)
from addon_releaser.core.release.errors import DirectiveError, NotFoundError, WrongKindError
from addon_releaser.core.release.ingest import TreeIngester

logger = logging.getLogger(__name__)


class ModificationEngine:
    """Applies a pack's directives, in order, to its directory in the archive tree.

    Delete and find/replace directives were already resolved while the pack
    was ingested and are ignored here. Every other directive runs against the
    tree as left by the directives before it.

    Args:
        fs: Filesystem used for local ``add_file``/``add_folder`` sources
        fetcher: Fetcher used for ``add_file`` sources given as absolute URIs
        tree: Archive tree being assembled
        cwd: Directory local sources are resolved against
    """

    def __init__(
        self,
        fs: FileSystem,
        fetcher: ByteFetcher,
        tree: ArchiveTree,
        cwd: AbsolutePath,
    ) -> None:
        self.fs = fs
        self.fetcher = fetcher
        self.tree = tree
        self.cwd = cwd
        self._ingester = TreeIngester(fs, tree)

    async def apply(
        self,
        pack: PackConfig,
        pack_index: int,
        pack_root: int,
        container_extension: str,
    ) -> None:
        """Run every directive of ``pack`` and add the provenance file.

        Raises:
            NotFoundError: If a move/rename target does not exist
            WrongKindError: If a target or destination is of the wrong kind
            ApiError: If a remote ``add_file`` source cannot be fetched
            OSError: If a local ``add_file``/``add_folder`` source cannot be read
        """
        for directive_index, modification in enumerate(pack.modifications):
            context = _DirectiveContext(pack, pack_index, directive_index, pack_root)
            await self._apply_one(modification, context)

        self.tree.add_text(pack_root, PROVENANCE_FILE_NAME, provenance_text(container_extension))

    async def _apply_one(self, modification: Modification, ctx: _DirectiveContext) -> None:
        match modification:
            case MoveFileModification() | MoveFolderModification():
                self._move(modification, ctx)
            case AddFileModification():
                await self._add_file(modification, ctx)
            case AddFolderModification():
                await self._add_folder(modification, ctx)
            case RenameFileModification():
                self._rename_file(modification, ctx)
            case RenameFolderModification():
                self._rename_folder(modification, ctx)
            case DeleteFilesModification() | DeleteFoldersModification():
                pass  # applied during ingestion
            case FindAndReplaceInFileModification():
                pass  # applied during ingestion
            case _:
                assert_never(modification)

    # Target resolution

    def _resolve(
        self, target: str, expect_directory: bool, ctx: _DirectiveContext
    ) -> tuple[int, int]:
        """Return the parent id and entry id of a directive target."""
        parts = split_path(target)
        parent_id = self.tree.find(ctx.pack_root, "/".join(parts[:-1])) if parts else None
        entry_id: int | None = None
        if parent_id is not None and self.tree.is_directory(parent_id):
            entry_id = self.tree.get_child(parent_id, parts[-1])
        if parent_id is None or entry_id is None:
            raise NotFoundError(ctx.pack_index, ctx.directive_index, ctx.pack.path, target)
        if self.tree.is_directory(entry_id) != expect_directory:
            raise WrongKindError(
                ctx.pack_index,
                ctx.directive_index,
                ctx.pack.path,
                target,
                "directory" if expect_directory else "file",
            )
        return parent_id, entry_id

    def _destination_directory(self, path: str, ctx: _DirectiveContext) -> int | None:
        """Look up or create a directory, returning ``None`` if a file is in the way."""
        existing = self.tree.find(ctx.pack_root, path)
        if existing is not None:
            return existing if self.tree.is_directory(existing) else None
        try:
            return self.tree.ensure_directory(ctx.pack_root, path, comment=DIRECTORY_COMMENT)
        except NotADirectoryError:
            return None

    # Directives

    def _move(
        self, modification: MoveFileModification | MoveFolderModification, ctx: _DirectiveContext
    ) -> None:
        expect_directory = isinstance(modification, MoveFolderModification)
        _, entry_id = self._resolve(modification.target, expect_directory, ctx)

        destination_id = self._destination_directory(modification.destination, ctx)
        if destination_id is None:
            logger.debug(
                "%s: destination %r is not a directory; skipping move",
                ctx.label,
                modification.destination,
            )
            return

        try:
            self.tree.move(entry_id, destination_id)
        except ValueError as e:
            raise DirectiveError(
                ctx.pack_index,
                ctx.directive_index,
                ctx.pack.path,
                modification.target,
                f"cannot be moved into {modification.destination!r} ({e})",
            ) from e

    async def _add_file(self, modification: AddFileModification, ctx: _DirectiveContext) -> None:
        parts = split_path(modification.destination)
        if not parts:
            raise WrongKindError(
                ctx.pack_index, ctx.directive_index, ctx.pack.path, modification.destination, "file"
            )
        existing = self.tree.find(ctx.pack_root, modification.destination)
        if existing is not None and not modification.overwrite:
            logger.debug("%s: %r already exists; skipping", ctx.label, modification.destination)
            return

        parent_path = "/".join(parts[:-1])
        parent_id = self._destination_directory(parent_path, ctx)
        if parent_id is None:
            raise WrongKindError(
                ctx.pack_index, ctx.directive_index, ctx.pack.path, parent_path, "directory"
            )

        if is_absolute_uri(modification.source):
            content = await self.fetcher.fetch(modification.source)
        else:
            content = await self.fs.read_bytes(AbsolutePath(Path(self.cwd) / modification.source))

        self.tree.add_blob(parent_id, parts[-1], content, comment=FILE_COMMENT)
        logger.debug("%s: added %s (%d bytes)", ctx.label, modification.destination, len(content))

    async def _add_folder(
        self, modification: AddFolderModification, ctx: _DirectiveContext
    ) -> None:
        existing = self.tree.find(ctx.pack_root, modification.destination)
        if existing is not None:
            resolution = modification.conflict_resolution
            if resolution is ConflictResolution.SKIP:
                logger.debug("%s: %r exists; skipping", ctx.label, modification.destination)
                return
            if resolution is ConflictResolution.OVERWRITE:
                if existing == ctx.pack_root:
                    for child_id in self.tree.children(existing):
                        self.tree.remove(child_id)
                else:
                    self.tree.remove(existing)
            elif not self.tree.is_directory(existing):
                logger.warning(
                    "%s: %r is a file and cannot be merged into; skipping",
                    ctx.label,
                    modification.destination,
                )
                return

        destination_id = self._destination_directory(modification.destination, ctx)
        if destination_id is None:
            raise WrongKindError(
                ctx.pack_index,
                ctx.directive_index,
                ctx.pack.path,
                modification.destination,
                "directory",
            )

        written = await self._ingester.ingest(
            AbsolutePath(Path(self.cwd) / modification.source), destination_id
        )
        logger.debug(
            "%s: added folder %s (%d files)", ctx.label, modification.destination, written
        )

    def _rename_file(self, modification: RenameFileModification, ctx: _DirectiveContext) -> None:
        parent_id, entry_id = self._resolve(modification.target, False, ctx)

        sibling = self.tree.get_child(parent_id, modification.new_name)
        if sibling is not None and sibling != entry_id and not modification.overwrite:
            logger.debug("%s: %r already exists; skipping", ctx.label, modification.new_name)
            return
        self._rename(entry_id, modification.target, modification.new_name, ctx)

    def _rename_folder(
        self, modification: RenameFolderModification, ctx: _DirectiveContext
    ) -> None:
        parent_id, entry_id = self._resolve(modification.target, True, ctx)

        sibling = self.tree.get_child(parent_id, modification.new_name)
        if sibling is not None and sibling != entry_id:
            resolution = modification.conflict_resolution
            if resolution is ConflictResolution.SKIP:
                logger.debug("%s: %r already exists; skipping", ctx.label, modification.new_name)
                return
            if resolution is ConflictResolution.MERGE and self.tree.is_directory(sibling):
                for child_id in self.tree.children(entry_id):
                    self.tree.move(child_id, sibling)
                self.tree.remove(entry_id)
                return
            self.tree.remove(sibling)

        self._rename(entry_id, modification.target, modification.new_name, ctx)

    def _rename(self, entry_id: int, target: str, new_name: str, ctx: _DirectiveContext) -> None:
        try:
            self.tree.rename(entry_id, new_name)
        except ValueError as e:
            raise DirectiveError(
                ctx.pack_index,
                ctx.directive_index,
                ctx.pack.path,
                target,
                f"cannot be renamed to {new_name!r}",
            ) from e


class _DirectiveContext:
    """Position of the directive being applied, used in logs and errors."""

    __slots__ = ("pack", "pack_index", "directive_index", "pack_root")

    def __init__(
        self, pack: PackConfig, pack_index: int, directive_index: int, pack_root: int
    ) -> None:
        self.pack = pack
        self.pack_index = pack_index
        self.directive_index = directive_index
        self.pack_root = pack_root

    @property
    def label(self) -> str:
        return f"packs[{self.pack_index}].modifications[{self.directive_index}]"
