"""Orchestration of one release run.

Builds every configured pack into an archive tree, names the release
file(s) from a pack's header version and writes them to the destination.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from addon_releaser.core.archive import ROOT_ID, ArchiveTree
from addon_releaser.core.config.loader import load_version_callback
from addon_releaser.core.config.models import FileType, PackConfig, ReleaserConfig
from addon_releaser.core.io import AbsolutePath, ByteFetcher, FileSystem, absolute_path
from addon_releaser.core.release.constants import (
    DIRECTORY_COMMENT,
    MANIFEST_FILE_NAME,
    MCADDON_EXTENSION,
    MCPACK_EXTENSION,
)
from addon_releaser.core.release.errors import (
    DuplicatePackDirectoryError,
    VersionSourceNotFoundError,
)
from addon_releaser.core.release.ingest import TreeIngester
from addon_releaser.core.release.manifest import (
    ManifestRegistry,
    ManifestRewriter,
    RegisteredPack,
    RewrittenManifest,
    parse_manifest,
)
from addon_releaser.core.release.modifications import ModificationEngine
from addon_releaser.core.release.replace import VERSION_PLACEHOLDER
from addon_releaser.core.release.versioning import (
    VersionCallback,
    render_dotted,
    render_file_name_version,
)

logger = logging.getLogger(__name__)


class WrittenArchive(BaseModel):
    """A release file written to disk.

    Attributes:
        path: Absolute path of the file
        relative_path: Path relative to the invocation directory
        size: Bytes written
        packs: Paths of the packs contained in the file
    """

    model_config = ConfigDict(frozen=True)

    path: str
    relative_path: str
    size: int = Field(ge=0)
    packs: list[str] = Field(default_factory=list)


class ReleaseResult(BaseModel):
    """Outcome of a release run."""

    archives: list[WrittenArchive] = Field(default_factory=list)
    manifests: list[RewrittenManifest] = Field(default_factory=list)


class ReleaseAssembler:
    """Assembles ``.mcaddon``/``.mcpack`` release files from configured packs.

    Packs are processed strictly in configuration order, and the directives
    of each pack in list order.

    Args:
        config: Validated releaser configuration
        fs: Filesystem used for pack sources and release output
        fetcher: Fetcher for remote ``add_file`` sources
        invocation_dir: Directory ``config.cwd`` is resolved against and
            reported paths are relative to (default: process working directory)
        version_callback: File name version strategy; when omitted and the
            configuration names one, it is imported from ``file_name_version.callback``

    Example:
        >>> assembler = ReleaseAssembler(config, fs=RealFileSystem(), fetcher=fetcher)
        >>> result = await assembler.run()
        >>> result.archives[0].relative_path
        'Release Files/myaddon-v1-2-3.mcaddon'
    """

    def __init__(
        self,
        config: ReleaserConfig,
        *,
        fs: FileSystem,
        fetcher: ByteFetcher,
        invocation_dir: str | Path | None = None,
        version_callback: VersionCallback | None = None,
    ) -> None:
        self.config = config
        self.fs = fs
        self.fetcher = fetcher
        self.invocation_dir = absolute_path(invocation_dir or Path.cwd())
        self.cwd = absolute_path(Path(self.invocation_dir) / config.cwd)
        self.destination = absolute_path(Path(self.cwd) / config.destination)

        if version_callback is None and config.file_name_version.callback:
            version_callback = load_version_callback(
                config.file_name_version.callback, search_path=self.cwd
            )
        self.version_callback = version_callback

        self.rewriter = ManifestRewriter(config)
        self.registry = ManifestRegistry()

    async def run(self) -> ReleaseResult:
        """Build and write every release file.

        Raises:
            ReleaseError: On any pipeline error (duplicate UUIDs, bad manifests,
                failed directives, version naming)
            ApiError: If a remote ``add_file`` source cannot be fetched
            OSError: If a source cannot be read or the output cannot be written
        """
        self.registry = ManifestRegistry()

        if self.config.file_type is FileType.MCADDON:
            outputs = [await self._build_mcaddon()]
        else:
            outputs = await self._build_mcpacks()

        await self.fs.mkdirs(self.destination)

        result = ReleaseResult(
            manifests=[
                entry.manifest
                for index in range(len(self.config.packs))
                if (entry := self.registry.by_index(index)) is not None
                and entry.manifest is not None
            ]
        )
        for file_name, content, packs in outputs:
            path = AbsolutePath(Path(self.destination) / file_name)
            await self.fs.write_bytes(path, content)
            archive = WrittenArchive(
                path=str(path),
                relative_path=os.path.relpath(path, self.invocation_dir),
                size=len(content),
                packs=packs,
            )
            logger.info("Wrote %s (%d bytes)", archive.relative_path, archive.size)
            result.archives.append(archive)
        return result

    # Modes

    async def _build_mcaddon(self) -> tuple[str, bytes, list[str]]:
        tree = ArchiveTree()
        owners: dict[str, tuple[int, PackConfig]] = {}
        for index, pack in enumerate(self.config.packs):
            directory = pack.release_name or self._pack_folder_name(pack)
            if directory in owners:
                other_index, other = owners[directory]
                raise DuplicatePackDirectoryError(
                    directory, pack.path, index, other.path, other_index
                )
            owners[directory] = (index, pack)
            pack_root = tree.add_directory(ROOT_ID, directory, comment=DIRECTORY_COMMENT)
            await self._build_pack(tree, pack_root, pack, index, MCADDON_EXTENSION)

        source = self._version_source()
        version = render_file_name_version(
            source.manifest.version if source.manifest else "",
            self.config.file_name_version.format,
            source.pack,
            self.version_callback,
        )
        file_name = self.config.file_name.replace(VERSION_PLACEHOLDER, version) + MCADDON_EXTENSION
        content = await self._export(tree)
        return file_name, content, [pack.path for pack in self.config.packs]

    async def _build_mcpacks(self) -> list[tuple[str, bytes, list[str]]]:
        outputs: list[tuple[str, bytes, list[str]]] = []
        for index, pack in enumerate(self.config.packs):
            tree = ArchiveTree()
            manifest = await self._build_pack(tree, ROOT_ID, pack, index, MCPACK_EXTENSION)

            version = render_file_name_version(
                manifest.version,
                self.config.file_name_version.format,
                pack,
                self.version_callback,
            )
            template = pack.release_name or f"{self._pack_folder_name(pack)}-v{VERSION_PLACEHOLDER}"
            file_name = template.replace(VERSION_PLACEHOLDER, version) + MCPACK_EXTENSION
            outputs.append((file_name, await self._export(tree), [pack.path]))
        return outputs

    # Per pack

    async def _build_pack(
        self,
        tree: ArchiveTree,
        pack_root: int,
        pack: PackConfig,
        index: int,
        container_extension: str,
    ) -> RewrittenManifest:
        logger.info("Processing pack %s (packs[%d])", pack.path, index)
        pack_dir = Path(self.cwd) / pack.path

        raw = await self.fs.read_bytes(AbsolutePath(pack_dir / MANIFEST_FILE_NAME))
        source = parse_manifest(raw, pack.path)
        self.registry.claim(source["header"]["uuid"], pack, index)

        manifest = self.rewriter.rewrite(raw, pack)
        self.registry.record(pack, index, manifest)

        ingester = TreeIngester(self.fs, tree)
        written = await ingester.ingest(
            AbsolutePath(pack_dir),
            pack_root,
            modifications=pack.modifications,
            manifest_text=manifest.text,
            version=render_dotted(manifest.version),
        )
        logger.debug("Ingested %d files from %s", written, pack.path)

        engine = ModificationEngine(self.fs, self.fetcher, tree, self.cwd)
        await engine.apply(pack, index, pack_root, container_extension)
        return manifest

    def _version_source(self) -> RegisteredPack:
        source_uuid = self.config.file_name_version.source_pack
        source = self.registry.get(source_uuid) if source_uuid else self.registry.by_index(0)
        if source is None:
            raise VersionSourceNotFoundError(source_uuid)
        return source

    def _pack_folder_name(self, pack: PackConfig) -> str:
        return (Path(self.cwd) / pack.path).resolve().name

    async def _export(self, tree: ArchiveTree) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, tree.to_zip_bytes)
