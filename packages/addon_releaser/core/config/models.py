"""Configuration models for the Add-On Releaser."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class FileType(str, Enum):
    """Kind of release file produced by a run."""

    MCADDON = "mcaddon"  # one archive holding a directory per pack
    MCPACK = "mcpack"  # one archive per pack


class ReleaseVersionFormat(str, Enum):
    """Representation of versions written into released manifests."""

    TUPLE = "tuple"
    SEMVER = "semver"
    CURRENT = "current"


class FileNameVersionFormat(str, Enum):
    """How the version is rendered into release file names."""

    DASHED = "dashed"
    CURRENT = "current"
    CALLBACK = "callback"


class ConflictResolution(str, Enum):
    """What to do when a folder directive's destination already exists."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    MERGE = "merge"


class _Modification(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class AddFileModification(_Modification):
    """Add a local or remote file to the release files."""

    type: Literal["add_file"] = "add_file"
    source: str = Field(description="Local path (relative to cwd) or absolute URI")
    destination: str = Field(description="Path inside the pack")
    overwrite: bool = False


class AddFolderModification(_Modification):
    """Add a local folder to the release files."""

    type: Literal["add_folder"] = "add_folder"
    source: str = Field(description="Local folder path (relative to cwd)")
    destination: str = Field(description="Path inside the pack")
    conflict_resolution: ConflictResolution = ConflictResolution.MERGE


class RenameFileModification(_Modification):
    """Rename a file in the release files."""

    type: Literal["rename_file"] = "rename_file"
    target: str
    new_name: str
    overwrite: bool = False


class RenameFolderModification(_Modification):
    """Rename a folder in the release files."""

    type: Literal["rename_folder"] = "rename_folder"
    target: str
    new_name: str
    conflict_resolution: ConflictResolution = ConflictResolution.MERGE


class MoveFileModification(_Modification):
    """Move a file into another folder of the release files."""

    type: Literal["move_file"] = "move_file"
    target: str
    destination: str


class MoveFolderModification(_Modification):
    """Move a folder into another folder of the release files."""

    type: Literal["move_folder"] = "move_folder"
    target: str
    destination: str


class DeleteFilesModification(_Modification):
    """Exclude files matching glob patterns from the release files."""

    type: Literal["delete_files"] = "delete_files"
    targets: list[str] = Field(default_factory=list)


class DeleteFoldersModification(_Modification):
    """Exclude folders matching glob patterns from the release files."""

    type: Literal["delete_folders"] = "delete_folders"
    targets: list[str] = Field(default_factory=list)


class FindAndReplaceInFileModification(_Modification):
    """Find and replace text in every file matching a glob pattern.

    ``replace`` may contain ``${version}``, which is substituted with the
    pack's header version before the replacement runs.
    """

    type: Literal["find_and_replace_in_file"] = "find_and_replace_in_file"
    target: str
    find: str
    replace: str
    regex: bool = False
    flags: str = ""


Modification = Annotated[
    AddFileModification
    | AddFolderModification
    | RenameFileModification
    | RenameFolderModification
    | MoveFileModification
    | MoveFolderModification
    | DeleteFilesModification
    | DeleteFoldersModification
    | FindAndReplaceInFileModification,
    Field(discriminator="type"),
]


class PackConfig(BaseModel):
    """A pack to be included in the release files."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(description="Pack folder, relative to cwd")
    release_name: str | None = Field(
        default=None,
        description="Folder name inside .mcaddon files, or file name template for .mcpack files",
    )
    modifications: list[Modification] = Field(default_factory=list)


class FileNameVersionConfig(BaseModel):
    """Version rendering used in release file names."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    format: FileNameVersionFormat = FileNameVersionFormat.DASHED
    source_pack: str = Field(
        default="",
        alias="sourcePack",
        description="UUID of the pack whose version names the .mcaddon file (default: first pack)",
    )
    callback: str | None = Field(
        default=None,
        description="Import path 'package.module:function' used when format is 'callback'",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False


class ReleaserConfig(BaseModel):
    """Top-level Add-On Releaser configuration.

    Example:
        >>> config = ReleaserConfig.model_validate(
        ...     {"destination": "dist", "packs": [{"path": "packs/BP"}]}
        ... )
        >>> config.file_type
        <FileType.MCADDON: 'mcaddon'>
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    cwd: str = Field(default="./", description="Directory used to resolve relative paths")
    destination: str = Field(default="./Release Files", description="Output directory")
    packs: list[PackConfig] = Field(default_factory=list)
    file_type: FileType = FileType.MCADDON
    release_version_format: ReleaseVersionFormat = ReleaseVersionFormat.TUPLE
    file_name: str = Field(default="myaddon-v${version}", description=".mcaddon file name template")
    file_name_version: FileNameVersionConfig = Field(default_factory=FileNameVersionConfig)
    strip_build_version: bool = Field(
        default=False, description="semver only: drop '+build' metadata from string versions"
    )
    strip_preview_version: bool = Field(
        default=False, description="semver only: also drop the '-prerelease' part"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
