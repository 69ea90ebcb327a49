from addon_releaser.core.config.loader import (
    DEFAULT_CONFIG_FILE_NAME,
    load_releaser_config,
    load_version_callback,
)
from addon_releaser.core.config.models import (
    AddFileModification,
    AddFolderModification,
    ConflictResolution,
    DeleteFilesModification,
    DeleteFoldersModification,
    FileNameVersionConfig,
    FileNameVersionFormat,
    FileType,
    FindAndReplaceInFileModification,
    LoggingConfig,
    Modification,
    MoveFileModification,
    MoveFolderModification,
    PackConfig,
    ReleaserConfig,
    ReleaseVersionFormat,
    RenameFileModification,
    RenameFolderModification,
)

__all__ = [
    "DEFAULT_CONFIG_FILE_NAME",
    "load_releaser_config",
    "load_version_callback",
    "AddFileModification",
    "AddFolderModification",
    "ConflictResolution",
    "DeleteFilesModification",
    "DeleteFoldersModification",
    "FileNameVersionConfig",
    "FileNameVersionFormat",
    "FileType",
    "FindAndReplaceInFileModification",
    "LoggingConfig",
    "Modification",
    "MoveFileModification",
    "MoveFolderModification",
    "PackConfig",
    "ReleaserConfig",
    "ReleaseVersionFormat",
    "RenameFileModification",
    "RenameFolderModification",
]
