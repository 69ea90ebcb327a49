"""In-memory archive tree used to assemble release files."""

from addon_releaser.core.archive.tree import (
    ROOT_ID,
    ArchiveEntry,
    ArchiveTree,
    EntryKind,
    split_path,
)

__all__ = [
    "ROOT_ID",
    "ArchiveEntry",
    "ArchiveTree",
    "EntryKind",
    "split_path",
]
