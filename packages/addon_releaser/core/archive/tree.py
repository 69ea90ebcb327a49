"""In-memory archive tree mirroring the contents of an output zip.

Entries live in an arena keyed by integer ids. Each entry records its parent
id, and each directory keeps an ordered name -> id index of its children, so
moves and renames only reassign ids and never copy subtrees.

Invariant: child names are unique per directory.
"""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

ROOT_ID = 0


class EntryKind(str, Enum):
    """Kind of archive entry."""

    DIRECTORY = "directory"
    LEAF = "leaf"


@dataclass
class ArchiveEntry:
    """A directory or leaf in the archive tree."""

    id: int
    name: str
    kind: EntryKind
    parent: int | None
    content: bytes = b""
    comment: str = ""
    children: dict[str, int] = field(default_factory=dict)

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def split_path(path: str) -> list[str]:
    """Split a slash- or backslash-separated archive path into segments.

    Empty and ``.`` segments are dropped.

    Example:
        >>> split_path("scripts\\\\main.js")
        ['scripts', 'main.js']
    """
    return [part for part in path.replace("\\", "/").split("/") if part not in ("", ".")]


class ArchiveTree:
    """Mutable tree of named directories and leaves exported as a zip.

    Example:
        >>> tree = ArchiveTree()
        >>> scripts = tree.ensure_directory(ROOT_ID, "BP/scripts")
        >>> tree.add_text(scripts, "main.js", "console.log('hi');")
        >>> data = tree.to_zip_bytes()
    """

    def __init__(self) -> None:
        self._entries: dict[int, ArchiveEntry] = {
            ROOT_ID: ArchiveEntry(id=ROOT_ID, name="", kind=EntryKind.DIRECTORY, parent=None)
        }
        self._next_id = ROOT_ID + 1

    def entry(self, entry_id: int) -> ArchiveEntry:
        """Return the entry for ``entry_id``.

        Raises:
            KeyError: If the entry was removed or never existed
        """
        return self._entries[entry_id]

    def is_directory(self, entry_id: int) -> bool:
        return self._entries[entry_id].is_directory

    def _directory(self, entry_id: int) -> ArchiveEntry:
        entry = self._entries[entry_id]
        if not entry.is_directory:
            raise NotADirectoryError(f"Archive entry {self.path_of(entry_id)!r} is not a directory")
        return entry

    def _new_entry(
        self,
        parent_id: int,
        name: str,
        kind: EntryKind,
        content: bytes = b"",
        comment: str = "",
    ) -> int:
        if not name or "/" in name or "\\" in name:
            raise ValueError(f"Invalid archive entry name: {name!r}")
        parent = self._directory(parent_id)
        entry_id = self._next_id
        self._next_id += 1
        self._entries[entry_id] = ArchiveEntry(
            id=entry_id,
            name=name,
            kind=kind,
            parent=parent_id,
            content=content,
            comment=comment,
        )
        parent.children[name] = entry_id
        return entry_id

    # Lookup

    def get_child(self, parent_id: int, name: str) -> int | None:
        """Return the id of the direct child called ``name``, if any."""
        return self._directory(parent_id).children.get(name)

    def children(self, parent_id: int) -> list[int]:
        """Return child ids of a directory in insertion order."""
        return list(self._directory(parent_id).children.values())

    def find(self, base_id: int, path: str) -> int | None:
        """Resolve a slash-separated path relative to ``base_id``.

        An empty path resolves to ``base_id`` itself.
        """
        current = base_id
        for part in split_path(path):
            entry = self._entries[current]
            if not entry.is_directory:
                return None
            child = entry.children.get(part)
            if child is None:
                return None
            current = child
        return current

    def path_of(self, entry_id: int) -> str:
        """Return the slash-separated path of an entry from the root."""
        parts: list[str] = []
        current: int | None = entry_id
        while current is not None and current != ROOT_ID:
            entry = self._entries[current]
            parts.append(entry.name)
            current = entry.parent
        return "/".join(reversed(parts))

    # Creation

    def add_directory(self, parent_id: int, name: str, comment: str = "") -> int:
        """Get or create a subdirectory.

        A leaf occupying ``name`` is replaced by the new directory.
        """
        existing = self.get_child(parent_id, name)
        if existing is not None:
            if self._entries[existing].is_directory:
                return existing
            self.remove(existing)
        return self._new_entry(parent_id, name, EntryKind.DIRECTORY, comment=comment)

    def ensure_directory(self, base_id: int, path: str, comment: str = "") -> int:
        """Get or create every directory along ``path`` below ``base_id``.

        Raises:
            NotADirectoryError: If a leaf sits on the path
        """
        current = base_id
        for part in split_path(path):
            child = self.get_child(current, part)
            if child is None:
                child = self._new_entry(current, part, EntryKind.DIRECTORY, comment=comment)
            elif not self._entries[child].is_directory:
                raise NotADirectoryError(
                    f"Archive entry {self.path_of(child)!r} is not a directory"
                )
            current = child
        return current

    def add_blob(self, parent_id: int, name: str, content: bytes, comment: str = "") -> int:
        """Add a binary leaf, replacing any entry with the same name."""
        existing = self.get_child(parent_id, name)
        if existing is not None:
            self.remove(existing)
        return self._new_entry(parent_id, name, EntryKind.LEAF, content=content, comment=comment)

    def add_text(
        self, parent_id: int, name: str, text: str, comment: str = "", encoding: str = "utf-8"
    ) -> int:
        """Add a text leaf, replacing any entry with the same name."""
        return self.add_blob(
            parent_id, name, text.encode(encoding, errors="surrogateescape"), comment=comment
        )

    # Mutation

    def remove(self, entry_id: int) -> None:
        """Remove an entry and, for directories, everything below it."""
        if entry_id == ROOT_ID:
            raise ValueError("The archive root cannot be removed")
        entry = self._entries[entry_id]
        if entry.parent is not None:
            self._entries[entry.parent].children.pop(entry.name, None)
        stack = [entry_id]
        while stack:
            current = self._entries.pop(stack.pop())
            stack.extend(current.children.values())

    def move(self, entry_id: int, new_parent_id: int) -> int:
        """Reparent an entry under ``new_parent_id``.

        On a name collision two directories are merged recursively (the moved
        side wins leaf collisions); otherwise the moved entry replaces the
        existing one.

        Returns:
            Id of the entry now holding the moved content at the destination
        """
        entry = self._entries[entry_id]
        new_parent = self._directory(new_parent_id)
        if entry.parent == new_parent_id:
            return entry_id
        if self._is_ancestor(entry_id, new_parent_id):
            raise ValueError(
                f"Cannot move {self.path_of(entry_id)!r} into its own subtree "
                f"{self.path_of(new_parent_id)!r}"
            )

        existing = new_parent.children.get(entry.name)
        if existing is not None:
            if entry.is_directory and self._entries[existing].is_directory:
                for child in list(entry.children.values()):
                    self.move(child, existing)
                self.remove(entry_id)
                return existing
            self.remove(existing)

        self._detach(entry_id)
        entry.parent = new_parent_id
        new_parent.children[entry.name] = entry_id
        return entry_id

    def rename(self, entry_id: int, new_name: str) -> None:
        """Rename an entry in place, replacing any sibling with ``new_name``."""
        if not new_name or "/" in new_name or "\\" in new_name:
            raise ValueError(f"Invalid archive entry name: {new_name!r}")
        entry = self._entries[entry_id]
        if entry.parent is None:
            raise ValueError("The archive root cannot be renamed")
        if entry.name == new_name:
            return
        siblings = self._entries[entry.parent].children
        existing = siblings.get(new_name)
        if existing is not None:
            self.remove(existing)
        del siblings[entry.name]
        entry.name = new_name
        siblings[new_name] = entry_id

    def _detach(self, entry_id: int) -> None:
        entry = self._entries[entry_id]
        if entry.parent is not None:
            del self._entries[entry.parent].children[entry.name]

    def _is_ancestor(self, ancestor_id: int, entry_id: int) -> bool:
        current: int | None = entry_id
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._entries[current].parent
        return False

    # Traversal and export

    def walk(self, base_id: int = ROOT_ID) -> Iterator[tuple[str, ArchiveEntry]]:
        """Yield ``(path, entry)`` pairs depth-first below ``base_id``."""
        for child_id in self.children(base_id):
            child = self._entries[child_id]
            yield self.path_of(child_id), child
            if child.is_directory:
                yield from self.walk(child_id)

    def leaf_paths(self, base_id: int = ROOT_ID) -> list[str]:
        """Paths of every leaf below ``base_id``."""
        return [path for path, entry in self.walk(base_id) if not entry.is_directory]

    def to_zip_bytes(self) -> bytes:
        """Serialize the whole tree to a deflated zip archive."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path, entry in self.walk():
                if entry.is_directory:
                    info = zipfile.ZipInfo(path + "/")
                    info.external_attr = 0o40755 << 16 | 0x10
                    data = b""
                else:
                    info = zipfile.ZipInfo(path)
                    info.external_attr = 0o644 << 16
                    data = entry.content
                info.compress_type = zipfile.ZIP_DEFLATED
                if entry.comment:
                    info.comment = entry.comment.encode("utf-8")
                zf.writestr(info, data)
        logger.debug("Exported archive with %d entries", len(self._entries) - 1)
        return buffer.getvalue()
