"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O.
Async operations complete immediately but maintain async interface.
"""

from pathlib import Path

from .models import AbsolutePath, DirEntry, WriteResult


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    Not thread-safe (use per-test instance).
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}  # Root always exists

    def add_file(self, path: str | Path, content: bytes | str) -> None:
        """Seed a file (sync helper for test setup)."""
        path_obj = Path(path)
        self._ensure_parents(path_obj.parent)
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[str(path_obj)] = content

    def files(self) -> dict[str, bytes]:
        """Snapshot of every stored file keyed by path."""
        return dict(self._files)

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """Read bytes (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]

    async def scandir(self, path: AbsolutePath) -> list[DirEntry]:
        """List directory (async, immediate)."""
        dir_path = Path(path)
        if str(dir_path) not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        entries: dict[str, DirEntry] = {}
        for file_path in self._files:
            p = Path(file_path)
            if p.parent == dir_path:
                entries[p.name] = DirEntry(name=p.name, is_file=True)
        for sub in self._dirs:
            p = Path(sub)
            if p != dir_path and p.parent == dir_path:
                entries[p.name] = DirEntry(name=p.name, is_dir=True)

        return [entries[name] for name in sorted(entries)]

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """Write bytes (async, immediate)."""
        path_obj = Path(path)
        if str(path_obj) in self._dirs:
            raise IsADirectoryError(f"Is a directory: {path}")
        self._ensure_parents(path_obj.parent)
        self._files[str(path_obj)] = content

        return WriteResult(path=str(path_obj), bytes_written=len(content), duration_ms=0.0)

    def _ensure_parents(self, path: Path) -> None:
        """Recursively create parent directories (sync helper)."""
        parts = path.parts
        for i in range(1, len(parts) + 1):
            self._dirs.add(str(Path(*parts[:i])))

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory (async, immediate)."""
        path_str = str(Path(path))
        if not exist_ok and path_str in self._dirs:
            raise FileExistsError(f"Directory exists: {path}")
        self._ensure_parents(Path(path))


class FakeByteFetcher:
    """In-memory `ByteFetcher` serving canned responses by URI."""

    def __init__(self, responses: dict[str, bytes] | None = None) -> None:
        self.responses = dict(responses or {})
        self.requested: list[str] = []

    async def fetch(self, uri: str) -> bytes:
        """Return the canned body for ``uri``."""
        self.requested.append(uri)
        if uri not in self.responses:
            raise ConnectionError(f"No canned response for {uri}")
        return self.responses[uri]
