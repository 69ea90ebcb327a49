"""Protocols for filesystem and network byte sources.

Defines the async-first capabilities the release pipeline consumes.
"""

from typing import Protocol

from .models import AbsolutePath, DirEntry, WriteResult


class FileSystem(Protocol):
    """
    Protocol for async filesystem operations.

    All implementations must provide atomic write semantics and
    handle platform-specific details transparently.
    """

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read raw file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            IOError: On read failure
        """
        ...

    async def scandir(self, path: AbsolutePath) -> list[DirEntry]:
        """
        List directory contents with file/directory discrimination.

        Entries are returned sorted by name so archive layout is deterministic.

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """
        Atomically write bytes to a file.

        Raises:
            IOError: On write failure (e.g. unwritable target)
        """
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory and all parents."""
        ...


class ByteFetcher(Protocol):
    """Fetches the body of a remote resource."""

    async def fetch(self, uri: str) -> bytes:
        """
        Fetch bytes from an absolute URI.

        Raises:
            ApiError: On network or HTTP failure
        """
        ...
