"""Filesystem abstraction layer for the Add-On Releaser.

Provides safe, testable, async-first filesystem operations.

Example:
    >>> from addon_releaser.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> data = await fs.read_bytes(absolute_path("packs/BP/manifest.json"))
"""

from .impl_fake import FakeByteFetcher, FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, DirEntry, WriteResult, absolute_path
from .protocols import ByteFetcher, FileSystem

__all__ = [
    # Path types and constructors
    "AbsolutePath",
    "absolute_path",
    # Result types
    "DirEntry",
    "WriteResult",
    # Protocols
    "FileSystem",
    "ByteFetcher",
    # Implementations
    "RealFileSystem",
    "FakeFileSystem",
    "FakeByteFetcher",
]
