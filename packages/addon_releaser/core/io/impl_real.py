"""Real filesystem implementation using aiofiles for async I/O.

Provides atomic writes via temp file + os.replace().
Async-first with high-performance non-blocking I/O.
"""

import asyncio
import os
import time
from pathlib import Path
from tempfile import NamedTemporaryFile

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, DirEntry, WriteResult


class RealFileSystem:
    """
    Real filesystem implementation using aiofiles for async I/O.

    Provides atomic writes via temp file + os.replace().
    """

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """Read file bytes asynchronously."""
        async with aiofiles.open(path, mode="rb") as f:
            content: bytes = await f.read()
            return content

    async def scandir(self, path: AbsolutePath) -> list[DirEntry]:
        """List directory entries asynchronously, sorted by name."""
        names: list[str] = await aiofiles.os.listdir(path)
        entries: list[DirEntry] = []
        for name in sorted(names):
            child = Path(path) / name
            entries.append(
                DirEntry(
                    name=name,
                    is_file=bool(await aiofiles.os.path.isfile(child)),
                    is_dir=bool(await aiofiles.os.path.isdir(child)),
                )
            )
        return entries

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """Atomically write bytes asynchronously."""
        start = time.perf_counter()
        path_obj = Path(path)

        await aiofiles.os.makedirs(path_obj.parent, exist_ok=True)

        # Atomic write: temp file in the same directory, then replace
        loop = asyncio.get_event_loop()

        def create_temp_file() -> str:
            tmp = NamedTemporaryFile(mode="wb", dir=path_obj.parent, delete=False)
            tmp_path = tmp.name
            tmp.close()
            return tmp_path

        tmp_path = await loop.run_in_executor(None, create_temp_file)

        try:
            async with aiofiles.open(tmp_path, mode="wb") as f:
                await f.write(content)

            await loop.run_in_executor(None, os.replace, tmp_path, str(path))
        except Exception:
            # Clean up temp on failure
            try:
                await aiofiles.os.unlink(tmp_path)
            except OSError:
                pass
            raise

        duration = (time.perf_counter() - start) * 1000

        return WriteResult(
            path=str(path),
            bytes_written=len(content),
            duration_ms=duration,
        )

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory and parents asynchronously."""
        await aiofiles.os.makedirs(path, exist_ok=exist_ok)
