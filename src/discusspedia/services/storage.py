"""Local-disk storage for uploaded post images."""

from __future__ import annotations

import asyncio
import shutil
import time
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Protocol

from discusspedia.core.settings import settings


class ImageStorage(Protocol):
    """Persists uploaded bytes and returns the path they can be served from."""

    async def save(self, post_id: int, filename: str, source: BinaryIO) -> str: ...

    async def remove(self, path: str) -> None: ...


def sanitize_filename(filename: str) -> str:
    """Strip directories and spaces from a client-supplied filename."""
    name = PurePosixPath(filename.replace("\\", "/")).name.replace(" ", "")
    return name or "image"


class LocalImageStorage:
    """Write images below ``root`` under collision-resistant generated names."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def build_name(self, post_id: int, filename: str) -> str:
        """Return ``{post_id}-{nanoseconds}-{sanitized filename}``."""
        return f"{post_id}-{time.time_ns()}-{sanitize_filename(filename)}"

    def _copy(self, source: BinaryIO, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        source.seek(0)
        # "xb" refuses to overwrite an existing file.
        with target.open("xb") as out:
            shutil.copyfileobj(source, out)

    async def save(self, post_id: int, filename: str, source: BinaryIO) -> str:
        """Copy ``source`` to disk in a worker thread and return the stored path."""
        target = self.root / self.build_name(post_id, filename)
        await asyncio.to_thread(self._copy, source, target)
        return target.as_posix()

    async def remove(self, path: str) -> None:
        """Delete a previously saved file; a missing file is not an error."""
        await asyncio.to_thread(Path(path).unlink, missing_ok=True)


def get_image_storage() -> ImageStorage:
    """Return the configured image storage (overridable as a dependency)."""
    return LocalImageStorage(settings.media_root)
