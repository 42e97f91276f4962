"""Concurrent handling of image uploads for a post."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from sqlalchemy.exc import SQLAlchemyError

from discusspedia.services.storage import ImageStorage

logger = logging.getLogger(__name__)

UNSUPPORTED_FILE_TYPE = "Unsupported file type"


class UploadedFile(Protocol):
    """The parts of an uploaded file the service needs."""

    filename: str | None
    content_type: str | None
    file: BinaryIO


class ImageRecorder(Protocol):
    """Store that records where an image was written."""

    def add_image(self, post_id: int, path: str) -> int: ...


@dataclass
class ImageUploadOutcome:
    """Result for one file of an upload request."""

    filename: str
    image_id: int | None = None
    path: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def upload_post_images(
    post_id: int,
    files: Iterable[UploadedFile],
    *,
    storage: ImageStorage,
    recorder: ImageRecorder,
) -> list[ImageUploadOutcome]:
    """Store and record every file, each as an independent unit of work.

    Copies run concurrently; recording is serialized through a lock so the
    session is never used by two files at once. A failing file does not roll
    back or stop its siblings; its error is returned in its outcome instead.

    Args:
        post_id: Post the images belong to; must already exist.
        files: Uploaded files in request order.
        storage: Where file bytes are written; files that cannot be recorded are removed again.
        recorder: Store receiving one ``(post_id, path)`` record per stored file.

    Returns:
        One outcome per file, in request order.
    """
    record_lock = asyncio.Lock()

    async def _process(upload: UploadedFile) -> ImageUploadOutcome:
        filename = upload.filename or ""
        if upload.content_type and not upload.content_type.startswith("image/"):
            return ImageUploadOutcome(filename, error=UNSUPPORTED_FILE_TYPE)

        try:
            path = await storage.save(post_id, filename, upload.file)
        except OSError:
            logger.warning("Failed to store image %r for post %s", filename, post_id, exc_info=True)
            return ImageUploadOutcome(filename, error="Failed to store file")

        async with record_lock:
            try:
                image_id = recorder.add_image(post_id, path)
            except SQLAlchemyError:
                logger.error("Failed to record image %s for post %s", path, post_id, exc_info=True)
                recorded = False
            else:
                recorded = True

        if not recorded:
            # No row points at the file, so it must not stay on disk.
            try:
                await storage.remove(path)
            except OSError:
                logger.warning("Failed to remove unrecorded image %s", path, exc_info=True)
            return ImageUploadOutcome(filename, error="Failed to record file")

        return ImageUploadOutcome(filename, image_id=image_id, path=path)

    outcomes = await asyncio.gather(*(_process(upload) for upload in files))
    return list(outcomes)
