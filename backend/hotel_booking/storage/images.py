"""Room image file storage.

Routes depend on :class:`ImageStorage` through :func:`get_image_storage`, so
the local-disk implementation can be swapped (or pointed at a temporary
directory in tests) without touching the handlers. Only the stored file name
is persisted; files are served from ``/uploads/<name>``.
"""

import logging
import uuid
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile

from hotel_booking.config import settings
from hotel_booking.errors import ValidationError

logger = logging.getLogger(__name__)

# Content type -> extension given to the stored file.
ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}


class ImageStorage(Protocol):
    async def save(self, upload: UploadFile) -> str: ...

    def delete(self, name: str) -> None: ...


class LocalImageStorage:
    """Stores uploads as uniquely named files in one directory."""

    def __init__(self, directory: Path, max_bytes: int) -> None:
        self.directory = directory
        self.max_bytes = max_bytes

    async def save(self, upload: UploadFile) -> str:
        """Validate and write ``upload``; return the generated file name.

        Raises:
            ValidationError: Not a JPEG/PNG/GIF, empty, or over the size limit.
        """
        extension = ALLOWED_CONTENT_TYPES.get(upload.content_type or "")
        if extension is None:
            raise ValidationError("Only JPEG, PNG or GIF images are allowed.")

        data = await upload.read()
        if not data:
            raise ValidationError(f"Image {upload.filename!r} is empty.")
        if len(data) > self.max_bytes:
            raise ValidationError(f"Image {upload.filename!r} exceeds the {self.max_bytes} byte limit.")

        name = f"{uuid.uuid4().hex}{extension}"
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / name).write_bytes(data)
        logger.info("Stored image %s (%d bytes) as %s", upload.filename, len(data), name)
        return name

    def delete(self, name: str) -> None:
        path = self.directory / Path(name).name
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Image file %s was already removed", path)
        else:
            logger.info("Deleted image file %s", path)


_storage = LocalImageStorage(Path(settings.upload_dir), settings.max_image_size_bytes)


def get_image_storage() -> ImageStorage:
    """FastAPI dependency returning the configured image storage."""
    return _storage
