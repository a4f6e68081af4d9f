"""Property image storage on the local filesystem."""

import os
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from roombook.models import BookingError, ErrorCode
from roombook.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}

URL_PREFIX = "/uploads/"


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded file as received from a multipart form."""

    filename: str
    content_type: str
    data: bytes


class ImageStorage:
    """Save and remove listing images under an upload directory.

    Stored files are named ``<epoch-ms>-<random><stem><ext>`` and addressed
    by the public path ``/uploads/<name>``. The extension always follows the
    validated content type, never the client file name.
    """

    def __init__(self, upload_dir: str | Path, max_bytes: int) -> None:
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def validate(self, upload: ImageUpload) -> None:
        """Reject unsupported types and oversized files.

        Raises:
            BookingError: INVALID_IMAGE_TYPE or IMAGE_TOO_LARGE.
        """
        if upload.content_type not in ALLOWED_CONTENT_TYPES:
            raise BookingError(
                ErrorCode.INVALID_IMAGE_TYPE,
                details={"filename": upload.filename, "content_type": upload.content_type},
            )
        if len(upload.data) > self.max_bytes:
            raise BookingError(
                ErrorCode.IMAGE_TOO_LARGE,
                details={"filename": upload.filename, "max_bytes": str(self.max_bytes)},
            )

    def save_all(self, uploads: list[ImageUpload]) -> list[str]:
        """Validate every upload first, then write them all.

        Returns:
            Public paths of the stored images, in upload order.
        """
        for upload in uploads:
            self.validate(upload)
        return [self._write(upload) for upload in uploads]

    def _write(self, upload: ImageUpload) -> str:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        stem = _safe_stem(upload.filename)
        ext = ALLOWED_CONTENT_TYPES[upload.content_type]
        name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{stem}{ext}"
        (self.upload_dir / name).write_bytes(upload.data)
        logger.debug("Stored image %s", name)
        return URL_PREFIX + name

    def delete(self, public_path: str) -> bool:
        """Remove a stored image; paths outside the upload directory are ignored.

        Returns:
            True if a file was removed.
        """
        name = os.path.basename(public_path)
        if not name or not public_path.startswith(URL_PREFIX):
            return False
        target = self.upload_dir / name
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning("Image already missing: %s", name)
            return False
        return True

    def delete_all(self, public_paths: list[str]) -> int:
        return sum(1 for path in public_paths if self.delete(path))


def _safe_stem(filename: str) -> str:
    """Base name without extension, reduced to letters, digits, ``-`` and ``_``."""
    stem = Path(os.path.basename(filename or "")).stem
    return "".join(c for c in stem if c.isalnum() or c in "-_")[:64] or "image"
