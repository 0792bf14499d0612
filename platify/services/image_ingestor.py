"""Image upload ingestion."""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from platify.utils.exceptions import (
    ImageValidationError,
    StorageError,
    UnsupportedImageError,
    UploadTooLargeError,
)

logger = logging.getLogger(__name__)

SNIFF_LEN = 512
CHUNK_SIZE = 64 * 1024
OCTET_STREAM = "application/octet-stream"

# Sniffed content type -> stored file extension.
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def detect_content_type(header: bytes) -> str:
    """
    Detect the content type from the leading magic bytes.

    Only the first 512 bytes are considered. Client-declared types and file
    extensions play no part.

    Args:
        header: Leading bytes of the file

    Returns:
        MIME type string, ``application/octet-stream`` if unrecognised
    """
    header = header[:SNIFF_LEN]
    if header.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if header.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if header.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if header.startswith(b"RIFF") and header[8:14] == b"WEBPVP":
        return "image/webp"
    if header.startswith(b"BM"):
        return "image/bmp"
    if header.startswith((b"\x00\x00\x01\x00", b"\x00\x00\x02\x00")):
        return "image/x-icon"
    return OCTET_STREAM


def random_suffix() -> int:
    return secrets.randbits(32)


class ImageIngestor:
    """
    Validate uploaded images by content and store them under unique names.

    Filenames are ``<nanosecond timestamp>_<8 hex digits>.<ext>``. The
    timestamp alone repeats under concurrent uploads within one clock tick
    and the random part alone can collide under bursts; together they make a
    collision negligible without any locking.
    """

    def __init__(
        self,
        upload_dir: Path,
        public_prefix: str,
        max_bytes: int,
        clock: Callable[[], int] = time.time_ns,
        rand32: Callable[[], int] = random_suffix,
    ):
        self.upload_dir = Path(upload_dir)
        self.public_prefix = public_prefix.rstrip("/")
        self.max_bytes = max_bytes
        self._clock = clock
        self._rand32 = rand32

    def make_filename(self, ext: str) -> str:
        return f"{self._clock()}_{self._rand32() & 0xFFFFFFFF:08x}{ext}"

    async def ingest(self, upload: Optional[UploadFile]) -> str:
        """
        Store one uploaded image.

        Args:
            upload: The multipart file field, or None if it was absent

        Returns:
            Public URL path of the stored file

        Raises:
            ImageValidationError: If no file was provided
            UnsupportedImageError: If the content is not JPEG, PNG, GIF or WebP
            UploadTooLargeError: If the file exceeds the size budget
            StorageError: If the file cannot be written
        """
        if upload is None:
            raise ImageValidationError("no image provided")

        header = await upload.read(SNIFF_LEN)
        content_type = detect_content_type(header)
        ext = ALLOWED_IMAGE_TYPES.get(content_type)
        if ext is None:
            logger.info(
                "Rejected upload with unsupported content",
                extra={
                    "sniffed_type": content_type,
                    "declared_type": upload.content_type,
                    "upload_filename": upload.filename,
                },
            )
            raise UnsupportedImageError("unsupported image type; use JPEG, PNG, GIF or WebP")

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create upload directory {self.upload_dir}: {e}", exc_info=True)
            raise StorageError("storage error") from e

        filename = self.make_filename(ext)
        destination = self.upload_dir / filename

        await upload.seek(0)
        await run_in_threadpool(self._write, upload.file, destination)

        logger.info(
            f"Stored upload {filename}",
            extra={"content_type": content_type, "path": str(destination)},
        )
        return f"{self.public_prefix}/{filename}"

    def _write(self, source: BinaryIO, destination: Path) -> None:
        try:
            out = open(destination, "xb")
        except OSError as e:
            logger.error(f"Failed to create upload {destination}: {e}", exc_info=True)
            raise StorageError("failed to save image") from e

        written = 0
        try:
            with out:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError("image too large")
                    out.write(chunk)
        except UploadTooLargeError:
            self._discard(destination)
            raise
        except OSError as e:
            logger.error(f"Failed to save upload {destination}: {e}", exc_info=True)
            self._discard(destination)
            raise StorageError("failed to save image") from e

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove partial upload {path}: {e}")
