"""Temporary storage for uploaded images."""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import UploadFile

from src.core.config import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class UploadError(Exception):
    """Exception raised when an uploaded file is rejected."""

    pass


class UploadTooLargeError(UploadError):
    """Uploaded file exceeds the configured size limit."""

    pass


def _unique_name(upload: UploadFile) -> str:
    suffix = Path(upload.filename or "").suffix.lower()
    return f"image-{time.time_ns()}-{uuid.uuid4().hex[:8]}{suffix}"


def cleanup_file(path: Path) -> None:
    """Remove a staged upload, logging but not raising on failure."""
    try:
        path.unlink(missing_ok=True)
        logger.info(f"Cleaned up file: {path}")
    except OSError as e:
        logger.error(f"Failed to cleanup file {path}: {e}")


@asynccontextmanager
async def staged_upload(
    upload: UploadFile,
    max_bytes: Optional[int] = None,
    upload_dir: Optional[Path] = None,
) -> AsyncIterator[Path]:
    """
    Stream an upload to a temp file and remove it when the block exits.

    Args:
        upload: The multipart file from the request
        max_bytes: Size limit, defaults to MAX_UPLOAD_BYTES
        upload_dir: Directory for staged files, defaults to UPLOAD_DIR

    Yields:
        Path of the staged file

    Raises:
        UploadError: If the file is not an image
        UploadTooLargeError: If the file exceeds max_bytes
    """
    max_bytes = max_bytes or settings.max_upload_bytes
    upload_dir = upload_dir or settings.upload_path

    if not (upload.content_type or "").startswith("image/"):
        raise UploadError("Only image files are allowed!")

    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / _unique_name(upload)

    try:
        written = 0
        with path.open("wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise UploadTooLargeError(
                        f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB"
                    )
                out.write(chunk)

        logger.info(f"Staged upload {upload.filename!r} at {path} ({written} bytes)")
        yield path
    finally:
        cleanup_file(path)


def sweep_stale_uploads(
    max_age_seconds: Optional[float] = None,
    upload_dir: Optional[Path] = None,
) -> int:
    """
    Delete staged files older than max_age_seconds.

    Returns:
        Number of files removed
    """
    if max_age_seconds is None:
        max_age_seconds = settings.upload_max_age_minutes * 60
    upload_dir = upload_dir or settings.upload_path

    if not upload_dir.is_dir():
        return 0

    cutoff = time.time() - max_age_seconds
    removed = 0
    for path in upload_dir.iterdir():
        try:
            if path.is_file() and path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        except OSError as e:
            logger.error(f"Failed to remove stale upload {path}: {e}")

    if removed:
        logger.info(f"Removed {removed} stale upload(s) from {upload_dir}")
    return removed
