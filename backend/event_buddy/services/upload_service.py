"""
Image upload handling for event pictures.

Only image/* uploads are accepted, capped at MAX_UPLOAD_BYTES. Files are
stored under UPLOAD_DIR with a random name so client filenames never reach
the filesystem; only a whitelisted extension is kept.
"""

import uuid
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from event_buddy.core.config import get_settings
from event_buddy.core.exceptions import InvalidInput, PayloadTooLarge
from event_buddy.core.logging import get_logger
from event_buddy.core.metrics import record_upload

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "image/heif": ".heif",
}
ALLOWED_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".heif"}


def _extension(content_type: str, filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix in ALLOWED_SUFFIXES:
        return suffix
    return EXTENSIONS.get(content_type, "")


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def store_image(upload: UploadFile) -> str:
    """
    Validate and persist an uploaded image.
    Returns the stored filename.
    """
    settings = get_settings()
    content_type = (upload.content_type or "").lower()

    if not content_type.startswith("image/"):
        record_upload(stored=False)
        logger.warning("upload_rejected", reason="not_an_image", content_type=content_type)
        raise InvalidInput("Only image files are allowed")

    # Read at most one byte past the limit so oversized bodies are not buffered whole
    chunks = []
    size = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > settings.MAX_UPLOAD_BYTES:
            record_upload(stored=False)
            logger.warning("upload_rejected", reason="too_large", limit=settings.MAX_UPLOAD_BYTES)
            raise PayloadTooLarge(f"Image must be at most {settings.MAX_UPLOAD_BYTES} bytes")
        chunks.append(chunk)

    if size == 0:
        record_upload(stored=False)
        raise InvalidInput("Uploaded image is empty")

    filename = f"{uuid.uuid4().hex}{_extension(content_type, upload.filename)}"
    await run_in_threadpool(_write, Path(settings.UPLOAD_DIR) / filename, b"".join(chunks))

    record_upload(stored=True, size=size)
    logger.info("image_stored", filename=filename, size=size, content_type=content_type)
    return filename
