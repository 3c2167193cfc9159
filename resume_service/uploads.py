"""
Temporary storage for uploaded resumes.

The uploaded PDF is written to the upload directory under a unique name,
handed to the pipeline as a path, and deleted when the request finishes,
whether it succeeded or failed.
"""

import asyncio
import logging
import os
import random
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
_CHUNK_SIZE = 1024 * 1024


class UploadValidationError(ValueError):
    """Upload rejected before the pipeline starts (mapped to HTTP 400)."""


def unique_upload_name(field_name: str, original_name: str) -> str:
    """
    Build a collision-resistant file name.

    Example:
        >>> unique_upload_name("resume", "cv.pdf")  # doctest: +SKIP
        'resume-1718000000000-482913756.pdf'
    """
    suffix = Path(original_name or "").suffix.lower() or ".pdf"
    return f"{field_name}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"


async def save_upload(upload: UploadFile, upload_dir: Path, max_bytes: int) -> Path:
    """
    Validate and write an uploaded PDF to disk.

    Raises:
        UploadValidationError: Wrong content type or file too large
    """
    if upload.content_type != PDF_MIME_TYPE:
        raise UploadValidationError("Only PDF files are allowed")

    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / unique_upload_name("resume", upload.filename)

    written = 0
    try:
        with open(path, "wb") as f:
            while True:
                chunk = await upload.read(_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise UploadValidationError(
                        f"PDF file size too large (max {max_bytes / (1024 * 1024):g}MB)"
                    )
                await asyncio.to_thread(f.write, chunk)
    except BaseException:
        remove_upload(path)
        raise

    if written == 0:
        remove_upload(path)
        raise UploadValidationError("PDF resume file is empty")

    logger.info(f"Stored upload {path} ({written} bytes)")
    return path


def remove_upload(path: Path) -> None:
    """Delete a stored upload if it still exists."""
    if path.exists():
        os.unlink(path)
        logger.info(f"Uploaded file cleaned up: {path.name}")


@asynccontextmanager
async def stored_upload(
    upload: UploadFile,
    upload_dir: Path,
    max_bytes: int,
) -> AsyncIterator[Path]:
    """Store an upload for the duration of the block, then delete it."""
    path = await save_upload(upload, upload_dir, max_bytes)
    try:
        yield path
    finally:
        remove_upload(path)
