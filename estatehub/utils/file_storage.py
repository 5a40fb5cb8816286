"""
utils/file_storage.py

Handles saving uploaded files (property photos, avatars, ID documents) to
local disk. Swap out `_write_upload` internals later for S3 / Cloudinary / etc.
without touching any router code.
"""

import logging
import uuid
from typing import Optional

import aiofiles
from fastapi import UploadFile, HTTPException, status
from pathlib import Path

from estatehub.core.config import settings

logger = logging.getLogger(__name__)

# ─── Config ───────────────────────────────────────────────────────────────────
# Set MEDIA_ROOT in production to point to your persistent volume.

MEDIA_ROOT = Path(settings.MEDIA_ROOT)
PROPERTY_IMAGES_DIR = MEDIA_ROOT / "properties"
AVATARS_DIR = MEDIA_ROOT / "avatars"
# ID documents are private: never mounted under the public /media route
ID_DOCUMENTS_DIR = MEDIA_ROOT.parent / "private" / "id_documents"

BASE_URL = settings.BASE_URL

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
ALLOWED_DOCUMENT_TYPES = ALLOWED_IMAGE_TYPES | {"application/pdf"}
ALLOWED_DOCUMENT_EXTENSIONS = ALLOWED_EXTENSIONS | {".pdf"}
MAX_IMAGE_SIZE_MB = 10
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024

# Map file extensions → canonical content type
_EXT_TO_CONTENT_TYPE = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}

_CONTENT_TYPE_TO_EXT = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}


def _resolve_content_type(
    file: UploadFile,
    allowed_types: set = ALLOWED_IMAGE_TYPES,
    allowed_extensions: set = ALLOWED_EXTENSIONS,
) -> tuple[str, str]:
    """
    Return (content_type, extension) for the uploaded file.

    iOS / some Android clients send 'application/octet-stream' instead of the
    real MIME type, so we fall back to inspecting the filename extension.
    Raises HTTPException if the type cannot be determined or is not allowed.
    """
    content_type = (file.content_type or "").lower()

    if content_type in allowed_types:
        return content_type, _CONTENT_TYPE_TO_EXT[content_type]

    filename = file.filename or ""
    ext = Path(filename).suffix.lower()
    if ext in allowed_extensions:
        resolved_type = _EXT_TO_CONTENT_TYPE[ext]
        return resolved_type, ext if ext != ".jpeg" else ".jpg"

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=(
            f"Cannot determine file type for '{filename}' "
            f"(content-type: '{content_type}')."
        ),
    )


async def _write_upload(file: UploadFile, directory: Path, ext: str, prefix: str = "") -> Path:
    directory.mkdir(parents=True, exist_ok=True)

    contents = await file.read()
    if len(contents) > MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File '{file.filename}' exceeds {MAX_IMAGE_SIZE_MB}MB limit.",
        )

    file_path = directory / f"{prefix}{uuid.uuid4().hex}{ext}"
    async with aiofiles.open(file_path, "wb") as out:
        await out.write(contents)
    return file_path


async def save_property_image(file: UploadFile) -> str:
    """
    Validate, save an uploaded image file, and return its public URL.
    Returns: full URL string, e.g. 'http://localhost:8000/media/properties/uuid.jpg'
    """
    _content_type, ext = _resolve_content_type(file)
    file_path = await _write_upload(file, PROPERTY_IMAGES_DIR, ext)
    return f"{BASE_URL}/media/properties/{file_path.name}"


async def save_property_images(files: list[UploadFile]) -> list[str]:
    """Save multiple images and return their URLs in order."""
    urls = []
    for f in files:
        url = await save_property_image(f)
        urls.append(url)
    return urls


def delete_property_image(image_url: str) -> bool:
    """
    Delete an image file from disk given its full URL.
    Returns False if the file was not one of ours or is already gone.
    """
    if "/media/properties/" not in image_url:
        return False
    filename = image_url.split("/media/properties/")[-1]
    file_path = PROPERTY_IMAGES_DIR / filename
    try:
        file_path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not delete {file_path}: {e}")
        return False
    return True


async def save_avatar(user_id: uuid.UUID, file: UploadFile) -> str:
    _content_type, ext = _resolve_content_type(file)
    file_path = await _write_upload(file, AVATARS_DIR, ext, prefix=f"{user_id.hex}_")
    return f"{BASE_URL}/media/avatars/{file_path.name}"


async def save_id_document(file: UploadFile, owner_id: Optional[uuid.UUID] = None) -> str:
    """Store an ID document privately and return its filesystem path.

    Raises a 400 for a disallowed type or an oversized file before anything
    is written, so callers can validate an upload ahead of creating rows.
    """
    _content_type, ext = _resolve_content_type(
        file, ALLOWED_DOCUMENT_TYPES, ALLOWED_DOCUMENT_EXTENSIONS
    )
    prefix = f"{owner_id.hex}_" if owner_id is not None else ""
    file_path = await _write_upload(file, ID_DOCUMENTS_DIR, ext, prefix=prefix)
    return str(file_path)


def discard_id_document(path: str) -> bool:
    """Remove a stored ID document. Returns False if it was not there."""
    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not delete {path}: {e}")
        return False
    return True


def id_document_media_type(path: str) -> str:
    return _EXT_TO_CONTENT_TYPE.get(Path(path).suffix.lower(), "application/octet-stream")
