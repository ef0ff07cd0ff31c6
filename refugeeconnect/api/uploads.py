"""
Media upload handling for information records.

Files are stored under `settings.UPLOAD_DIR` with a random name that keeps the
original extension, and served back through the `/uploads` static mount
(which is rooted at `UPLOAD_DIR`).
"""

import os
import uuid
import shutil
import logging
from fastapi import HTTPException, UploadFile
from refugeeconnect.database.config.config import settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    ".jpeg", ".jpg", ".png", ".gif", ".pdf", ".doc", ".docx", ".mp3", ".wav", ".mp4", ".webm",
}


def guess_ext(filename: str) -> str:
    """
    Extract the file extension from a filename.

    Args:
        filename (str): Input filename.

    Returns:
        str: Lowercased file extension (e.g., ".pdf").
    """
    _, ext = os.path.splitext(filename or "")
    return ext.lower()


def media_type_for(mime: str) -> str:
    """Map a MIME type to image, video, audio or document."""
    mime = (mime or "").lower()
    for prefix in ("image", "video", "audio"):
        if mime.startswith(f"{prefix}/"):
            return prefix
    return "document"


def validate_uploads(files: list[UploadFile]) -> None:
    """Reject too many files, a disallowed extension, or an oversized file (400)."""
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise HTTPException(status_code=400, detail=f"At most {settings.MAX_UPLOAD_FILES} files are allowed")
    for f in files:
        if guess_ext(f.filename) not in ALLOWED_EXTENSIONS:
            raise HTTPException(status_code=400, detail="Invalid file type")
        if f.size is not None and f.size > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=400, detail="File too large")


def persist_upload(f: UploadFile) -> dict:
    """
    Save an uploaded file and describe it as a media attachment.

    Returns:
        dict: ``{type, url, caption, language}``; `url` is the public path.
    """
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    new_name = f"{uuid.uuid4().hex}{guess_ext(f.filename)}"
    dest = os.path.join(settings.UPLOAD_DIR, new_name)
    with open(dest, "wb") as out:
        shutil.copyfileobj(f.file, out)
    if os.path.getsize(dest) > settings.MAX_UPLOAD_BYTES:
        os.remove(dest)
        raise HTTPException(status_code=400, detail="File too large")
    logger.info("Stored upload %s as %s", f.filename, dest)
    return {
        "type": media_type_for(f.content_type),
        "url": f"/uploads/{new_name}",
        "caption": f.filename or new_name,
        "language": "en",
    }


def discard_uploads(media_items: list[dict]) -> None:
    """Remove stored files for media entries that were never attached to a record."""
    for item in media_items:
        path = os.path.join(settings.UPLOAD_DIR, os.path.basename(item.get("url", "")))
        if os.path.isfile(path):
            os.remove(path)
            logger.info("Discarded upload %s", path)


def persist_uploads(files: list[UploadFile]) -> list[dict]:
    """Store every file or none: a rejected file removes the ones saved before it."""
    validate_uploads(files)
    stored = []
    try:
        for f in files:
            stored.append(persist_upload(f))
    except Exception:
        discard_uploads(stored)
        raise
    return stored
