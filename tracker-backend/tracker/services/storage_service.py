# File: tracker/services/storage_service.py
"""
Attachment storage.

Uploads are written under UPLOAD_DIR as ``<uuid>_<sanitized name>`` and
described to the rest of the app by a StoredFile (original filename +
stored path). The project/update code never touches the filesystem.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Sequence

from fastapi import UploadFile

from tracker.core.config import settings
from tracker.core.exceptions import InternalError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StoredFile:
    filename: str
    path: str


def get_upload_dir() -> Path:
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def sanitize_filename(name: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.
    """
    base = Path(name.replace("\\", "/")).name
    safe = _UNSAFE_CHARS.sub("_", base).strip("._")
    return safe[:100] or "file"


def store_stream(stream: BinaryIO, original_filename: Optional[str]) -> StoredFile:
    """
    Copy a binary stream into the upload directory.

    Raises ValidationError when the stream exceeds MAX_UPLOAD_SIZE_MB;
    the partial file is removed in that case.
    """
    filename = original_filename or "file"
    target = get_upload_dir() / f"{uuid.uuid4().hex}_{sanitize_filename(filename)}"
    limit = settings.max_upload_size_bytes
    size = 0

    try:
        with open(target, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > limit:
                    raise ValidationError(
                        f"File '{filename}' exceeds maximum size ({settings.max_upload_size_mb}MB)",
                        field="files",
                    )
                out.write(chunk)
    except ValidationError:
        target.unlink(missing_ok=True)
        raise
    except OSError as exc:
        target.unlink(missing_ok=True)
        logger.exception("Failed to store attachment %s", filename)
        raise InternalError("Failed to store attachment") from exc

    logger.info("Stored attachment %s -> %s (%d bytes)", filename, target.name, size)
    return StoredFile(filename=filename, path=target.as_posix())


def save_upload(upload: UploadFile) -> StoredFile:
    return store_stream(upload.file, upload.filename)


def save_uploads(uploads: Sequence[UploadFile]) -> List[StoredFile]:
    """
    Store a batch of uploads. If one fails, the ones already written are
    removed before the error propagates.
    """
    if len(uploads) > settings.max_upload_files:
        raise ValidationError(
            f"At most {settings.max_upload_files} files may be attached",
            field="files",
        )

    stored: List[StoredFile] = []
    try:
        for upload in uploads:
            stored.append(save_upload(upload))
    except Exception:
        delete_stored_files(stored)
        raise
    return stored


def delete_stored_files(files: Iterable[StoredFile]) -> None:
    for stored in files:
        try:
            Path(stored.path).unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove stored file %s", stored.path, exc_info=True)
