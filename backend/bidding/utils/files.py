# backend/bidding/utils/files.py
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from ..config import settings
from ..errors import ValidationError
from .logging import service_logger

CHUNK_SIZE = 1024 * 1024


async def save_upload_file(upload_file: UploadFile, directory: Path, max_size: int | None = None) -> Path:
    """Save an uploaded file with a unique name and return the path.

    Raises ValidationError (and removes the partial file) once more than
    `max_size` bytes have been read.
    """
    directory.mkdir(parents=True, exist_ok=True)
    file_extension = Path(upload_file.filename or "").suffix
    file_path = directory / f"{uuid4()}{file_extension}"

    written = 0
    try:
        with file_path.open("wb") as buffer:
            while chunk := await upload_file.read(CHUNK_SIZE):
                written += len(chunk)
                if max_size is not None and written > max_size:
                    raise ValidationError(f"File size exceeds {max_size // (1024 * 1024)}MB limit")
                buffer.write(chunk)
    except Exception:
        delete_file(file_path)
        raise

    return file_path


async def stage_upload(upload_file: UploadFile | None) -> Path:
    """Validate a single deliverable upload and stage it in the uploads directory"""
    if upload_file is None or not upload_file.filename:
        raise ValidationError("No file uploaded")

    if upload_file.content_type not in settings.ALLOWED_UPLOAD_TYPES:
        service_logger.warning("Rejected upload with disallowed content type", extra={
            "file_name": upload_file.filename,
            "content_type": upload_file.content_type
        })
        raise ValidationError("Only PDF files are allowed")

    if upload_file.size is not None and upload_file.size > settings.MAX_UPLOAD_SIZE:
        service_logger.warning("Rejected oversized upload", extra={
            "file_name": upload_file.filename,
            "file_size": upload_file.size
        })
        raise ValidationError(f"File size exceeds {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit")

    staged_path = await save_upload_file(upload_file, settings.UPLOADS_PATH, max_size=settings.MAX_UPLOAD_SIZE)
    service_logger.debug("Staged upload", extra={
        "file_name": upload_file.filename,
        "staged_path": str(staged_path)
    })
    return staged_path


def delete_file(file_path: Path | None) -> None:
    """Delete a file if it exists; failures are logged"""
    if file_path is None:
        return
    try:
        Path(file_path).unlink(missing_ok=True)
    except OSError as e:
        service_logger.error(f"Error deleting file {file_path}: {e}")


def get_relative_path(absolute_path: Path, base_path: Path) -> str:
    """Convert absolute path to a forward-slash path relative to base_path"""
    absolute_path = Path(absolute_path).absolute()
    base_path = Path(base_path).absolute()
    return absolute_path.relative_to(base_path).as_posix()
