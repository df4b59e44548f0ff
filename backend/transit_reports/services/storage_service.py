import os
import uuid
from pathlib import Path

from flask import current_app

from transit_reports.utils.errors import ApiError, RequestValidationError


def init_upload_folder(app) -> str:
    """Create the photo folder if absent. Called once from ``create_app``."""
    folder = Path(app.config.get("UPLOAD_FOLDER") or Path(app.root_path).parent / "uploads").resolve()
    folder.mkdir(parents=True, exist_ok=True)
    app.config["UPLOAD_FOLDER"] = str(folder)
    return str(folder)


def save_photo(file_storage) -> str | None:
    """Store an uploaded photo and return its public reference, or None if no file was sent."""
    if file_storage is None or not (file_storage.filename or "").strip():
        return None

    _, ext = os.path.splitext(file_storage.filename)
    ext = (ext or "").lower()
    allowed = current_app.config.get("ALLOWED_PHOTO_EXTENSIONS") or set()
    if ext not in allowed:
        raise RequestValidationError(
            "Invalid photo format. Allowed: " + ", ".join(sorted(e.lstrip(".") for e in allowed)),
        )

    upload_dir = current_app.config.get("UPLOAD_FOLDER")
    if not upload_dir:
        raise ApiError("Upload folder is not configured", 500)

    os.makedirs(upload_dir, exist_ok=True)
    filename = f"{uuid.uuid4().hex}{ext}"
    file_storage.save(os.path.join(upload_dir, filename))

    return f"/uploads/{filename}"


def delete_photo(reference: str | None) -> None:
    """Best-effort removal of a stored photo given its ``/uploads/<name>`` reference."""
    if not reference:
        return
    upload_dir = current_app.config.get("UPLOAD_FOLDER")
    if not upload_dir:
        return
    path = Path(upload_dir) / Path(reference).name
    try:
        path.unlink(missing_ok=True)
    except OSError:
        current_app.logger.warning("Could not remove photo %s", path)
