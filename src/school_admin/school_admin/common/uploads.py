from __future__ import annotations

from pathlib import Path

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.exceptions import ValidationError

ALLOWED_PHOTO_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def save_photo(upload: FileStorage, target_dir: str | Path) -> str:
    """Store an uploaded profile picture and return the stored file name."""

    filename = secure_filename(upload.filename or "")
    if not filename or Path(filename).suffix.lower() not in ALLOWED_PHOTO_EXTENSIONS:
        raise ValidationError("Profile picture must be an image file")

    target = Path(target_dir)
    target.mkdir(parents=True, exist_ok=True)
    upload.save(target / filename)
    return filename
