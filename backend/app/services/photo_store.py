"""Storage for student profile photos."""

import os
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from backend.app.core.exceptions import ValidationError
from backend.app.core.settings import get_settings

FOLDER = "student-profiles"


class PhotoStore:
    """Interface of a profile photo backend."""

    def upload(self, data: bytes, student_id: int) -> str:
        raise NotImplementedError

    def delete(self, url: str) -> None:
        raise NotImplementedError


def validate_image(data: bytes, max_bytes: int) -> str:
    """Check the payload is a readable image within the size limit and return its format."""
    if not data:
        raise ValidationError("File is empty")
    if len(data) > max_bytes:
        raise ValidationError(f"File size exceeds {max_bytes // (1024 * 1024)}MB limit")
    try:
        with Image.open(BytesIO(data)) as image:
            image.verify()
            image_format = image.format
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValidationError("File must be an image") from exc
    if not image_format:
        raise ValidationError("File must be an image")
    return image_format.lower()


class LocalPhotoStore(PhotoStore):
    """Write photos below ``media_root`` and serve them from ``media_url``."""

    def __init__(self, media_root: Optional[str] = None, media_url: Optional[str] = None, max_bytes: Optional[int] = None):
        settings = get_settings()
        self.media_root = media_root or settings.media_root
        self.media_url = (media_url or settings.media_url).rstrip("/")
        self.max_bytes = max_bytes or settings.max_photo_bytes

    def upload(self, data: bytes, student_id: int) -> str:
        image_format = validate_image(data, self.max_bytes)
        extension = "jpg" if image_format == "jpeg" else image_format
        filename = f"student_{student_id}.{extension}"
        directory = os.path.join(self.media_root, FOLDER)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, filename), "wb") as handle:
            handle.write(data)
        return f"{self.media_url}/{FOLDER}/{filename}"

    def delete(self, url: str) -> None:
        prefix = f"{self.media_url}/"
        if not url or not url.startswith(prefix):
            raise ValueError(f"Not a stored photo url: {url}")
        relative = url[len(prefix):]
        path = os.path.join(self.media_root, *relative.split("/"))
        if os.path.exists(path):
            os.remove(path)


_photo_store: Optional[PhotoStore] = None


def get_photo_store() -> PhotoStore:
    global _photo_store
    if _photo_store is None:
        _photo_store = LocalPhotoStore()
    return _photo_store
