"""Image hosting for post pictures and avatars.

The rest of the code only needs ``upload(file) -> public URL``. The default
implementation stores files through Django's configured storage backend.
"""

from __future__ import annotations

import io
import logging
import uuid
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image
from PIL import ImageOps
from PIL import UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class InvalidImageError(Exception):
    """Raised when an upload is not an image we can host."""


@dataclass
class ImageConfig:
    max_dimension: int = 800
    jpeg_quality: int = 80
    max_upload_mb: int = 10
    max_pixels: int = 40_000_000

    @classmethod
    def from_settings(cls) -> ImageConfig:
        return cls(
            max_dimension=getattr(settings, "IMAGE_MAX_DIMENSION", 800),
            jpeg_quality=getattr(settings, "IMAGE_JPEG_QUALITY", 80),
            max_upload_mb=getattr(settings, "IMAGE_MAX_UPLOAD_MB", 10),
            max_pixels=getattr(settings, "IMAGE_MAX_PIXELS", 40_000_000),
        )


class ImageHost:
    """Provider-agnostic interface for hosting uploaded images."""

    def upload(self, f, *, folder: str, optimize: bool = False) -> str:
        raise NotImplementedError


class StorageImageHost(ImageHost):
    def __init__(self, cfg: ImageConfig | None = None):
        self.cfg = cfg or ImageConfig.from_settings()

    def validate(self, f) -> None:
        size_mb = (getattr(f, "size", 0) or 0) / (1024 * 1024)
        if size_mb > self.cfg.max_upload_mb:
            msg = f"Image too large: {size_mb:.1f} MB > {self.cfg.max_upload_mb} MB"
            raise InvalidImageError(msg)
        ext = Path(getattr(f, "name", "")).suffix
        if ext.lower() not in ALLOWED_IMAGE_EXTS:
            allowed = ", ".join(sorted(ALLOWED_IMAGE_EXTS))
            msg = f"Unsupported image type '{ext}'. Allowed: {allowed}"
            raise InvalidImageError(msg)
        try:
            # Header only: dimensions are known before any pixel is decoded.
            with Image.open(f) as img:
                width, height = img.size
                if width * height > self.cfg.max_pixels:
                    msg = f"Image too large: {width}x{height} pixels"
                    raise InvalidImageError(msg)
                img.verify()
        except Image.DecompressionBombError as exc:
            msg = "Image too large"
            raise InvalidImageError(msg) from exc
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            msg = "Invalid image file"
            raise InvalidImageError(msg) from exc
        finally:
            with suppress(Exception):
                f.seek(0)

    def optimize(self, f) -> bytes:
        """Fit inside a square of ``max_dimension`` and re-encode as JPEG."""
        with Image.open(f) as img:
            img = ImageOps.exif_transpose(img)
            img.thumbnail((self.cfg.max_dimension, self.cfg.max_dimension))
            if img.mode != "RGB":
                img = img.convert("RGB")
            out = io.BytesIO()
            img.save(out, format="JPEG", quality=self.cfg.jpeg_quality)
        return out.getvalue()

    def upload(self, f, *, folder: str, optimize: bool = False) -> str:
        self.validate(f)
        if optimize:
            content = ContentFile(self.optimize(f))
            name = f"{folder}/{uuid.uuid4().hex}.jpeg"
        else:
            content = f
            ext = Path(getattr(f, "name", "")).suffix.lower()
            name = f"{folder}/{uuid.uuid4().hex}{ext}"
        stored = default_storage.save(name, content)
        logger.info("Stored image %s", stored)
        return default_storage.url(stored)


def get_image_host() -> ImageHost:
    return StorageImageHost()
