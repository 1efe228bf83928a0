from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError


# Pillow format name -> stored file suffix
ALLOWED_IMAGE_FORMATS: dict[str, str] = {
    "PNG": ".png",
    "JPEG": ".jpg",
    "GIF": ".gif",
    "WEBP": ".webp",
}


class UnsupportedImageError(ValueError):
    pass


def detect_image_suffix(content: bytes) -> str:
    """
    Identify an uploaded picture by its bytes, not by the client's filename or content type.

    Raises UnsupportedImageError for anything Pillow cannot decode or that is not an allowed format.
    """
    if not content:
        raise UnsupportedImageError("Empty file")

    try:
        with Image.open(io.BytesIO(content)) as img:
            fmt = (img.format or "").upper()
            img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise UnsupportedImageError("File is not a valid image") from e

    suffix = ALLOWED_IMAGE_FORMATS.get(fmt)
    if suffix is None:
        raise UnsupportedImageError(f"Unsupported image format: {fmt or 'unknown'}")
    return suffix
