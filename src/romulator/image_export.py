"""Encode rendered intensity bitmaps as image files with Pillow."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image

from .screen_renderer import ScreenGeometry

logger = logging.getLogger(__name__)

# Pillow writes mode "L" images through its PPM plugin as binary PGM (P5).
_PILLOW_FORMATS = {
    "png": "PNG",
    "bmp": "BMP",
    "pgm": "PPM",
}


class ImageExportError(ValueError):
    """Raised when a bitmap cannot be encoded in the requested format."""


def bitmap_to_image(
    bitmap: Sequence[int], geometry: ScreenGeometry, *, scale: int = 1
) -> Image.Image:
    """Wrap the first ``geometry.pixel_count`` pixels in a greyscale image."""

    if geometry.pixel_count == 0:
        raise ImageExportError("cannot export an empty frame")
    if scale < 1:
        raise ImageExportError("scale must be a positive integer")
    if len(bitmap) < geometry.pixel_count:
        raise ImageExportError(
            f"bitmap holds {len(bitmap)} pixels but the frame needs {geometry.pixel_count}"
        )

    size = (geometry.image_width, geometry.image_height)
    image = Image.frombytes("L", size, bytes(bitmap[: geometry.pixel_count]))
    if scale != 1:
        image = image.resize(
            (size[0] * scale, size[1] * scale), Image.Resampling.NEAREST
        )
    return image


def _resolve_format(fmt: str) -> str:
    pillow_format = _PILLOW_FORMATS.get(fmt.lower())
    if pillow_format is None:
        raise ImageExportError(
            f"unsupported image format {fmt!r}; expected one of {', '.join(_PILLOW_FORMATS)}"
        )
    return pillow_format


def encode_image(
    bitmap: Sequence[int],
    geometry: ScreenGeometry,
    *,
    fmt: str = "png",
    scale: int = 1,
) -> bytes:
    """Return the encoded image bytes for ``bitmap``."""

    pillow_format = _resolve_format(fmt)
    image = bitmap_to_image(bitmap, geometry, scale=scale)
    buffer = io.BytesIO()
    image.save(buffer, format=pillow_format)
    payload = buffer.getvalue()
    logger.debug("encoded %s image of %d bytes", pillow_format, len(payload))
    return payload


def format_for_path(path: Path, default: str = "png") -> str:
    """Return the export format implied by ``path``'s suffix."""

    suffix = path.suffix.lower().lstrip(".")
    if not suffix:
        return default
    _resolve_format(suffix)
    return suffix


def write_image(
    path: Path,
    bitmap: Sequence[int],
    geometry: ScreenGeometry,
    *,
    fmt: str | None = None,
    scale: int = 1,
) -> Path:
    """Encode ``bitmap`` and write it to ``path``."""

    resolved = fmt if fmt is not None else format_for_path(path)
    payload = encode_image(bitmap, geometry, fmt=resolved, scale=scale)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path


__all__ = [
    "ImageExportError",
    "bitmap_to_image",
    "encode_image",
    "format_for_path",
    "write_image",
]
