"""Render a character-cell VRAM snapshot into an 8-bit intensity bitmap."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import MutableSequence, Sequence

logger = logging.getLogger(__name__)

GLYPH_SIZE = 8
GLYPH_COUNT = 128
MIN_ROM_SIZE = GLYPH_COUNT * GLYPH_SIZE

FOREGROUND = 0xFF
BACKGROUND = 0x00

_INVERSE_BIT = 0x80
_GLYPH_MASK = 0x7F


class FrameValidationError(ValueError):
    """Raised when render inputs violate the frame geometry contract."""


@dataclass(frozen=True)
class ScreenGeometry:
    """Character grid dimensions and the pixel size of each cell."""

    rows: int
    columns: int
    char_width: int
    char_height: int

    @property
    def image_width(self) -> int:
        return self.columns * self.char_width

    @property
    def image_height(self) -> int:
        return self.rows * self.char_height

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    @property
    def pixel_count(self) -> int:
        return self.image_width * self.image_height


def draw_glyph(
    glyph_index: int,
    origin_x: int,
    origin_y: int,
    bitmap: MutableSequence[int],
    rom: Sequence[int],
    image_width: int,
    inverse: bool,
) -> None:
    """Expand ``glyph_index`` into the 8×8 block at ``(origin_x, origin_y)``.

    Bit 7 of each scanline byte maps to the leftmost pixel.  The caller
    guarantees that the glyph exists in ``rom`` and that the block lies
    inside ``bitmap``; nothing is checked here.
    """

    foreground = BACKGROUND if inverse else FOREGROUND
    background = FOREGROUND if inverse else BACKGROUND
    base = glyph_index * GLYPH_SIZE
    for row in range(GLYPH_SIZE):
        scanline = rom[base + row]
        offset = (origin_y + row) * image_width + origin_x
        for column in range(GLYPH_SIZE):
            if scanline & (1 << (7 - column)):
                bitmap[offset + column] = foreground
            else:
                bitmap[offset + column] = background


def render_frame(
    vram: Sequence[int],
    rom: Sequence[int],
    rows: int,
    columns: int,
    char_width: int,
    char_height: int,
    bitmap: MutableSequence[int],
) -> None:
    """Draw every VRAM cell into ``bitmap`` in row-major order.

    Values above 127 select glyph ``value & 0x7F`` in inverse video.
    """

    image_width = columns * char_width
    char_index = 0
    for row in range(rows):
        y = row * char_height
        for column in range(columns):
            raw = vram[char_index]
            char_index += 1
            draw_glyph(
                raw & _GLYPH_MASK,
                column * char_width,
                y,
                bitmap,
                rom,
                image_width,
                raw & _INVERSE_BIT != 0,
            )


def validate_geometry(geometry: ScreenGeometry) -> None:
    """Reject grids that cannot be allocated or drawn with 8×8 glyphs."""

    for name in ("rows", "columns", "char_width", "char_height"):
        if getattr(geometry, name) < 0:
            raise FrameValidationError(f"{name} must not be negative")
    if (geometry.char_width, geometry.char_height) != (GLYPH_SIZE, GLYPH_SIZE):
        raise FrameValidationError(
            f"glyph cells must be {GLYPH_SIZE}x{GLYPH_SIZE} pixels, "
            f"received {geometry.char_width}x{geometry.char_height}"
        )


def validate_frame_inputs(
    vram: Sequence[int],
    rom: Sequence[int],
    geometry: ScreenGeometry,
    bitmap: Sequence[int],
) -> None:
    """Check the buffer length invariants once before any pixel is written."""

    validate_geometry(geometry)
    if len(vram) != geometry.cell_count:
        raise FrameValidationError(
            f"VRAM holds {len(vram)} cells but the grid needs {geometry.cell_count}"
        )
    if len(rom) < MIN_ROM_SIZE:
        raise FrameValidationError(
            f"character ROM must provide at least {MIN_ROM_SIZE} bytes, received {len(rom)}"
        )
    if len(bitmap) < geometry.pixel_count:
        raise FrameValidationError(
            f"bitmap holds {len(bitmap)} pixels but the frame needs {geometry.pixel_count}"
        )


def new_bitmap(geometry: ScreenGeometry) -> bytearray:
    """Return a zeroed bitmap sized for ``geometry``."""

    return bytearray(geometry.pixel_count)


def render_screen(
    vram: Sequence[int],
    rom: Sequence[int],
    geometry: ScreenGeometry,
    bitmap: MutableSequence[int] | None = None,
) -> MutableSequence[int]:
    """Validate the inputs, render the frame and return the bitmap.

    A fresh bitmap is allocated only when ``bitmap`` is ``None`` so callers can
    reuse (or double-buffer) their own across frames.
    """

    validate_geometry(geometry)
    target = new_bitmap(geometry) if bitmap is None else bitmap
    validate_frame_inputs(vram, rom, geometry, target)
    logger.debug(
        "rendering %dx%d cells into %dx%d bitmap",
        geometry.columns,
        geometry.rows,
        geometry.image_width,
        geometry.image_height,
    )
    render_frame(
        vram,
        rom,
        geometry.rows,
        geometry.columns,
        geometry.char_width,
        geometry.char_height,
        target,
    )
    return target


__all__ = [
    "BACKGROUND",
    "FOREGROUND",
    "FrameValidationError",
    "GLYPH_COUNT",
    "GLYPH_SIZE",
    "MIN_ROM_SIZE",
    "ScreenGeometry",
    "draw_glyph",
    "new_bitmap",
    "render_frame",
    "render_screen",
    "validate_frame_inputs",
    "validate_geometry",
]
