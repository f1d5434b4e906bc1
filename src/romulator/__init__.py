"""Render text-mode VRAM snapshots through a character ROM."""
from __future__ import annotations

from .character_rom import (
    CharacterRomError,
    build_default_rom,
    get_glyph,
    load_character_rom,
)
from .screen_renderer import (
    FrameValidationError,
    ScreenGeometry,
    draw_glyph,
    new_bitmap,
    render_frame,
    render_screen,
    validate_frame_inputs,
    validate_geometry,
)

__all__ = [
    "CharacterRomError",
    "FrameValidationError",
    "ScreenGeometry",
    "build_default_rom",
    "draw_glyph",
    "get_glyph",
    "load_character_rom",
    "new_bitmap",
    "render_frame",
    "render_screen",
    "validate_frame_inputs",
    "validate_geometry",
]
