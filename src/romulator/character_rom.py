"""Character ROM loading and inspection helpers."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from .screen_renderer import GLYPH_COUNT, GLYPH_SIZE, MIN_ROM_SIZE

logger = logging.getLogger(__name__)

GlyphMatrix = tuple[tuple[int, ...], ...]

_ROW_BITS = tuple(1 << bit for bit in range(7, -1, -1))
_INK = frozenset("#█")


class CharacterRomError(ValueError):
    """Raised when a character ROM image cannot back the renderer."""


def _pattern(*rows: str) -> tuple[int, ...]:
    """Pack eight ``#``/``█`` row strings into scanline bytes, MSB first."""

    if len(rows) != GLYPH_SIZE or any(len(row) != GLYPH_SIZE for row in rows):
        raise ValueError(f"glyph art must be {GLYPH_SIZE} rows of {GLYPH_SIZE} cells")
    return tuple(
        sum(bit for bit, cell in zip(_ROW_BITS, row) if cell in _INK)
        for row in rows
    )


def _default_patterns() -> dict[int, tuple[int, ...]]:
    patterns: dict[int, tuple[int, ...]] = {}

    def register(code: int, *rows: str) -> None:
        patterns[code & 0x7F] = _pattern(*rows)

    register(0x2E,
        "        ",
        "        ",
        "        ",
        "        ",
        "        ",
        "   ██   ",
        "   ██   ",
        "        ",
    )
    register(0x30,
        "  ████  ",
        " ██  ██ ",
        " ██ ███ ",
        " ███ ██ ",
        " ██  ██ ",
        " ██  ██ ",
        "  ████  ",
        "        ",
    )
    register(0x31,
        "   ██   ",
        "  ███   ",
        "   ██   ",
        "   ██   ",
        "   ██   ",
        "   ██   ",
        " ██████ ",
        "        ",
    )
    register(0x3A,
        "        ",
        "   ██   ",
        "   ██   ",
        "        ",
        "        ",
        "   ██   ",
        "   ██   ",
        "        ",
    )
    register(0x3E,
        " ██     ",
        "  ██    ",
        "   ██   ",
        "    ██  ",
        "   ██   ",
        "  ██    ",
        " ██     ",
        "        ",
    )
    register(0x41,
        "   ██   ",
        "  █  █  ",
        " █    █ ",
        " ██████ ",
        " █    █ ",
        " █    █ ",
        " █    █ ",
        "        ",
    )
    register(0x45,
        " ██████ ",
        " ██     ",
        " ██     ",
        " █████  ",
        " ██     ",
        " ██     ",
        " ██████ ",
        "        ",
    )
    register(0x4B,
        " ██  ██ ",
        " ██ ██  ",
        " ████   ",
        " ███    ",
        " ████   ",
        " ██ ██  ",
        " ██  ██ ",
        "        ",
    )
    register(0x4F,
        "  ████  ",
        " ██  ██ ",
        " ██  ██ ",
        " ██  ██ ",
        " ██  ██ ",
        " ██  ██ ",
        "  ████  ",
        "        ",
    )
    register(0x52,
        " █████  ",
        " ██  ██ ",
        " ██  ██ ",
        " █████  ",
        " ████   ",
        " ██ ██  ",
        " ██  ██ ",
        "        ",
    )
    register(0x5F,
        "        ",
        "        ",
        "        ",
        "        ",
        "        ",
        "        ",
        "        ",
        "████████",
    )
    register(0x7F,
        "████████",
        "████████",
        "████████",
        "████████",
        "████████",
        "████████",
        "████████",
        "████████",
    )
    return patterns


@lru_cache()
def build_default_rom() -> bytes:
    """Return the bundled 1 KiB ROM; codes without a pattern stay blank."""

    data = bytearray(MIN_ROM_SIZE)
    for code, rows in _default_patterns().items():
        offset = code * GLYPH_SIZE
        data[offset : offset + GLYPH_SIZE] = rows
    return bytes(data)


def load_character_rom(
    payload: bytes | bytearray | memoryview | Iterable[int] | str | Path,
) -> bytes:
    """Return an immutable ROM image from raw bytes or a file path."""

    if isinstance(payload, (str, Path)):
        data = Path(payload).read_bytes()
        logger.debug("loaded %d byte character ROM from %s", len(data), payload)
    else:
        try:
            data = bytes(payload)
        except (TypeError, ValueError) as exc:
            raise CharacterRomError(f"character ROM payload is not byte data: {exc}") from exc

    if len(data) < MIN_ROM_SIZE:
        raise CharacterRomError(
            f"character ROM must be at least {MIN_ROM_SIZE} bytes, received {len(data)}"
        )
    if len(data) % GLYPH_SIZE:
        raise CharacterRomError(
            f"character ROM length {len(data)} is not a multiple of {GLYPH_SIZE}"
        )
    return data


def glyph_count(rom: Sequence[int]) -> int:
    """Return how many complete glyph records ``rom`` holds."""

    return len(rom) // GLYPH_SIZE


def get_glyph(rom: Sequence[int], index: int) -> GlyphMatrix:
    """Return the 8×8 bitmap for ``index`` (1 = foreground)."""

    if not 0 <= index < glyph_count(rom):
        raise CharacterRomError(f"glyph index {index} outside ROM of {glyph_count(rom)} glyphs")
    offset = index * GLYPH_SIZE
    return tuple(
        tuple(1 if row & bit else 0 for bit in _ROW_BITS)
        for row in rom[offset : offset + GLYPH_SIZE]
    )


def _iter_glyph_rows(rom: Sequence[int]) -> Iterable[tuple[int, list[str]]]:
    for index in range(min(glyph_count(rom), GLYPH_COUNT)):
        yield index, [
            "".join("#" if value else "." for value in row)
            for row in get_glyph(rom, index)
        ]


def dump_glyphs(rom: Sequence[int], target: TextIO) -> None:
    """Serialise the renderable glyphs of ``rom`` as ASCII rows."""

    for index, rows in _iter_glyph_rows(rom):
        target.write(f"code=${index:02X} index={index}\n")
        for row in rows:
            target.write(f"{row}\n")
        target.write("\n")


__all__ = [
    "CharacterRomError",
    "GlyphMatrix",
    "build_default_rom",
    "dump_glyphs",
    "get_glyph",
    "glyph_count",
    "load_character_rom",
]
