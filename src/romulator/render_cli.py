"""Render a raw VRAM dump into an image file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .character_rom import CharacterRomError, build_default_rom, load_character_rom
from .image_export import ImageExportError, format_for_path, write_image
from .render_config import (
    DEFAULT_CONFIG,
    SUPPORTED_FORMATS,
    RenderConfig,
    RenderConfigError,
    load_render_config,
)
from .screen_renderer import FrameValidationError, render_screen

logger = logging.getLogger(__name__)

__all__ = [
    "build_parser",
    "main",
    "read_vram",
    "render_to_file",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("vram", type=Path, help="Raw VRAM dump, one byte per cell")
    parser.add_argument("output", type=Path, help="Destination image (.png, .bmp or .pgm)")
    parser.add_argument("--config", type=Path, help="Render configuration TOML file")
    parser.add_argument(
        "--rom",
        type=Path,
        help="Character ROM image (defaults to the configured or bundled ROM)",
    )
    parser.add_argument("--rows", type=int, help="Override the number of text rows")
    parser.add_argument("--columns", type=int, help="Override the number of text columns")
    parser.add_argument("--scale", type=int, help="Integer pixel scale factor")
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        help="Image format (default: inferred from the output suffix)",
    )
    parser.add_argument(
        "--offset",
        type=lambda value: int(value, 0),
        default=0,
        help="Byte offset of the screen within the dump (e.g. 0x400)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit debug logging",
    )
    return parser


def read_vram(path: Path, *, offset: int, cells: int) -> bytes:
    """Return ``cells`` bytes of screen memory starting at ``offset``."""

    data = path.read_bytes()
    if offset < 0 or offset > len(data):
        raise FrameValidationError(
            f"offset {offset:#x} lies outside the {len(data)} byte dump"
        )
    return data[offset : offset + cells]


def render_to_file(
    vram_path: Path,
    output: Path,
    config: RenderConfig,
    *,
    offset: int = 0,
    fmt: str | None = None,
) -> Path:
    """Render ``vram_path`` with ``config`` and write the image to ``output``."""

    rom = load_character_rom(config.rom) if config.rom is not None else build_default_rom()
    geometry = config.geometry
    vram = read_vram(vram_path, offset=offset, cells=geometry.cell_count)
    bitmap = render_screen(vram, rom, geometry)
    resolved_format = fmt or format_for_path(output, default=config.format)
    logger.debug("writing %s to %s", resolved_format, output)
    return write_image(output, bitmap, geometry, fmt=resolved_format, scale=config.scale)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.vram.exists():
        parser.error(f"VRAM dump not found: {args.vram}")

    try:
        config = load_render_config(args.config) if args.config else DEFAULT_CONFIG
        config = config.with_overrides(
            rows=args.rows,
            columns=args.columns,
            rom=args.rom,
            scale=args.scale,
        )
        if config.rom is not None and not config.rom.exists():
            parser.error(f"ROM file not found: {config.rom}")
        render_to_file(
            args.vram,
            args.output,
            config,
            offset=args.offset,
            fmt=args.format,
        )
    except (
        CharacterRomError,
        FrameValidationError,
        ImageExportError,
        RenderConfigError,
        OSError,
    ) as exc:
        parser.error(str(exc))

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
