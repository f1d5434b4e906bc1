"""Screen geometry and export settings loaded from TOML."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .screen_renderer import GLYPH_SIZE, ScreenGeometry


SUPPORTED_FORMATS = ("png", "bmp", "pgm")


class RenderConfigError(ValueError):
    """Raised when a render configuration file fails validation."""


@dataclass(frozen=True)
class RenderConfig:
    """Resolved settings for rendering and exporting one screen."""

    geometry: ScreenGeometry
    rom: Path | None = None
    scale: int = 1
    format: str = "png"

    def with_overrides(
        self,
        *,
        rows: int | None = None,
        columns: int | None = None,
        rom: Path | None = None,
        scale: int | None = None,
    ) -> "RenderConfig":
        """Return a copy with command-line overrides applied."""

        geometry = ScreenGeometry(
            rows=self.geometry.rows if rows is None else _coerce_dimension(rows, "rows"),
            columns=(
                self.geometry.columns
                if columns is None
                else _coerce_dimension(columns, "columns")
            ),
            char_width=self.geometry.char_width,
            char_height=self.geometry.char_height,
        )
        return RenderConfig(
            geometry=geometry,
            rom=self.rom if rom is None else rom,
            scale=self.scale if scale is None else _coerce_scale(scale),
            format=self.format,
        )


DEFAULT_CONFIG = RenderConfig(
    geometry=ScreenGeometry(
        rows=25, columns=80, char_width=GLYPH_SIZE, char_height=GLYPH_SIZE
    )
)


def load_render_config(config_path: Path) -> RenderConfig:
    """Parse and validate the render configuration at ``config_path``."""

    try:
        with config_path.open("rb") as stream:
            raw_data = tomllib.load(stream)
    except tomllib.TOMLDecodeError as exc:
        raise RenderConfigError(f"{config_path}: {exc}") from exc

    screen = _parse_screen_section(raw_data)
    geometry = ScreenGeometry(
        rows=_require_dimension(screen, "rows"),
        columns=_require_dimension(screen, "columns"),
        char_width=_optional_dimension(screen, "char_width", GLYPH_SIZE),
        char_height=_optional_dimension(screen, "char_height", GLYPH_SIZE),
    )

    rom: Path | None = None
    raw_rom = screen.get("rom")
    if raw_rom is not None:
        if not isinstance(raw_rom, str) or not raw_rom:
            raise RenderConfigError("screen.rom must be a non-empty string")
        rom = Path(raw_rom).expanduser()
        if not rom.is_absolute():
            rom = (config_path.parent / rom).resolve()

    return RenderConfig(
        geometry=geometry,
        rom=rom,
        scale=_coerce_scale(screen.get("scale", 1)),
        format=_coerce_format(screen.get("format", "png")),
    )


def _parse_screen_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    screen = data.get("screen")
    if screen is None:
        raise RenderConfigError("render configuration requires a [screen] table")
    if not isinstance(screen, Mapping):
        raise RenderConfigError("[screen] section must be a mapping")
    return screen


def _require_dimension(screen: Mapping[str, Any], key: str) -> int:
    if key not in screen:
        raise RenderConfigError(f"screen.{key} is required")
    return _coerce_dimension(screen[key], key)


def _optional_dimension(screen: Mapping[str, Any], key: str, default: int) -> int:
    return _coerce_dimension(screen.get(key, default), key)


def _coerce_dimension(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RenderConfigError(f"screen.{key} must be an integer")
    if value < 0:
        raise RenderConfigError(f"screen.{key} must not be negative")
    return value


def _coerce_scale(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise RenderConfigError("screen.scale must be a positive integer")
    return value


def _coerce_format(value: Any) -> str:
    if not isinstance(value, str) or value.lower() not in SUPPORTED_FORMATS:
        raise RenderConfigError(
            f"screen.format must be one of {', '.join(SUPPORTED_FORMATS)}"
        )
    return value.lower()


__all__ = [
    "DEFAULT_CONFIG",
    "RenderConfig",
    "RenderConfigError",
    "SUPPORTED_FORMATS",
    "load_render_config",
]
