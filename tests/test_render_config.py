from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from romulator.render_config import (
    DEFAULT_CONFIG,
    RenderConfigError,
    load_render_config,
)
from romulator.screen_renderer import ScreenGeometry


def write_config(tmp_path: Path, body: str) -> Path:
    config_path = tmp_path / "screen.toml"
    config_path.write_text(textwrap.dedent(body), encoding="utf-8")
    return config_path


def test_load_render_config_applies_defaults(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [screen]
        rows = 24
        columns = 40
        """,
    )

    config = load_render_config(config_path)

    assert config.geometry == ScreenGeometry(rows=24, columns=40, char_width=8, char_height=8)
    assert config.rom is None
    assert config.scale == 1
    assert config.format == "png"


def test_load_render_config_resolves_rom_relative_to_file(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [screen]
        rows = 25
        columns = 80
        rom = "roms/font.bin"
        scale = 2
        format = "BMP"
        """,
    )

    config = load_render_config(config_path)

    assert config.rom == (tmp_path / "roms" / "font.bin").resolve()
    assert config.scale == 2
    assert config.format == "bmp"


@pytest.mark.parametrize(
    "body, message",
    [
        ("[display]\nrows = 1\n", r"\[screen\] table"),
        ("screen = 3\n", "must be a mapping"),
        ("[screen]\ncolumns = 80\n", "screen.rows is required"),
        ("[screen]\nrows = 25\ncolumns = \"80\"\n", "screen.columns must be an integer"),
        ("[screen]\nrows = -1\ncolumns = 80\n", "must not be negative"),
        ("[screen]\nrows = 25\ncolumns = 80\nscale = 0\n", "screen.scale"),
        ("[screen]\nrows = 25\ncolumns = 80\nformat = \"gif\"\n", "screen.format"),
        ("[screen]\nrows = 25\ncolumns = 80\nrom = \"\"\n", "screen.rom"),
        ("[screen\n", "screen.toml"),
    ],
)
def test_load_render_config_rejects_invalid_files(
    tmp_path: Path, body: str, message: str
) -> None:
    config_path = write_config(tmp_path, body)

    with pytest.raises(RenderConfigError, match=message):
        load_render_config(config_path)


def test_with_overrides_replaces_selected_fields(tmp_path: Path) -> None:
    rom_path = tmp_path / "font.bin"

    config = DEFAULT_CONFIG.with_overrides(rows=2, rom=rom_path, scale=3)

    assert config.geometry == ScreenGeometry(rows=2, columns=80, char_width=8, char_height=8)
    assert config.rom == rom_path
    assert config.scale == 3
    assert config.format == "png"
    assert DEFAULT_CONFIG.geometry.rows == 25


def test_with_overrides_validates_scale() -> None:
    with pytest.raises(RenderConfigError):
        DEFAULT_CONFIG.with_overrides(scale=0)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"rows": -1}, "screen.rows must not be negative"),
        ({"columns": -4}, "screen.columns must not be negative"),
    ],
)
def test_with_overrides_validates_dimensions(overrides: dict, message: str) -> None:
    with pytest.raises(RenderConfigError, match=message):
        DEFAULT_CONFIG.with_overrides(**overrides)
