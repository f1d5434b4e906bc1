from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from PIL import Image

from romulator import cli, glyph_dump, render_cli


def _write_rom(tmp_path: Path) -> Path:
    data = bytearray(1024)
    data[0x41 * 8 : 0x41 * 8 + 8] = bytes([0x18, 0x24, 0x42, 0x7E, 0x42, 0x42, 0x42, 0x00])
    rom_path = tmp_path / "font.bin"
    rom_path.write_bytes(bytes(data))
    return rom_path


def test_render_writes_png_from_vram_dump(tmp_path: Path) -> None:
    rom_path = _write_rom(tmp_path)
    vram_path = tmp_path / "screen.bin"
    vram_path.write_bytes(bytes([0x41, 0xC1]))
    output = tmp_path / "screen.png"

    exit_code = render_cli.main(
        [str(vram_path), str(output), "--rom", str(rom_path), "--rows", "1", "--columns", "2"]
    )

    assert exit_code == 0
    with Image.open(output) as image:
        assert image.size == (16, 8)
        assert image.getpixel((3, 0)) == 255
        assert image.getpixel((0, 0)) == 0
        assert image.getpixel((11, 0)) == 0
        assert image.getpixel((8, 0)) == 255


def test_render_uses_config_and_offset(tmp_path: Path) -> None:
    _write_rom(tmp_path)
    config_path = tmp_path / "screen.toml"
    config_path.write_text(
        textwrap.dedent(
            """
            [screen]
            rows = 1
            columns = 1
            rom = "font.bin"
            scale = 2
            format = "bmp"
            """
        ),
        encoding="utf-8",
    )
    vram_path = tmp_path / "memory.bin"
    vram_path.write_bytes(b"\x00" * 0x10 + b"\x41")
    output = tmp_path / "screen"

    exit_code = render_cli.main(
        [str(vram_path), str(output), "--config", str(config_path), "--offset", "0x10"]
    )

    assert exit_code == 0
    with Image.open(output) as image:
        assert image.format == "BMP"
        assert image.size == (16, 16)


def test_render_reports_short_vram(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    vram_path = tmp_path / "screen.bin"
    vram_path.write_bytes(b"\x41")

    with pytest.raises(SystemExit) as excinfo:
        render_cli.main([str(vram_path), str(tmp_path / "out.png"), "--rows", "2", "--columns", "2"])

    assert excinfo.value.code == 2
    assert "VRAM holds 1 cells" in capsys.readouterr().err


def test_render_reports_missing_rom(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    vram_path = tmp_path / "screen.bin"
    vram_path.write_bytes(b"\x41")

    with pytest.raises(SystemExit):
        render_cli.main(
            [str(vram_path), str(tmp_path / "out.png"), "--rom", str(tmp_path / "missing.bin")]
        )

    assert "ROM file not found" in capsys.readouterr().err


def test_glyph_dump_writes_file(tmp_path: Path) -> None:
    output = tmp_path / "glyphs.txt"

    assert glyph_dump.main(["--rom", str(_write_rom(tmp_path)), "--output", str(output)]) == 0

    text = output.read_text(encoding="utf-8")
    assert "code=$41 index=65\n...##...\n..#..#..\n" in text


def test_dispatcher_routes_commands(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setitem(cli.COMMANDS, "render", lambda argv: calls.append(list(argv)) or 0)

    assert cli.main(["render", "a.bin", "b.png"]) == 0
    assert calls == [["a.bin", "b.png"]]


def test_dispatcher_rejects_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["explode"]) == 1
    assert "Unknown command: explode" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["--rows", "--columns"])
def test_render_rejects_negative_dimensions(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], flag: str
) -> None:
    vram_path = tmp_path / "screen.bin"
    vram_path.write_bytes(b"\x41")

    with pytest.raises(SystemExit) as excinfo:
        render_cli.main([str(vram_path), str(tmp_path / "out.png"), flag, "-1"])

    assert excinfo.value.code == 2
    assert "must not be negative" in capsys.readouterr().err
    assert not (tmp_path / "out.png").exists()


def test_glyph_dump_reports_missing_rom(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        glyph_dump.main(["--rom", str(tmp_path / "missing.bin")])

    assert excinfo.value.code == 2
    assert "ROM file not found" in capsys.readouterr().err


def test_glyph_dump_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    assert glyph_dump.main([]) == 0

    assert "code=$7F index=127\n########\n" in capsys.readouterr().out
