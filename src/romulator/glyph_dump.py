"""Print the glyphs of a character ROM as ``#``/``.`` rows."""
from __future__ import annotations

import argparse
import contextlib
import sys
from pathlib import Path
from typing import Iterator, Sequence, TextIO

from .character_rom import CharacterRomError, build_default_rom, dump_glyphs, load_character_rom


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--rom",
        type=Path,
        help="Character ROM image (default: the bundled ROM)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the listing here instead of stdout",
    )
    return parser


@contextlib.contextmanager
def _open_target(path: Path | None) -> Iterator[TextIO]:
    if path is None:
        yield sys.stdout
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yield handle


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    rom = build_default_rom()
    if args.rom is not None:
        try:
            rom = load_character_rom(args.rom)
        except FileNotFoundError:
            parser.error(f"ROM file not found: {args.rom}")
        except CharacterRomError as exc:
            parser.error(str(exc))

    with _open_target(args.output) as target:
        dump_glyphs(rom, target)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
