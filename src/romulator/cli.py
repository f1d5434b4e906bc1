"""Dispatch helper for the romulator screen tooling."""

from __future__ import annotations

import sys
from typing import Callable, Dict, Sequence

from . import glyph_dump
from . import render_cli

CommandFunc = Callable[[Sequence[str] | None], int | None]

COMMANDS: Dict[str, CommandFunc] = {
    "render": render_cli.main,
    "dump-glyphs": glyph_dump.main,
}

__all__ = ["COMMANDS", "main"]


def _print_usage() -> None:
    print("Usage: romulator <command> [args...]")
    print("Available commands:")
    for name in sorted(COMMANDS):
        print(f"  {name}")


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in {"-h", "--help", "help"}:
        _print_usage()
        return 0

    command = args[0]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}")
        _print_usage()
        return 1

    result = handler(args[1:])
    return int(result) if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
