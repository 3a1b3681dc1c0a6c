#!/usr/bin/env python3
"""Disassemble 8086 MOV-family binaries into nasm-style listings."""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys
from typing import List, Optional, Sequence

from .config import DisasmConfig, load_config
from .decoding.errors import DecodeError
from .disasm import decode_all
from .render import format_listing

logger = logging.getLogger(__name__)


def discover_inputs(paths: Sequence[Path], match: Optional[str] = None) -> List[Path]:
    """
    Expand directories (non-recursively, sorted) and drop listing files.

    Files named explicitly are kept even when they end in `.asm`; only
    directory scans skip them.
    """
    found: List[Path] = []
    for path in paths:
        if path.is_dir():
            for entry in sorted(path.iterdir()):
                if not entry.is_file() or entry.suffix == ".asm":
                    continue
                if match and match not in entry.name:
                    continue
                found.append(entry)
        elif match is None or match in path.name:
            found.append(path)
    return found


def output_path_for(source: Path, output_dir: Path, prefix: str) -> Path:
    return output_dir / f"{prefix}{source.name}.asm"


def _disassemble_file(
    source: Path,
    output_dir: Optional[Path],
    config: DisasmConfig,
    *,
    source_comment: bool,
) -> bool:
    name = source.name if source_comment else None
    try:
        data = source.read_bytes()
        instructions = decode_all(data, config)
        text = "".join(line + "\n" for line in format_listing(instructions, name))
        if output_dir is None:
            sys.stdout.write(text)
        else:
            target = output_path_for(source, output_dir, config.output_prefix)
            target.write_text(text)
            logger.info("Wrote %d instructions to %s", len(instructions), target)
    except DecodeError as exc:
        logger.error("%s: %s", source, exc)
        return False
    except OSError as exc:
        logger.error("%s: %s", source, exc)
        return False
    logger.debug("Decoded %s (%d instructions)", source, len(instructions))
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i8086-disasm",
        description="Disassemble 8086 MOV instructions into nasm syntax",
    )
    parser.add_argument(
        "paths", nargs="+", type=Path, help="Binary files or directories to decode"
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the decoded listings (default: current directory)",
    )
    parser.add_argument(
        "--match", type=str, help="Only decode files whose name contains this text"
    )
    parser.add_argument(
        "--stdout", action="store_true", help="Print listings instead of writing files"
    )
    parser.add_argument(
        "--no-source-comment",
        action="store_true",
        help="Omit the '; <file name>' line at the top of each listing",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_config()
    if args.verbose:
        config = replace(config, trace=True)

    inputs = discover_inputs(args.paths, args.match)
    if not inputs:
        logger.error("No input files matched")
        return 2

    output_dir: Optional[Path] = None
    if not args.stdout:
        output_dir = args.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("%s: %s", output_dir, exc)
            return 1

    failures = 0
    for source in inputs:
        ok = _disassemble_file(
            source, output_dir, config, source_comment=not args.no_source_comment
        )
        if not ok:
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
