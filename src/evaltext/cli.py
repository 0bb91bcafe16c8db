"""Command-line interface for evaltext."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from evaltext.errors import DecodeError

logger = logging.getLogger(__name__)

_FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    literal: bool
    start: int
    map_offsets: list[int]
    output_format: str
    log_level: str
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="evaltext",
        description="Decode eval string literals and map decoded offsets back to the source",
    )
    p.add_argument("input", help="Input shell script (or literal content with --literal)")
    p.add_argument(
        "--literal",
        action="store_true",
        help="Treat the whole input as the content of a single literal",
    )
    p.add_argument(
        "--start",
        type=int,
        default=None,
        metavar="N",
        help="Host offset of the literal content (with --literal, default: 0)",
    )
    p.add_argument(
        "--map",
        type=int,
        action="append",
        default=[],
        metavar="N",
        help="Print the host offset of decoded offset N (repeatable)",
    )
    p.add_argument("--json", action="store_true", help="Write JSON instead of text")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover evaltext.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump offset tables to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "evaltext.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Output format: config < CLI
    output_format = "text"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in _FORMATS:
                raise argparse.ArgumentTypeError(
                    f"invalid output format in config (expected text or json): {cfg_format}"
                )
            output_format = str(cfg_format)
    if args.json:
        output_format = "json"

    # Log level: config < CLI
    log_level = "WARNING"
    cfg_logging = config.get("logging")
    if isinstance(cfg_logging, dict):
        cfg_level = cfg_logging.get("level")
        if isinstance(cfg_level, str):
            log_level = cfg_level.upper()
    if args.verbose:
        log_level = "DEBUG"

    if args.start is not None and not args.literal:
        raise argparse.ArgumentTypeError("--start requires --literal")
    start = args.start if args.start is not None else 0
    if start < 0:
        raise argparse.ArgumentTypeError(f"--start must not be negative: {start}")

    return CliOptions(
        input_file=input_file,
        literal=args.literal,
        start=start,
        map_offsets=list(args.map),
        output_format=output_format,
        log_level=log_level,
        debug=args.debug,
    )


def decode_file(options: CliOptions) -> list[dict[str, Any]]:
    """Read the input, decode its literal(s), and return one report per literal."""
    from evaltext.debug import dump_offsets
    from evaltext.decoder import OffsetMapper, decode, decode_or_raise
    from evaltext.literals import EvalLiteral, find_eval_literals
    from evaltext.ranges import ContentRange

    source = options.input_file.read_text(encoding="utf-8")

    if options.literal:
        literals = [EvalLiteral(source, ContentRange(options.start, len(source)))]
    else:
        literals = find_eval_literals(source)
    logger.debug("%s: %d literal(s)", options.input_file, len(literals))

    reports: list[dict[str, Any]] = []
    for lit in literals:
        if not lit.terminated:
            logger.warning(
                "%s: unterminated string at offset %d",
                options.input_file,
                lit.content_range.start_offset - 1,
            )
        if options.debug:
            dump_offsets(decode(lit.content), lit.content_range)

        if options.literal:
            # Errors point into the input file; mapping uses the requested start
            text, mapper = decode_or_raise(lit.content)
            mapper = OffsetMapper(mapper.offsets, lit.content_range)
        else:
            text, mapper = decode_or_raise(lit.content, lit.content_range, source)

        reports.append(
            {
                "start": lit.content_range.start_offset,
                "length": lit.content_range.length,
                "decoded": text,
                "offsets": list(mapper.offsets),
                "mapped": {str(n): mapper.offset_in_host(n) for n in options.map_offsets},
            }
        )
    return reports


def format_reports(reports: list[dict[str, Any]], output_format: str) -> str:
    if output_format == "json":
        return json.dumps(reports, indent=2) + "\n"
    lines = []
    for report in reports:
        end = report["start"] + report["length"]
        lines.append(f"{report['start']}:{end}\t{report['decoded']!r}")
        for n, host in report["mapped"].items():
            lines.append(f"  {n} -> {host}")
    return "".join(line + "\n" for line in lines)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.getLevelNamesMapping().get(options.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        reports = decode_file(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except DecodeError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1

    sys.stdout.write(format_reports(reports, options.output_format))
    return 0
