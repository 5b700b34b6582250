"""Command line entry point: ``screenflow FILE [-o OUT] [--format txt|png]``."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import ScreenflowError
from .generator import ScreenFlowGenerator
from .validation import validate_graph

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screenflow",
        description="Render screen flow notation as a text or PNG diagram.",
    )
    parser.add_argument(
        "input",
        help="Flow notation file, or '-' to read standard input",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file. Text output goes to stdout when omitted.",
    )
    parser.add_argument(
        "--format",
        choices=("txt", "png"),
        default=None,
        help="Output format (default: from the output suffix, else txt)",
    )
    parser.add_argument(
        "--font",
        default=None,
        help="Font file or name for PNG output",
    )
    parser.add_argument(
        "--no-shadow",
        action="store_true",
        help="Draw text cards without shadows",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help=(
            "Report duplicate screen names, undefined targets and unreachable "
            "screens on stderr; exit 1 if any are found"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log skipped lines and render details",
    )
    return parser


def _resolve_format(args: argparse.Namespace) -> str:
    if args.format:
        return args.format
    if args.output is not None and args.output.suffix.lower() == ".png":
        return "png"
    return "txt"


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.input == "-":
            text = sys.stdin.read()
        else:
            text = Path(args.input).read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Could not read %s: %s", args.input, exc)
        return 1

    generator = ScreenFlowGenerator(shadow=not args.no_shadow, font=args.font)

    if args.check:
        graph = generator.parse(text)
        report = validate_graph(graph)
        for message in report.messages(graph):
            print(message, file=sys.stderr)
        if not report.is_clean:
            return 1

    fmt = _resolve_format(args)
    try:
        if fmt == "png":
            output = args.output or Path("screenflow.png")
            generator.save_png(text, str(output))
            print(f"Saved: {output}")
        elif args.output is not None:
            generator.save_txt(text, str(args.output))
            print(f"Saved: {args.output}")
        else:
            print(generator.generate(text))
    except (ScreenflowError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
