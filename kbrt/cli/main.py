"""
KBRT CLI — Command-line interface for rendering and report extraction.
"""

import argparse
import json
import sys
from pathlib import Path

from kbrt import __version__
from kbrt.core.context import RenderRequest
from kbrt.core.engine import get_engine
from kbrt.core.errors import KbrtError
from kbrt.ir.serialization import to_json
from kbrt.render.theme import list_themes
from kbrt.report.extractor import extract_report
from kbrt.report.response import process_response


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input",
        type=str,
        help="Input text or path to file (use - for stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path (default: stdout)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or KBRT_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (pipeline,segment,inline,render,report,system). Default: all",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kbrt",
        description="Knowledge-Base Render & Report Toolkit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"kbrt {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    render_parser = subparsers.add_parser("render", help="Render an article to HTML")
    _add_common_arguments(render_parser)
    render_parser.add_argument(
        "--format",
        choices=["html", "json"],
        default="html",
        help="Output format: html (default) or json (full render result)",
    )
    render_parser.add_argument(
        "--theme",
        type=str,
        default=None,
        help=f"Style theme (available: {', '.join(list_themes())}; default: KBRT_THEME or default)",
    )

    report_parser = subparsers.add_parser("report", help="Extract fields from a review report")
    _add_common_arguments(report_parser)

    process_parser = subparsers.add_parser(
        "process",
        help="Split a full generator response, render the article and extract the report",
    )
    _add_common_arguments(process_parser)
    process_parser.add_argument(
        "--theme",
        type=str,
        default=None,
        help="Style theme for the article",
    )

    return parser


def main(argv: list[str] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args)
    text = read_input(args.input)

    try:
        if args.command == "render":
            output, ok = run_render(args, text)
        elif args.command == "report":
            output, ok = run_report(text)
        else:
            output, ok = run_process(args, text)
    except KbrtError as e:
        print(f"kbrt: {e}", file=sys.stderr)
        return 2

    write_output(output, args.output)
    return 0 if ok else 1


def _configure_logging(args: argparse.Namespace) -> None:
    from kbrt.core.logging import configure_logging

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]

    configure_logging(level=args.log_level, channels=channels, force=True)


def read_input(value: str) -> str:
    """Resolve the input argument to text: stdin, a file path, or literal text."""
    if value == "-":
        return sys.stdin.read()
    # Only check as path if it's short enough to be a valid path
    if len(value) < 256 and "\n" not in value and Path(value).is_file():
        return Path(value).read_text(encoding="utf-8")
    return value


def write_output(output: str, path: str = None) -> None:
    if path:
        Path(path).write_text(output, encoding="utf-8")
    else:
        print(output)


def run_render(args: argparse.Namespace, text: str) -> tuple[str, bool]:
    """Render an article; returns (output, succeeded)."""
    result = get_engine().run(RenderRequest(text=text, theme=args.theme))
    ok = result.status.value in ("success", "partial")

    if args.format == "json":
        return to_json(result), ok

    output = result.html
    if result.diagnostics:
        for diag in result.diagnostics:
            print(f"[{diag.level.value}] {diag.code}: {diag.message}", file=sys.stderr)
    return output, ok


def run_report(text: str) -> tuple[str, bool]:
    """Extract a report; always succeeds."""
    return to_json(extract_report(text)), True


def run_process(args: argparse.Namespace, text: str) -> tuple[str, bool]:
    """Process a full generator response into article markup and report."""
    processed = process_response(text, theme=args.theme)
    output = json.dumps(
        {
            "success": processed.article.status.value in ("success", "partial"),
            "optimizedArticle": processed.article.html,
            "analysis": processed.report.raw_text,
            "report": processed.report.model_dump(mode="json"),
        },
        indent=2,
    )
    return output, processed.article.status.value != "error"


if __name__ == "__main__":
    sys.exit(main())
