"""Command-line interface.

    ffuu format [INPUT] [-o OUTPUT]     run embeds in one document and reformat it
    ffuu build INPUT_DIR OUTPUT_DIR     process every file of a directory
    ffuu site INPUT_ROOT OUTPUT_DIR     copy an HTML file and its relative assets
    ffuu add OUTPUT_FILE                copy stdin to $FFUU_OUTPUT_DIR/OUTPUT_FILE
    ffuu markdown [INPUT]               render Markdown to HTML
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path, PurePosixPath

from .assets import add_html_file
from .config import Settings
from .errors import ConfigError, DocumentError, FfuuError
from .files import prepare_output_dir, write_file
from .log import setup_logging
from .markdown_render import render_markdown
from .pipeline import build_directory, process_text
from .serialize import format_tokens
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


STDIN = Path("<stdin>")


def _read_text(path: Path | None) -> str:
    """Read UTF-8 text from `path`, or from stdin regardless of locale."""
    try:
        data = sys.stdin.buffer.read() if path is None else path.read_bytes()
        return data.decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(path or STDIN, f"cannot read: {exc}") from exc


def _write_text(path: Path | None, text: str) -> None:
    if path is None:
        sys.stdout.flush()
        sys.stdout.buffer.write(text.encode("utf-8"))
        sys.stdout.buffer.flush()
        return
    try:
        path.write_bytes(text.encode("utf-8"))
    except OSError as exc:
        raise DocumentError(path, f"cannot write: {exc}") from exc


def cmd_format(args: argparse.Namespace, settings: Settings) -> int:
    text = _read_text(args.input)
    if args.no_embeds:
        output = format_tokens(tokenize(text))
    else:
        output = asyncio.run(process_text(text, settings))
    _write_text(args.output, output)
    return 0


def cmd_build(args: argparse.Namespace, settings: Settings) -> int:
    settings = settings.with_overrides(output_dir=args.output_dir)
    failures = asyncio.run(build_directory(args.input_dir, settings))
    if failures:
        logger.error("%d document(s) failed", len(failures))
        return 1
    return 0


def cmd_site(args: argparse.Namespace, settings: Settings) -> int:
    prepare_output_dir(args.output_dir)
    for path in add_html_file(args.output_dir, args.input_root):
        logger.info("Copied %s", path)
    return 0


def cmd_add(args: argparse.Namespace, settings: Settings) -> int:
    output_dir = settings.require_output_dir()
    relative = PurePosixPath(args.output_file)
    if relative.is_absolute() or ".." in relative.parts:
        raise ConfigError(f"Output file must be a relative path inside the output directory: {args.output_file}")
    contents = sys.stdin.buffer.read()
    try:
        write_file(output_dir, relative, contents)
    except OSError as exc:
        raise DocumentError(output_dir / relative, f"cannot write: {exc}") from exc
    _write_text(None, str(PurePosixPath("/") / relative))
    return 0


def cmd_markdown(args: argparse.Namespace, settings: Settings) -> int:
    _write_text(args.output, render_markdown(_read_text(args.input)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ffuu",
        description="Static site generator for people who hate static site generators",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more (repeat for debug output)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument("--embed-tag", help="Tag name of embed directives (default: run)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    format_parser = subparsers.add_parser("format", help="Run embeds in a document and reformat it")
    format_parser.add_argument("input", nargs="?", type=Path, help="Input file (default: stdin)")
    format_parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    format_parser.add_argument("--no-embeds", action="store_true", help="Only reformat, do not run embeds")
    format_parser.set_defaults(handler=cmd_format)

    build_parser_ = subparsers.add_parser("build", help="Process every file in a directory")
    build_parser_.add_argument("input_dir", type=Path)
    build_parser_.add_argument("output_dir", type=Path, help="Cleared and recreated before the build")
    build_parser_.set_defaults(handler=cmd_build)

    site_parser = subparsers.add_parser("site", help="Copy an HTML file and, recursively, its relative links")
    site_parser.add_argument("input_root", type=Path, help="Root HTML file")
    site_parser.add_argument("output_dir", type=Path, help="Cleared and recreated before copying")
    site_parser.set_defaults(handler=cmd_site)

    add_parser = subparsers.add_parser("add", help="Copy stdin into the output directory and print its site path")
    add_parser.add_argument("output_file", help="Path relative to $FFUU_OUTPUT_DIR")
    add_parser.set_defaults(handler=cmd_add)

    markdown_parser = subparsers.add_parser("markdown", help="Render Markdown to HTML")
    markdown_parser.add_argument("input", nargs="?", type=Path, help="Input file (default: stdin)")
    markdown_parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    markdown_parser.set_defaults(handler=cmd_markdown)

    return parser


def _log_level(args: argparse.Namespace, default: str) -> str:
    if args.quiet:
        return "ERROR"
    if args.verbose >= 2:
        return "DEBUG"
    if args.verbose == 1:
        return "INFO"
    return default


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
        settings = settings.with_overrides(embed_tag=args.embed_tag, log_level=_log_level(args, settings.log_level))
    except ConfigError as exc:
        setup_logging()
        logger.error("%s", exc)
        return 1

    setup_logging(settings.log_level)
    try:
        return args.handler(args, settings)
    except FfuuError as exc:
        logger.error("%s", exc)
        return 1
