"""Per-document processing and the one-task-per-document directory build.

One document goes through tokenize, extract embeds, run embeds, substitute,
format, strictly in that order. Embed commands block, so they run in a worker
thread to keep the event loop free for sibling documents.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from .command import execute_embed
from .constants import HTML_SUFFIXES, MARKDOWN_SUFFIXES
from .config import Settings
from .depth import final_depth
from .embeds import EmbedRequest, extract_embeds
from .errors import DocumentError, ParseError
from .files import prepare_output_dir, read_file, write_file
from .markdown_render import render_markdown
from .serialize import format_tokens
from .tokenizer import tokenize
from .tokens import Text, Token

logger = logging.getLogger(__name__)

Executor = Callable[[EmbedRequest], str]


async def process_text(
    text: str,
    settings: Settings | None = None,
    executor: Executor = execute_embed,
) -> str:
    """Run every embed in `text` and return the formatted result.

    Raises ParseError for markup that cannot be tokenized. A failing embed
    only loses its own output.
    """
    settings = settings or Settings()
    tokens = tokenize(text)
    depth = final_depth(tokens)
    if depth:
        logger.debug("Document is unbalanced: ends at depth %d", depth)

    result: list[Token] = []
    for part in extract_embeds(tokens, tag_name=settings.embed_tag):
        if isinstance(part, EmbedRequest):
            logger.info("Running %r", part.command)
            output = await asyncio.to_thread(executor, part)
            if output:
                result.append(Text(output))
        else:
            result.append(part)
    return format_tokens(result)


def output_name(input_path: Path) -> str:
    if input_path.suffix.lower() in MARKDOWN_SUFFIXES:
        return input_path.with_suffix(".html").name
    return input_path.name


async def process_document(
    input_path: Path | str,
    settings: Settings,
    executor: Executor = execute_embed,
) -> Path:
    """Process one file into the output directory; return the written path.

    HTML is run through the embed pipeline, Markdown is rendered to HTML first,
    anything else is copied unchanged. Every failure is raised as DocumentError.
    """
    input_path = Path(input_path)
    output_dir = settings.require_output_dir()
    suffix = input_path.suffix.lower()

    try:
        contents = await asyncio.to_thread(read_file, input_path)
    except OSError as exc:
        raise DocumentError(input_path, f"cannot read: {exc}") from exc

    if suffix in HTML_SUFFIXES or suffix in MARKDOWN_SUFFIXES:
        try:
            text = contents.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentError(input_path, f"not UTF-8: {exc}") from exc
        if suffix in MARKDOWN_SUFFIXES:
            text = render_markdown(text)
        try:
            contents = (await process_text(text, settings, executor)).encode("utf-8")
        except ParseError as exc:
            raise DocumentError(input_path, f"cannot parse: {exc}") from exc

    try:
        return await asyncio.to_thread(write_file, output_dir, output_name(input_path), contents)
    except OSError as exc:
        raise DocumentError(input_path, f"cannot write: {exc}") from exc


async def build_directory(
    input_dir: Path | str,
    settings: Settings,
    executor: Executor = execute_embed,
) -> list[DocumentError]:
    """Process every file in `input_dir` concurrently; return the failures.

    The output directory is cleared and created before any document starts.
    One document failing does not stop the others.
    """
    input_dir = Path(input_dir)
    output_dir = settings.require_output_dir()
    prepare_output_dir(output_dir)

    paths = sorted(path for path in input_dir.iterdir() if path.is_file())
    results = await asyncio.gather(
        *(process_document(path, settings, executor) for path in paths),
        return_exceptions=True,
    )

    failures: list[DocumentError] = []
    for result in results:
        if isinstance(result, DocumentError):
            logger.error("%s", result)
            failures.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            logger.info("Wrote %s", result)
    return failures
