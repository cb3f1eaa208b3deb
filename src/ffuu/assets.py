"""Copy an HTML file and, recursively, everything it links to by relative URI."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlsplit

from .constants import HTML_SUFFIXES, URI_ATTRIBUTES
from .errors import DocumentError, ParseError
from .files import read_file, write_file
from .tokenizer import tokenize
from .tokens import Tag, Token

logger = logging.getLogger(__name__)


def is_relative_uri(value: str) -> bool:
    """True for a relative path: no scheme, no host, not rooted, not empty."""
    parts = urlsplit(value)
    if parts.scheme or parts.netloc or not parts.path:
        return False
    return not PurePosixPath(parts.path).is_absolute()


def find_relative_paths(tokens: Iterable[Token]) -> list[str]:
    """Return every relative URI found in a URI-bearing attribute, in document order."""
    paths: list[str] = []
    for token in tokens:
        if not isinstance(token, Tag):
            continue
        for name, value in token.attributes:
            if name in URI_ATTRIBUTES and value is not None and is_relative_uri(value):
                paths.append(value)
    return paths


def asset_path(value: str) -> PurePosixPath:
    """The file a relative URI points at, without query or fragment."""
    return PurePosixPath(unquote(urlsplit(value).path))


def add_file(output_dir: Path, input_file_path: Path, root: Path) -> Path:
    """Copy one file into `output_dir`, keeping its path relative to `root`."""
    try:
        contents = read_file(input_file_path)
    except OSError as exc:
        raise DocumentError(input_file_path, f"cannot read: {exc}") from exc
    return _copy_to_output(output_dir, input_file_path, root, contents)


def _copy_to_output(output_dir: Path, input_file_path: Path, root: Path, contents: bytes) -> Path:
    try:
        return write_file(output_dir, input_file_path.relative_to(root), contents)
    except OSError as exc:
        raise DocumentError(input_file_path, f"cannot write to {output_dir}: {exc}") from exc


def add_html_file(
    output_dir: Path | str,
    input_file_path: Path | str,
    root: Path | str | None = None,
    visited: set[Path] | None = None,
) -> list[Path]:
    """Copy an HTML file and its relative dependencies; return the written paths.

    Linked HTML files are followed too. Each file is copied once. Links that
    leave `root` (the root file's directory by default) are skipped.
    """
    output_dir = Path(output_dir)
    input_file_path = Path(input_file_path).resolve()
    root = Path(root).resolve() if root is not None else input_file_path.parent
    if visited is None:
        visited = set()
    visited.add(input_file_path)

    try:
        contents = read_file(input_file_path)
    except OSError as exc:
        raise DocumentError(input_file_path, f"cannot read: {exc}") from exc
    try:
        tokens = tokenize(contents.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DocumentError(input_file_path, f"not UTF-8: {exc}") from exc
    except ParseError as exc:
        raise DocumentError(input_file_path, f"cannot parse HTML: {exc}") from exc

    written = [_copy_to_output(output_dir, input_file_path, root, contents)]

    for value in find_relative_paths(tokens):
        dependency = (input_file_path.parent / asset_path(value)).resolve()
        if dependency in visited:
            continue
        if not dependency.is_relative_to(root):
            logger.warning("Skipping %r in %s: outside %s", value, input_file_path, root)
            continue
        visited.add(dependency)
        if dependency.suffix.lower() in HTML_SUFFIXES:
            written.extend(add_html_file(output_dir, dependency, root, visited))
        else:
            written.append(add_file(output_dir, dependency, root))

    return written
