"""Filesystem helpers for writing a generated site."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .errors import DocumentError

logger = logging.getLogger(__name__)


def prepare_output_dir(path: Path | str) -> Path:
    """Clear the output directory and create it again.

    Raises DocumentError naming the directory if it cannot be removed or created.
    """
    path = Path(path)
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise DocumentError(path, f"cannot clear output directory: {exc}") from exc
    try:
        path.mkdir(parents=True)
    except OSError as exc:
        raise DocumentError(path, f"cannot create output directory: {exc}") from exc
    logger.debug("Prepared output directory %s", path)
    return path


def read_file(path: Path | str) -> bytes:
    return Path(path).read_bytes()


def write_file(output_dir: Path | str, relative_path: Path | str, contents: bytes | str) -> Path:
    """Write `contents` to `relative_path` under `output_dir`, creating directories."""
    output_path = Path(output_dir) / relative_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(contents, str):
        contents = contents.encode("utf-8")
    output_path.write_bytes(contents)
    logger.debug("Wrote %s", output_path)
    return output_path
