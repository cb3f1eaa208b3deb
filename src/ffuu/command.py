"""Run the external command behind an embed request.

There is no timeout: a command that never exits blocks its document forever.
"""

from __future__ import annotations

import logging
import subprocess

from .embeds import EmbedRequest
from .errors import EmbedExecutionError

logger = logging.getLogger(__name__)


def run_embed(request: EmbedRequest) -> str:
    """Run `request` and return its stripped standard output.

    Without ``args`` the command string goes to the platform shell, which does
    all splitting and quoting. The body, if any, is written to the command's
    standard input; otherwise standard input is not connected. A non-zero exit
    status is not an error: whatever was printed is used.
    """
    if request.args is not None:
        argv: str | list[str] = [request.command, *request.args]
        shell = False
    else:
        argv = request.command
        shell = True

    if request.input is not None:
        stdin_kwargs: dict[str, object] = {"input": request.input.encode("utf-8")}
    else:
        stdin_kwargs = {"stdin": subprocess.DEVNULL}

    try:
        completed = subprocess.run(argv, shell=shell, stdout=subprocess.PIPE, check=False, **stdin_kwargs)
    except OSError as exc:
        raise EmbedExecutionError(request.command, f"could not start: {exc}") from exc

    if completed.returncode:
        logger.debug("Command %r exited with status %d", request.command, completed.returncode)

    try:
        text = completed.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EmbedExecutionError(request.command, f"output is not UTF-8: {exc}") from exc
    return text.strip()


def execute_embed(request: EmbedRequest) -> str:
    """Like run_embed, but a failed embed yields an empty substitution."""
    try:
        return run_embed(request)
    except EmbedExecutionError as exc:
        logger.warning("Embed failed, substituting nothing: %s", exc)
        return ""
