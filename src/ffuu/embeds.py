"""Find embedded command directives in a token stream.

A directive is the reserved tag carrying a ``command`` attribute::

    <run command="date" />
    <run command="jq .">{"number": 42}</run>

A void directive becomes a request without input. An open directive collects
every following token up to its matching close; those tokens are formatted
and become the command's input. Directives inside a directive's body are not
recognised: they are part of the body text handed to the outer command.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .constants import EMBED_ARGS_ATTRIBUTE, EMBED_COMMAND_ATTRIBUTE, EMBED_TAG_NAME
from .depth import extraction_depths
from .serialize import format_tokens
from .tokens import Tag, TagKind, Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmbedRequest:
    command: str
    input: str | None = None
    # Set when the directive has an ``args`` attribute: ``command`` is then run
    # directly with these arguments instead of through the shell.
    args: tuple[str, ...] | None = None


class _PendingEmbed:
    __slots__ = ("depth", "opener", "request", "tokens")

    def __init__(self, opener: Tag, request: EmbedRequest, depth: int) -> None:
        self.opener = opener
        self.request = request
        self.depth = depth
        self.tokens: list[Token] = []


def embed_from_tag(token: Token, tag_name: str = EMBED_TAG_NAME) -> EmbedRequest | None:
    """Return a request without input if `token` is a directive, else None."""
    if not isinstance(token, Tag) or token.name != tag_name or token.kind is TagKind.CLOSE:
        return None
    command = token.get(EMBED_COMMAND_ATTRIBUTE)
    if command is None:
        return None
    args = token.get(EMBED_ARGS_ATTRIBUTE)
    return EmbedRequest(command, args=tuple(args.split(" ")) if args is not None else None)


def _is_embed_end(token: Token, depth: int, pending: _PendingEmbed, tag_name: str) -> bool:
    return (
        isinstance(token, Tag)
        and token.kind is TagKind.CLOSE
        and token.name == tag_name
        and depth <= pending.depth
    )


def extract_embeds(tokens: Iterable[Token], *, tag_name: str = EMBED_TAG_NAME) -> list[Token | EmbedRequest]:
    """Replace directives with EmbedRequests, keeping everything else in order."""
    output: list[Token | EmbedRequest] = []
    pending: _PendingEmbed | None = None

    for token, depth in extraction_depths(tokens):
        if pending is not None:
            if _is_embed_end(token, depth, pending, tag_name):
                body = format_tokens(pending.tokens)
                request = pending.request
                output.append(EmbedRequest(request.command, body, request.args))
                pending = None
            else:
                pending.tokens.append(token)
            continue

        request = embed_from_tag(token, tag_name)
        if request is None:
            output.append(token)
        elif token.kind is TagKind.VOID:
            output.append(request)
        else:
            pending = _PendingEmbed(token, request, depth)

    if pending is not None:
        logger.warning("Unclosed <%s command=%r>; keeping its markup as is", tag_name, pending.request.command)
        output.append(pending.opener)
        output.extend(pending.tokens)

    return output
