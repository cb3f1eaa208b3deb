"""Canonical serialization of token sequences."""

from __future__ import annotations

from collections.abc import Iterable

from .constants import INDENT
from .depth import formatting_depths
from .tokens import Attribute, Comment, DocType, Tag, TagKind, Text, Token


def serialize_attribute(attribute: Attribute) -> str:
    name, value = attribute
    if value is None:
        return name
    # Always double-quoted, whatever quoting the source used.
    return f'{name}="{value}"'


def serialize_start_tag(name: str, attributes: Iterable[Attribute] = (), *, is_void: bool = False) -> str:
    parts: list[str] = ["<", name]
    for attribute in attributes:
        parts.extend([" ", serialize_attribute(attribute)])
    if is_void:
        parts.append(" /")
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def serialize_token(token: Token) -> str:
    if isinstance(token, Tag):
        if token.kind is TagKind.CLOSE:
            return serialize_end_tag(token.name)
        return serialize_start_tag(token.name, token.attributes, is_void=token.kind is TagKind.VOID)
    if isinstance(token, Text):
        return token.text
    if isinstance(token, Comment):
        return f"<!--{token.text}-->"
    if isinstance(token, DocType):
        return "<!DOCTYPE html>"
    raise TypeError(f"Unsupported token: {type(token).__name__}")


def format_tokens(tokens: Iterable[Token], indent: str = INDENT) -> str:
    """Render tokens one per line, indented by depth.

    Text starts a text island: inline content after it is written verbatim on
    the same line until a close tag brings the depth back to where the island
    started. Whitespace the tokenizer dropped is not restored.
    """
    parts: list[str] = []
    island_depth: int | None = None
    # Running depth before the current token.
    level = 0

    for index, (token, depth) in enumerate(formatting_depths(tokens)):
        if island_depth is not None:
            if isinstance(token, Tag) and token.kind is TagKind.CLOSE and level == island_depth:
                island_depth = None
        elif isinstance(token, Text):
            island_depth = depth
        else:
            if index:
                parts.append("\n")
            parts.append(indent * depth)

        parts.append(serialize_token(token))
        level = depth + 1 if token.depth_change > 0 else depth

    return "".join(parts)
