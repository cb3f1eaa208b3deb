"""Recursive-descent tokenizer for the supported markup subset.

Grammar, informed by but much simpler than the HTML syntax:

    document  := (comment | doctype | tag | text)*        all-consuming
    comment   := "<!--" .*? "-->"
    doctype   := "<!" /doctype/i WS [^>]+ ">"
    tag       := WS? (open_tag | close_tag)
    open_tag  := "<" NAME (WS attribute)* (WS "/")? ">"
    close_tag := "<" "/" NAME ">"
    attribute := ATTR_NAME ('="' [^"]* '"' | "='" [^']* "'" | "=" UNQUOTED | empty)
    text      := [^<]+

Every production returns ``None`` on a mismatch instead of raising, so the
alternatives can backtrack. The furthest mismatch seen is remembered and
reported if the document as a whole cannot be consumed.
"""

from __future__ import annotations

import re

from .constants import VOID_ELEMENTS
from .errors import ParseError
from .tokens import Attribute, Comment, DocType, Tag, TagKind, Text, Token

_WHITESPACE_CHARS = " \t\n\f\r"

_WHITESPACE_PATTERN = re.compile(f"[{_WHITESPACE_CHARS}]+")
_TAG_NAME_PATTERN = re.compile(r"[A-Za-z0-9]+")
_ATTR_NAME_PATTERN = re.compile(r"[A-Za-z]+")
_ATTR_VALUE_DOUBLE_PATTERN = re.compile(r'="([^"]*)"')
_ATTR_VALUE_SINGLE_PATTERN = re.compile(r"='([^']*)'")
_ATTR_VALUE_UNQUOTED_PATTERN = re.compile(f"=([^{_WHITESPACE_CHARS}\"'=<>`]+)")
_VOID_MARKER_PATTERN = re.compile(f"[{_WHITESPACE_CHARS}]+/")
_COMMENT_PATTERN = re.compile(r"<!--(.*?)-->", re.DOTALL)
_DOCTYPE_PATTERN = re.compile(f"<!doctype[{_WHITESPACE_CHARS}]+[^>]+>", re.IGNORECASE)
_TEXT_PATTERN = re.compile(r"[^<]+")


class Tokenizer:
    __slots__ = ("buffer", "failure_construct", "failure_pos", "length")

    def __init__(self, text: str) -> None:
        self.buffer = text
        self.length = len(text)
        self.failure_pos = 0
        self.failure_construct = "token"

    def run(self) -> list[Token]:
        """Tokenize the whole buffer or raise ParseError."""
        tokens: list[Token] = []
        pos = 0
        while pos < self.length:
            self.failure_pos = pos
            self.failure_construct = "token"
            parsed = self.parse_token(pos)
            if parsed is None:
                raise self.error()
            token, pos = parsed
            tokens.append(token)
        return tokens

    def error(self) -> ParseError:
        pos = self.failure_pos
        line = self.buffer.count("\n", 0, pos) + 1
        column = pos - self.buffer.rfind("\n", 0, pos)
        return ParseError(self.failure_construct, self.buffer[pos:], pos, line, column)

    def _fail(self, pos: int, construct: str) -> None:
        if pos >= self.failure_pos:
            self.failure_pos = pos
            self.failure_construct = construct

    # Productions

    def parse_token(self, pos: int) -> tuple[Token, int] | None:
        return (
            self.parse_comment(pos)
            or self.parse_doctype(pos)
            or self.parse_tag(pos)
            or self.parse_text(pos)
        )

    def parse_comment(self, pos: int) -> tuple[Comment, int] | None:
        match = _COMMENT_PATTERN.match(self.buffer, pos)
        if match is None:
            # The scan for "-->" ran to the end of the input.
            if self.buffer.startswith("<!--", pos):
                self._fail(self.length, "comment close '-->'")
            return None
        return Comment(match.group(1)), match.end()

    def parse_doctype(self, pos: int) -> tuple[DocType, int] | None:
        match = _DOCTYPE_PATTERN.match(self.buffer, pos)
        if match is None:
            return None
        return DocType(), match.end()

    def parse_tag(self, pos: int) -> tuple[Tag, int] | None:
        space = _WHITESPACE_PATTERN.match(self.buffer, pos)
        if space is not None:
            pos = space.end()
        return self.parse_open_tag(pos) or self.parse_close_tag(pos)

    def parse_open_tag(self, pos: int) -> tuple[Tag, int] | None:
        if not self.buffer.startswith("<", pos):
            self._fail(pos, "'<'")
            return None
        name = _TAG_NAME_PATTERN.match(self.buffer, pos + 1)
        if name is None:
            self._fail(pos + 1, "tag name")
            return None
        pos = name.end()

        attributes: list[Attribute] = []
        while True:
            parsed = self.parse_spaced_attribute(pos)
            if parsed is None:
                break
            attribute, pos = parsed
            attributes.append(attribute)

        marker = _VOID_MARKER_PATTERN.match(self.buffer, pos)
        if marker is not None:
            pos = marker.end()

        if not self.buffer.startswith(">", pos):
            self._fail(pos, "'>' closing an open tag")
            return None

        tag_name = name.group()
        is_void = marker is not None or tag_name.lower() in VOID_ELEMENTS
        kind = TagKind.VOID if is_void else TagKind.OPEN
        return Tag(kind, tag_name, tuple(attributes)), pos + 1

    def parse_close_tag(self, pos: int) -> tuple[Tag, int] | None:
        if not self.buffer.startswith("</", pos):
            self._fail(pos, "'</'")
            return None
        name = _TAG_NAME_PATTERN.match(self.buffer, pos + 2)
        if name is None:
            self._fail(pos + 2, "tag name")
            return None
        pos = name.end()
        # Attributes are never accepted here.
        if not self.buffer.startswith(">", pos):
            self._fail(pos, "'>' closing a close tag")
            return None
        return Tag(TagKind.CLOSE, name.group()), pos + 1

    def parse_spaced_attribute(self, pos: int) -> tuple[Attribute, int] | None:
        space = _WHITESPACE_PATTERN.match(self.buffer, pos)
        if space is None:
            return None
        pos = space.end()
        name = _ATTR_NAME_PATTERN.match(self.buffer, pos)
        if name is None:
            self._fail(pos, "attribute name")
            return None
        parsed = self.parse_attribute_value(name.end())
        if parsed is None:
            return None
        value, pos = parsed
        return (name.group(), value), pos

    def parse_attribute_value(self, pos: int) -> tuple[str | None, int] | None:
        """Match one of the four value forms, in priority order.

        A quoted form that starts but does not finish is a failure; it never
        falls through to the unquoted form.
        """
        buffer = self.buffer
        for pattern, quote in (
            (_ATTR_VALUE_DOUBLE_PATTERN, '="'),
            (_ATTR_VALUE_SINGLE_PATTERN, "='"),
        ):
            match = pattern.match(buffer, pos)
            if match is not None:
                return match.group(1), match.end()
            if buffer.startswith(quote, pos):
                self._fail(pos, "closing quote of an attribute value")
                return None

        match = _ATTR_VALUE_UNQUOTED_PATTERN.match(buffer, pos)
        if match is not None:
            return match.group(1), match.end()

        # Boolean attribute: nothing is consumed.
        if pos < self.length and buffer[pos] in _WHITESPACE_CHARS + ">":
            return None, pos
        self._fail(pos, "attribute value")
        return None

    def parse_text(self, pos: int) -> tuple[Text, int] | None:
        match = _TEXT_PATTERN.match(self.buffer, pos)
        if match is None:
            return None
        return Text(match.group()), match.end()


def tokenize(text: str) -> list[Token]:
    """Tokenize a whole document. Raises ParseError if any input is left over."""
    return Tokenizer(text).run()


def parse_tag(text: str) -> tuple[Tag, str]:
    """Parse a single tag at the start of `text`, returning it and the rest."""
    tokenizer = Tokenizer(text)
    parsed = tokenizer.parse_tag(0)
    if parsed is None:
        raise tokenizer.error()
    tag, pos = parsed
    return tag, text[pos:]
