"""Token types produced by the tokenizer.

A document is a flat sequence of tokens; there is no tree. Each token knows how
it changes the nesting depth so the sequence can be folded into depths.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

Attribute = tuple[str, str | None]


class TagKind(enum.Enum):
    OPEN = "open"
    CLOSE = "close"
    VOID = "void"

    @property
    def depth_change(self) -> int:
        return _DEPTH_CHANGES[self]


_DEPTH_CHANGES = {
    TagKind.OPEN: 1,
    TagKind.CLOSE: -1,
    TagKind.VOID: 0,
}


@dataclass(frozen=True, slots=True)
class Tag:
    kind: TagKind
    name: str
    # Ordered as written; duplicates are kept.
    attributes: tuple[Attribute, ...] = ()

    @property
    def depth_change(self) -> int:
        return self.kind.depth_change

    def get(self, name: str) -> str | None:
        """Return the value of the first attribute called `name`, if it has one."""
        for key, value in self.attributes:
            if key == name:
                return value
        return None

    def __repr__(self) -> str:
        attrs = " ".join(key if value is None else f"{key}={value!r}" for key, value in self.attributes)
        return f"<{self.kind.value}:{self.name}{' ' + attrs if attrs else ''}>"


@dataclass(frozen=True, slots=True)
class Comment:
    text: str

    @property
    def depth_change(self) -> int:
        return 0


@dataclass(frozen=True, slots=True)
class DocType:
    @property
    def depth_change(self) -> int:
        return 0


@dataclass(frozen=True, slots=True)
class Text:
    text: str

    @property
    def depth_change(self) -> int:
        return 0


Token = Tag | Comment | DocType | Text
