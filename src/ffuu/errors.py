"""Exceptions raised by the ffuu pipeline."""

from __future__ import annotations

from pathlib import Path


class FfuuError(Exception):
    """Base class for all ffuu errors."""


class ParseError(FfuuError):
    """Markup that does not match the grammar.

    Carries the construct that was being attempted, the unconsumed input at the
    failure position, and that position as an offset and a 1-based line/column.
    """

    def __init__(self, construct: str, remainder: str, offset: int, line: int, column: int) -> None:
        self.construct = construct
        self.remainder = remainder
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __repr__(self) -> str:
        return f"ParseError({self.construct!r}, line={self.line}, column={self.column})"

    def __str__(self) -> str:
        snippet = self.remainder[:40]
        if len(self.remainder) > 40:
            snippet += "..."
        return f"({self.line},{self.column}): expected {self.construct} at {snippet!r}"


class EmbedExecutionError(FfuuError):
    """An embedded command could not be spawned or produced non-UTF-8 output."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"{command!r}: {reason}")


class DocumentError(FfuuError):
    """Processing of a single document failed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ConfigError(FfuuError):
    """Missing or invalid configuration."""
