"""Fold a token sequence into per-token nesting depths.

An item that opens a level (positive delta) reports the depth it sits at, i.e.
the depth before applying its delta. Everything else reports the depth after
applying its delta, so a close tag reports the same depth as its open tag.

The formatter clamps the running depth at zero so unbalanced input still
renders. The embed extractor keeps the signed depth because it compares
against the depth recorded when an embed opened.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol, TypeVar


class DepthChange(Protocol):
    @property
    def depth_change(self) -> int: ...


T = TypeVar("T", bound=DepthChange)


def with_depth(items: Iterable[T], *, clamp: bool = False) -> Iterator[tuple[T, int]]:
    depth = 0
    for item in items:
        change = item.depth_change
        new_depth = depth + change
        if clamp and new_depth < 0:
            new_depth = 0
        yield item, (depth if change > 0 else new_depth)
        depth = new_depth


def formatting_depths(items: Iterable[T]) -> Iterator[tuple[T, int]]:
    return with_depth(items, clamp=True)


def extraction_depths(items: Iterable[T]) -> Iterator[tuple[T, int]]:
    return with_depth(items, clamp=False)


def final_depth(items: Iterable[DepthChange]) -> int:
    """Signed running depth after the whole sequence; 0 for balanced input."""
    return sum(item.depth_change for item in items)
