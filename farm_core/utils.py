from __future__ import annotations

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def chunks(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive groups of at most ``size``, order kept."""

    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
