from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def sample_polyline(coordinates: Sequence[T], interval: int) -> list[T]:
    """Keep every ``interval``-th point (indices 0, k, 2k, ...) plus the last point.

    Points are returned as-is, so ``(lng, lat)`` pairs keep their ordering.
    """
    if interval < 1:
        raise ValueError("interval must be >= 1")
    if not coordinates:
        return []
    sampled = list(coordinates[::interval])
    last_index = len(coordinates) - 1
    if last_index % interval != 0:
        sampled.append(coordinates[last_index])
    return sampled


def max_sampled_length(original_count: int, interval: int) -> int:
    if interval < 1:
        raise ValueError("interval must be >= 1")
    return -(-original_count // interval) + 1
