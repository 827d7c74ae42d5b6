"""Priority queues over grid cells used by the wave propagation solvers."""

from __future__ import annotations

import heapq
import itertools
import math
from typing import Any


class CellHeap:
    """A min-heap of cells keyed on ``cell.value`` that supports re-prioritising.

    Outdated entries are left in the underlying heap and skipped when popped.
    Cells of equal value come out in the order they were pushed.
    """

    def __init__(self) -> None:
        self._heap: list[list[Any]] = []
        self._entries: dict[int, list[Any]] = {}
        self._counter = itertools.count()

    def push(self, cell) -> None:
        """Insert a cell, replacing any entry it already has."""
        old = self._entries.get(cell.index)
        if old is not None:
            old[2] = None
        entry = [cell.value, next(self._counter), cell.index]
        self._entries[cell.index] = entry
        heapq.heappush(self._heap, entry)

    def pop_min_idx(self) -> int:
        """Remove the cell with the lowest value and return its index."""
        while self._heap:
            _, _, idx = heapq.heappop(self._heap)
            if idx is not None:
                del self._entries[idx]
                return idx
        raise IndexError("pop from an empty heap")

    def update(self, cell) -> None:
        """Move a cell to match its current value, up or down."""
        if cell.index not in self._entries:
            raise KeyError(cell.index)
        self.push(cell)

    def increase(self, cell) -> None:
        """Move a cell whose value has only decreased (its priority increased)."""
        self.update(cell)

    def clear(self) -> None:
        self._heap.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, idx: int) -> bool:
        return idx in self._entries


class UntidyQueue:
    """A bucketed, approximately ordered queue of cells keyed on ``cell.value``.

    Priorities are quantised into ``buckets`` circular buckets spanning
    ``increment`` value units. Cells within a bucket come out in insertion order
    and a cell is never placed before the bucket currently being served, so the
    index returned by :meth:`top_idx` is the one removed by the next :meth:`pop`.
    The bucket number of each cell is stored in ``cell.bucket``.
    """

    def __init__(self, buckets: int = 1000, increment: float = 2.0) -> None:
        if buckets <= 0:
            raise ValueError("buckets must be positive")
        if increment <= 0:
            raise ValueError("increment must be positive")
        self._nbuckets = int(buckets)
        self._width = increment / self._nbuckets
        self._buckets: list[dict[int, Any]] = [{} for _ in range(self._nbuckets)]
        self._level = 0
        self._size = 0

    def _place(self, cell) -> int:
        priority = cell.value
        last = self._level + self._nbuckets - 1
        if math.isfinite(priority):
            level = min(max(int(priority // self._width), self._level), last)
        else:
            level = last
        slot = level % self._nbuckets
        self._buckets[slot][cell.index] = cell
        self._size += 1
        return slot

    def push(self, cell) -> None:
        """Insert a cell according to its current value."""
        if self._size == 0:
            self._level = int(cell.value // self._width) if math.isfinite(cell.value) else 0
        cell.bucket = self._place(cell)

    def increase(self, cell) -> None:
        """Move a cell whose value has decreased to its new bucket."""
        bucket = self._buckets[cell.bucket]
        if cell.index not in bucket:
            raise KeyError(cell.index)
        del bucket[cell.index]
        self._size -= 1
        cell.bucket = self._place(cell)

    def _advance(self) -> dict[int, Any]:
        if self._size == 0:
            raise IndexError("queue is empty")
        while True:
            bucket = self._buckets[self._level % self._nbuckets]
            if bucket:
                return bucket
            self._level += 1

    def top_idx(self) -> int:
        """Return the index of the cell to be popped next."""
        return next(iter(self._advance()))

    def pop(self) -> None:
        """Remove the cell returned by :meth:`top_idx`."""
        bucket = self._advance()
        del bucket[next(iter(bucket))]
        self._size -= 1

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._size = 0
        self._level = 0

    def __len__(self) -> int:
        return self._size