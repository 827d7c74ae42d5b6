"""N-dimensional grid maps of cubic cells stored in a flat list."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterator, Sequence

OCCUPANCY_MARGIN = 1e-6


class FMState(Enum):
    """Propagation state of a cell during a wave expansion."""

    OPEN = "OPEN"
    NARROW = "NARROW"
    FROZEN = "FROZEN"


class Cell:
    """A grid cell holding an arrival time, a velocity and an occupancy.

    Setting the occupancy also sets the velocity: a free cell (occupancy 1)
    propagates at full speed and an obstacle (occupancy 0) does not propagate.
    """

    __slots__ = ("index", "value", "velocity", "state", "bucket", "_occupancy")

    def __init__(self, index: int = 0, occupancy: float = 1.0) -> None:
        self.index = index
        self.value = math.inf
        self.state = FMState.OPEN
        self.bucket = 0
        self._occupancy = occupancy
        self.velocity = occupancy

    @property
    def occupancy(self) -> float:
        return self._occupancy

    @occupancy.setter
    def occupancy(self, occupancy: float) -> None:
        self._occupancy = occupancy
        self.velocity = occupancy

    @property
    def arrival_time(self) -> float:
        return self.value

    @arrival_time.setter
    def arrival_time(self, value: float) -> None:
        self.value = value

    def is_occupied(self) -> bool:
        """Return True when the cell is an obstacle."""
        return self._occupancy < OCCUPANCY_MARGIN

    def set_default(self) -> None:
        """Restore the state a wave expansion expects to start from."""
        self.value = math.inf
        self.state = FMState.OPEN
        self.bucket = 0
        self.velocity = self._occupancy

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(index={self.index}, value={self.value}, "
            f"velocity={self.velocity}, state={self.state.name})"
        )


class NDGridMap:
    """An n-dimensional grid of cubic cells with flat indexing.

    Index ``i`` maps to coordinates ``(x0, x1, ...)`` with
    ``i = x0 + x1*d0 + x2*d0*d1 + ...`` where ``dk`` are the dimension sizes.
    """

    cell_type: type = Cell

    def __init__(self, dimsize: Sequence[int] | None = None, leafsize: float = 1.0) -> None:
        self.leafsize = float(leafsize)
        self.is_clean = True
        self.occupied: list[int] = []
        self._cells: list[Cell] = []
        self._dimsize: tuple[int, ...] = ()
        self._d: tuple[int, ...] = ()
        if dimsize is not None:
            self.resize(dimsize)

    @property
    def dimsize(self) -> tuple[int, ...]:
        return self._dimsize

    @property
    def ndims(self) -> int:
        return len(self._dimsize)

    def resize(self, dimsize: Sequence[int]) -> None:
        """Resize the grid and fill it with fresh default cells."""
        sizes = tuple(int(s) for s in dimsize)
        if not sizes or any(s <= 0 for s in sizes):
            raise ValueError(f"invalid dimension sizes: {dimsize!r}")
        self._dimsize = sizes
        partial = []
        ncells = 1
        for size in sizes:
            ncells *= size
            partial.append(ncells)
        self._d = tuple(partial)
        self._cells = [self.cell_type(index=i) for i in range(ncells)]
        self.is_clean = True

    def __getitem__(self, idx: int) -> Cell:
        return self._cells[idx]

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def min_value_in_dim(self, idx: int, dim: int) -> float:
        """Return the lowest value among the neighbours of ``idx`` along ``dim``."""
        neighs = self.neighbors_in_dim(idx, dim)
        if not neighs:
            return math.inf
        return min(self._cells[n].value for n in neighs)

    def neighbors_in_dim(self, idx: int, dim: int) -> list[int]:
        """Return the indices of the (up to two) neighbours of ``idx`` along ``dim``."""
        step = 1 if dim == 0 else self._d[dim - 1]
        slice_size = self._d[dim]
        slice_id = idx // slice_size
        found = []
        before = idx - step
        if before >= 0 and before // slice_size == slice_id:
            found.append(before)
        after = idx + step
        if after // slice_size == slice_id:
            found.append(after)
        return found

    def neighbors(self, idx: int) -> list[int]:
        """Return the indices of the 2n-connectivity neighbours of ``idx``."""
        return [n for dim in range(self.ndims) for n in self.neighbors_in_dim(idx, dim)]

    def idx2coord(self, idx: int) -> tuple[int, ...]:
        """Convert a flat index into grid coordinates."""
        coords = []
        rest = idx
        for size in self._dimsize:
            rest, coord = divmod(rest, size)
            coords.append(coord)
        return tuple(coords)

    def coord2idx(self, coords: Sequence[int]) -> int:
        """Convert grid coordinates into a flat index."""
        if len(coords) != self.ndims:
            raise ValueError(
                f"expected {self.ndims} coordinates, got {len(coords)}"
            )
        idx = int(coords[0])
        for coord, stride in zip(coords[1:], self._d):
            idx += int(coord) * stride
        return idx

    def max_value(self) -> float:
        """Return the largest finite cell value, or 0 if there is none above 0."""
        return max(
            (c.value for c in self._cells if not math.isinf(c.value) and c.value > 0),
            default=0.0,
        )

    def clean(self) -> None:
        """Reset every cell to its default if the grid has been used."""
        if not self.is_clean:
            for cell in self._cells:
                cell.set_default()
            self.is_clean = True

    def clear(self) -> None:
        """Drop all cells and obstacles; the grid must be resized afterwards."""
        self._cells = []
        self.occupied = []

    def dim_sizes_str(self) -> str:
        """Return the dimension sizes, each followed by a tab."""
        return "".join(f"{size}\t" for size in self._dimsize)

    def avg_speed(self) -> float:
        """Return the mean velocity of the cells that are not obstacles."""
        free = [c.velocity for c in self._cells if not c.is_occupied()]
        if not free:
            raise ZeroDivisionError("grid has no free cells")
        return sum(free) / len(free)

    def max_speed(self) -> float:
        """Return the largest velocity in the grid (at least 0)."""
        return max((c.velocity for c in self._cells), default=0.0) if self._cells else 0.0

    def __str__(self) -> str:
        lines = [
            "Grid cell information",
            f"\t{self.cell_type.__name__}",
            f"\t{len(self)} cells.",
            f"\t{self.leafsize} leafsize (m).",
            f"\t{self.ndims} dimensions:",
        ]
        lines.extend(f"\t\td{i}\tsize: {size}" for i, size in enumerate(self._dimsize))
        return "\n".join(lines)