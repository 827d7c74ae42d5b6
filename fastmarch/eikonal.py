"""Common machinery for solvers of the discretised Eikonal equation on grids."""

from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from typing import Iterable, Sequence, Union

from fastmarch.grid import NDGridMap

COMP_MARGIN = 1e-6

Point = Union[int, Sequence[int]]


def is_time_better_than(new: float, old: float) -> bool:
    """Return True when ``new`` improves on ``old`` by more than the margin."""
    return (old - new) > COMP_MARGIN


class EikonalSolver(ABC):
    """Base class for solvers that propagate a wave of arrival times over a grid.

    Subclasses implement :meth:`compute_internal`. The elapsed time of the last
    :meth:`compute` call is kept in ``time`` (milliseconds).
    """

    def __init__(self, name: str = "EikonalSolver") -> None:
        self.name = name
        self.grid: NDGridMap | None = None
        self.init_points: list[int] = []
        self.goal_idx: int | None = None
        self.time = -1.0
        self._is_setup = False

    def set_environment(self, grid: NDGridMap) -> None:
        """Set the grid the solver works on and clean it."""
        self.grid = grid
        grid.clean()
        self._is_setup = False

    def _to_index(self, point: Point) -> int:
        if isinstance(point, int):
            return point
        if self.grid is None:
            raise RuntimeError("set the environment before giving coordinates")
        return self.grid.coord2idx(point)

    def set_initial_points(self, points: Iterable[Point] | Point) -> None:
        """Set the wave sources, given as indices or coordinates; clears the goal."""
        if isinstance(points, int) or (
            isinstance(points, (tuple, list)) and points and all(isinstance(p, int) for p in points)
            and self.grid is not None and len(points) == self.grid.ndims
            and not isinstance(points, list)
        ):
            points = [points]
        self.init_points = [self._to_index(p) for p in points]
        self.goal_idx = None
        self._is_setup = False

    def set_initial_and_goal_points(self, points: Iterable[Point] | Point, goal: Point) -> None:
        """Set the wave sources and the point at which propagation may stop."""
        self.set_initial_points(points)
        self.goal_idx = self._to_index(goal)

    def setup(self) -> None:
        """Check that the solver is ready to run."""
        if self.grid is None:
            raise RuntimeError(f"{self.name}: no environment set")
        if not self.init_points:
            raise RuntimeError(f"{self.name}: no initial points set")
        ncells = len(self.grid)
        for idx in self.init_points:
            if not 0 <= idx < ncells:
                raise RuntimeError(f"{self.name}: initial point {idx} outside the grid")
        if self.goal_idx is not None and not 0 <= self.goal_idx < ncells:
            raise RuntimeError(f"{self.name}: goal point {self.goal_idx} outside the grid")
        self._is_setup = True

    def compute(self) -> None:
        """Run the solver, timing the propagation."""
        if not self._is_setup:
            self.setup()
        assert self.grid is not None
        if not self.grid.is_clean:
            self.reset()
        start = time.perf_counter()
        self.compute_internal()
        self.time = (time.perf_counter() - start) * 1000.0
        self.grid.is_clean = False

    @abstractmethod
    def compute_internal(self) -> None:
        """Propagate the wave over the grid."""

    def reset(self) -> None:
        """Bring the grid back to its default state for a new run."""
        if self.grid is not None:
            self.grid.clean()

    def solve_eikonal(self, idx: int) -> float:
        """Solve the n-dimensional Eikonal equation for cell ``idx``."""
        grid = self.grid
        assert grid is not None
        current = grid[idx].arrival_time
        tvalues = []
        for dim in range(grid.ndims):
            min_t = grid.min_value_in_dim(idx, dim)
            if not math.isinf(min_t) and min_t < current:
                tvalues.append(min_t)
        if not tvalues:
            return math.inf
        tvalues.sort()
        count = len(tvalues)
        updated = math.inf
        for used in range(1, count + 1):
            updated = self._solve_ndims(idx, tvalues, used)
            if used == count or (updated - tvalues[used]) < COMP_MARGIN:
                break
        return updated

    def _solve_ndims(self, idx: int, tvalues: list[float], used: int) -> float:
        grid = self.grid
        assert grid is not None
        velocity = grid[idx].velocity
        if velocity == 0:
            return math.inf
        leaf = grid.leafsize
        if used == 1:
            return tvalues[0] + leaf / velocity
        considered = tvalues[:used]
        sum_t = sum(considered)
        sum_tt = sum(t * t for t in considered)
        a = used
        b = -2.0 * sum_t
        c = sum_tt - leaf * leaf / (velocity * velocity)
        quad = b * b - 4.0 * a * c
        if quad < 0:
            return math.inf
        return (-b + math.sqrt(quad)) / (2.0 * a)