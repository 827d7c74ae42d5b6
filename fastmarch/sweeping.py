"""Fast Sweeping and Lock Sweeping Methods for the Eikonal equation."""

from __future__ import annotations

import warnings
from itertools import product

from fastmarch.eikonal import EikonalSolver, is_time_better_than
from fastmarch.grid import FMState, NDGridMap


class FSM(EikonalSolver):
    """Fast Sweeping Method.

    The grid is swept in all 2^n diagonal orderings, one after another, until a
    sweep changes no arrival time or ``max_sweeps`` sweeps have been done.
    ``max_sweeps=None`` means no limit.
    """

    def __init__(self, name: str = "FSM", max_sweeps: int | None = None) -> None:
        super().__init__(name)
        self.max_sweeps = max_sweeps
        self.sweeps = 0
        self._keep_sweeping = False
        self._stop_propagation = False
        self._dimsize: tuple[int, ...] = ()
        self._strides: tuple[int, ...] = ()
        self._incs: list[int] = []

    def _read_dims(self) -> None:
        assert self.grid is not None
        self._dimsize = self.grid.dimsize
        strides = []
        stride = 1
        for size in self._dimsize:
            strides.append(stride)
            stride *= size
        self._strides = tuple(strides)

    def _initialize_sweep(self) -> None:
        self._incs = [1] * len(self._dimsize)

    def set_environment(self, grid: NDGridMap) -> None:
        """Set and clean the grid, and record its dimension sizes."""
        super().set_environment(grid)
        self._read_dims()
        self._initialize_sweep()

    def setup(self) -> None:
        """Check the solver is ready and prepare the sweep directions."""
        super().setup()
        self._read_dims()
        self._initialize_sweep()
        if self.goal_idx is not None:
            warnings.warn(
                f"Setting a goal point in {self.name} is experimental. "
                "It may lead to wrong results.",
                UserWarning,
                stacklevel=2,
            )

    def _may_continue(self) -> bool:
        return (
            self._keep_sweeping
            and not self._stop_propagation
            and (self.max_sweeps is None or self.sweeps < self.max_sweeps)
        )

    def _run_sweeps(self) -> None:
        self._keep_sweeping = True
        self._stop_propagation = False
        while self._may_continue():
            self._keep_sweeping = False
            self._set_sweep()
            self.sweeps += 1
            self._sweep()

    def compute_internal(self) -> None:
        if not self._is_setup:
            self.setup()
        grid = self.grid
        assert grid is not None
        for i in self.init_points:
            grid[i].arrival_time = 0.0
        self._run_sweeps()

    def _set_sweep(self) -> None:
        # Counts through the direction patterns: dimension 0 changes fastest.
        for dim, inc in enumerate(self._incs):
            self._incs[dim] = inc + 2
            if self._incs[dim] <= 1:
                break
            self._incs[dim] = -1

    def _sweep(self) -> None:
        grid = self.grid
        assert grid is not None
        ranges = [
            range(size) if inc == 1 else range(size - 1, -1, -1)
            for size, inc in zip(self._dimsize, self._incs)
        ]
        strides = tuple(reversed(self._strides))
        # The highest dimension is the outermost loop, dimension 0 the innermost.
        for coords in product(*reversed(ranges)):
            idx = sum(c * s for c, s in zip(coords, strides))
            if not grid[idx].is_occupied():
                self._solve_for_idx(idx)

    def _solve_for_idx(self, idx: int) -> None:
        grid = self.grid
        assert grid is not None
        cell = grid[idx]
        previous = cell.arrival_time
        updated = self.solve_eikonal(idx)
        if is_time_better_than(updated, previous):
            cell.arrival_time = updated
            self._keep_sweeping = True
        elif _is_finite(updated) and idx == self.goal_idx:
            self._stop_propagation = True

    def reset(self) -> None:
        super().reset()
        self.sweeps = 0
        self._initialize_sweep()

    def _limit_str(self) -> str:
        return "unlimited" if self.max_sweeps is None else str(self.max_sweeps)

    def run_info(self) -> str:
        """Return a short report of the solver configuration and last run."""
        return (
            "Fast Sweeping Method\n"
            f"\t{self.name}\n"
            f"\tMaximum sweeps: {self._limit_str()}\n"
            f"\tSweeps performed: {self.sweeps}\n"
            f"\tElapsed time: {self.time} ms"
        )


class LSM(FSM):
    """Lock Sweeping Method: a sweep only visits cells that have been unlocked.

    Locked cells are FROZEN and unlocked cells OPEN.
    """

    def __init__(self, name: str = "LSM", max_sweeps: int | None = None) -> None:
        super().__init__(name, max_sweeps)

    def _lock_all(self) -> None:
        assert self.grid is not None
        for cell in self.grid:
            cell.state = FMState.FROZEN

    def compute_internal(self) -> None:
        if not self._is_setup:
            self.setup()
        grid = self.grid
        assert grid is not None
        self._lock_all()
        for i in self.init_points:
            grid[i].arrival_time = 0.0
            for nb in grid.neighbors(i):
                grid[nb].state = FMState.OPEN
        self._run_sweeps()

    def _solve_for_idx(self, idx: int) -> None:
        grid = self.grid
        assert grid is not None
        cell = grid[idx]
        if cell.state != FMState.OPEN:
            return
        previous = cell.arrival_time
        updated = self.solve_eikonal(idx)
        if is_time_better_than(updated, previous):
            cell.arrival_time = updated
            self._keep_sweeping = True
            for nb in grid.neighbors(idx):
                if is_time_better_than(updated, grid[nb].arrival_time):
                    grid[nb].state = FMState.OPEN
        elif _is_finite(updated) and idx == self.goal_idx:
            self._stop_propagation = True
        cell.state = FMState.FROZEN

    def reset(self) -> None:
        super().reset()
        if self.grid is not None:
            self._lock_all()

    def run_info(self) -> str:
        """Return a short report of the solver configuration and last run."""
        return (
            "Lock Sweeping Method\n"
            f"\t{self.name}\n"
            f"\tMaximum sweeps: {self._limit_str()}\n"
            f"\tSweeps performed: {self.sweeps}\n"
            f"\tElapsed time: {self.time} ms"
        )


def _is_finite(value: float) -> bool:
    return value == value and value not in (float("inf"), float("-inf"))