"""Fast Marching Method driven by an untidy (bucketed) priority queue."""

from __future__ import annotations

from fastmarch.eikonal import EikonalSolver, is_time_better_than
from fastmarch.grid import FMState
from fastmarch.queues import UntidyQueue


class UFMM(EikonalSolver):
    """Fast Marching with an O(1) approximately ordered queue."""

    def __init__(self, name: str = "UFMM", buckets: int = 1000, increment: float = 2.0) -> None:
        super().__init__(name)
        self.buckets = buckets
        self.increment = increment
        self._narrow_band = UntidyQueue(buckets, increment)

    def compute_internal(self) -> None:
        if not self._is_setup:
            self.setup()
        grid = self.grid
        assert grid is not None
        band = self._narrow_band

        for i in self.init_points:
            grid[i].arrival_time = 0.0
            band.push(grid[i])

        stop = False
        while not stop and len(band):
            idx_min = band.top_idx()
            grid[idx_min].state = FMState.FROZEN
            for j in grid.neighbors(idx_min):
                cell = grid[j]
                if cell.state == FMState.FROZEN or cell.is_occupied():
                    continue
                new_time = self.solve_eikonal(j)
                if cell.state == FMState.NARROW:
                    if is_time_better_than(new_time, cell.arrival_time):
                        cell.arrival_time = new_time
                        band.increase(cell)
                else:
                    cell.state = FMState.NARROW
                    cell.arrival_time = new_time
                    band.push(cell)
            band.pop()
            if idx_min == self.goal_idx:
                stop = True

    def reset(self) -> None:
        super().reset()
        self._narrow_band.clear()

    def run_info(self) -> str:
        """Return a short report of the solver configuration and last run time."""
        return (
            "Untidy Fast Marching Method\n"
            f"\t{self.name}\n"
            f"\tNumber of buckets: {self.buckets}\n"
            f"\tMaximum increment {self.increment}\n"
            f"\tElapsed time: {self.time} ms"
        )