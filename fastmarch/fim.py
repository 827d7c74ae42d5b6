"""Fast Iterative Method for the Eikonal equation."""

from __future__ import annotations

from fastmarch.eikonal import EikonalSolver, is_time_better_than
from fastmarch.grid import FMState


class FIM(EikonalSolver):
    """Fast Iterative Method: repeatedly updates an active list until convergence.

    A cell leaves the active list once its arrival time changes by no more than
    ``error`` between two updates.
    """

    def __init__(self, name: str = "FIM", error: float = 0.0) -> None:
        super().__init__(name)
        self.error = error
        self._active: list[int] = []

    def compute_internal(self) -> None:
        if not self._is_setup:
            self.setup()
        grid = self.grid
        assert grid is not None

        for i in self.init_points:
            grid[i].arrival_time = 0.0
            grid[i].state = FMState.FROZEN
            for nb in grid.neighbors(i):
                cell = grid[nb]
                if cell.state == FMState.OPEN and not cell.is_occupied():
                    self._active.append(nb)
                    cell.state = FMState.NARROW

        stop = False
        while not stop and self._active:
            remaining: list[int] = []
            for x in self._active:
                cell = grid[x]
                previous = cell.arrival_time
                updated = self.solve_eikonal(x)
                cell.arrival_time = updated
                if abs(previous - updated) > self.error:
                    remaining.append(x)
                    continue
                for nb in grid.neighbors(x):
                    neighbour = grid[nb]
                    if neighbour.state == FMState.NARROW or neighbour.is_occupied():
                        continue
                    candidate = self.solve_eikonal(nb)
                    if is_time_better_than(candidate, neighbour.arrival_time):
                        neighbour.arrival_time = candidate
                        remaining.append(nb)
                        neighbour.state = FMState.NARROW
                if x == self.goal_idx:
                    stop = True
                cell.state = FMState.FROZEN
            self._active = remaining

    def reset(self) -> None:
        super().reset()
        self._active.clear()