"""Directional Fast Marching Square cells and gradient descent over them."""

from __future__ import annotations

import math
from typing import Sequence

from fastmarch.grid import Cell, NDGridMap

Point = tuple[float, ...]


def sgn(value: float) -> int:
    """Return -1, 0 or 1 according to the sign of ``value``."""
    return int(value > 0) - int(value < 0)


class DirectionalCell(Cell):
    """A grid cell that also holds the directional arrival time of FM2 Directional."""

    __slots__ = ("directional_time",)

    def __init__(self, index: int = 0, occupancy: float = 1.0) -> None:
        super().__init__(index=index, occupancy=occupancy)
        self.directional_time = math.inf

    def is_obstacle(self) -> bool:
        """Return True when the cell does not propagate the wave at all."""
        return self.velocity == 0

    def __str__(self) -> str:
        return (
            "Fast Marching cell information:\n"
            f"\tIndex: {self.index}\n"
            f"\tValue: {self.value}\n"
            f"\tVelocity: {self.velocity}\n"
            f"\tState: {self.state.name}\n"
        )


def _directional_time(grid: NDGridMap, idx: int) -> float:
    if not 0 <= idx < len(grid):
        raise IndexError(f"gradient needs cell {idx}, which is outside the grid")
    return grid[idx].directional_time


def apply_directional(
    grid: NDGridMap,
    idx: int,
    velocity_map: Sequence[float],
    step: float = 1.0,
) -> tuple[list[Point], list[float]]:
    """Descend the directional times of ``grid`` from ``idx`` to a zero arrival time.

    Each step moves the point against the central-difference gradient of the
    directional times, scaled so the largest component moves ``step`` cells.
    Infinite gradient components are replaced by their sign. Returns the path
    of points and the velocity taken from ``velocity_map`` at every point.
    The path ends with the exact coordinates of the cell reached.
    """
    ndims = grid.ndims
    if ndims < 2:
        raise ValueError("gradient descent needs a grid of at least 2 dimensions")

    strides = []
    stride = 1
    for size in grid.dimsize:
        strides.append(stride)
        stride *= size

    coord = list(grid.idx2coord(idx))
    point = [float(c) for c in coord]
    path: list[Point] = [tuple(point)]
    velocities: list[float] = []

    while grid[idx].arrival_time != 0:
        grads = []
        for offset in strides:
            grad = (
                -_directional_time(grid, idx - offset) / 2
                + _directional_time(grid, idx + offset) / 2
            )
            if math.isinf(grad):
                grad = float(sgn(grad))
            grads.append(grad)

        max_grad = max(abs(g) for g in grads)
        if not max_grad > 0:
            raise ValueError(f"gradient vanishes at cell {idx}; descent cannot continue")

        for dim, grad in enumerate(grads):
            point[dim] -= step * grad / max_grad
            coord[dim] = int(point[dim])

        path.append(tuple(point))
        velocities.append(velocity_map[idx])
        idx = grid.coord2idx(coord)

    path.append(tuple(float(c) for c in grid.idx2coord(idx)))
    velocities.append(velocity_map[idx])
    return path, velocities