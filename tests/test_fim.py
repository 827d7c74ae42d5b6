import math

import pytest

from fastmarch.fim import FIM
from fastmarch.grid import FMState, NDGridMap


def _run(dimsize, init, goal=None, error=0.0, obstacles=()):
    grid = NDGridMap(dimsize)
    for coord in obstacles:
        grid[grid.coord2idx(coord)].occupancy = 0.0
    solver = FIM(error=error)
    solver.set_environment(grid)
    if goal is None:
        solver.set_initial_points([init])
    else:
        solver.set_initial_and_goal_points([init], goal)
    solver.compute()
    return grid, solver


def test_example_grid_with_goal():
    grid, solver = _run((300, 300), (150, 150), (250, 250))
    assert grid[grid.coord2idx((150, 150))].arrival_time == 0.0
    assert math.isfinite(grid[grid.coord2idx((250, 250))].arrival_time)
    for k in range(1, 20):
        assert grid[grid.coord2idx((150 + k, 150))].arrival_time == pytest.approx(k)
    assert solver.time >= 0.0


def test_axis_times_are_distances_without_goal():
    grid, _ = _run((21, 21), (10, 10))
    for k in range(1, 11):
        assert grid[grid.coord2idx((10 + k, 10))].arrival_time == pytest.approx(k)
        assert grid[grid.coord2idx((10, 10 - k))].arrival_time == pytest.approx(k)


def test_wave_is_symmetric():
    grid, _ = _run((21, 21), (10, 10))
    for dx, dy in [(3, 5), (7, 2), (9, 9)]:
        ref = grid[grid.coord2idx((10 + dx, 10 + dy))].arrival_time
        assert grid[grid.coord2idx((10 - dx, 10 + dy))].arrival_time == pytest.approx(ref)
        assert grid[grid.coord2idx((10 + dy, 10 + dx))].arrival_time == pytest.approx(ref)


def test_diagonal_time_between_euclidean_and_manhattan():
    grid, _ = _run((21, 21), (10, 10))
    t = grid[grid.coord2idx((11, 11))].arrival_time
    assert math.sqrt(2) <= t <= 2.0


def test_all_cells_reached_and_frozen_without_goal():
    grid, _ = _run((15, 12), (3, 4))
    assert all(math.isfinite(c.arrival_time) for c in grid)
    assert all(c.state == FMState.FROZEN for c in grid)


def test_goal_stops_propagation_early():
    grid, _ = _run((30, 30), (15, 15), (16, 15))
    assert grid[grid.coord2idx((16, 15))].arrival_time == pytest.approx(1.0)
    assert grid[grid.coord2idx((0, 0))].arrival_time == math.inf


def test_obstacles_are_never_reached_and_lengthen_paths():
    wall = [(10, y) for y in range(0, 18)]
    grid, _ = _run((21, 21), (5, 5), obstacles=wall)
    assert all(math.isinf(grid[grid.coord2idx(c)].arrival_time) for c in wall)
    behind = grid[grid.coord2idx((15, 5))].arrival_time
    assert math.isfinite(behind)
    assert behind > 10.0


def test_repeated_compute_gives_same_result():
    grid = NDGridMap((20, 20))
    solver = FIM()
    solver.set_environment(grid)
    solver.set_initial_points([grid.coord2idx((4, 7))])
    solver.compute()
    first = [c.arrival_time for c in grid]
    solver.compute()
    assert [c.arrival_time for c in grid] == first


def test_three_dimensional_axis_distances():
    grid, _ = _run((9, 9, 9), (4, 4, 4))
    for k in range(1, 5):
        assert grid[grid.coord2idx((4, 4, 4 + k))].arrival_time == pytest.approx(k)


def test_name_defaults_and_custom():
    assert FIM().name == "FIM"
    assert FIM("custom", 0.1).name == "custom"