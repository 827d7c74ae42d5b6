import math

import pytest

from fastmarch.eikonal import EikonalSolver, is_time_better_than
from fastmarch.grid import NDGridMap


class _Probe(EikonalSolver):
    def compute_internal(self):
        for i in self.init_points:
            self.grid[i].arrival_time = 0.0


def _probe(grid):
    solver = _Probe("probe")
    solver.set_environment(grid)
    return solver


@pytest.mark.parametrize(
    "new, old, expected",
    [
        (1.0, 2.0, True),
        (2.0, 1.0, False),
        (1.0, 1.0, False),
        (1.0, math.inf, True),
        (math.inf, math.inf, False),
        (math.inf, 1.0, False),
    ],
)
def test_is_time_better_than(new, old, expected):
    assert is_time_better_than(new, old) is expected


def test_single_known_neighbour_adds_leafsize():
    grid = NDGridMap((5, 5), leafsize=2.0)
    solver = _probe(grid)
    grid[12].arrival_time = 0.0
    assert solver.solve_eikonal(13) == pytest.approx(2.0)


def test_two_known_neighbours_beat_one_dimensional_update():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    grid[12].arrival_time = 0.0
    grid[13].arrival_time = 1.0
    grid[17].arrival_time = 1.0
    result = solver.solve_eikonal(18)
    assert 1.0 < result < 2.0


def test_symmetric_neighbours_give_same_result():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    grid[12].arrival_time = 0.0
    assert solver.solve_eikonal(11) == solver.solve_eikonal(13)
    assert solver.solve_eikonal(7) == solver.solve_eikonal(17)


def test_no_known_neighbours_gives_infinity():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    assert solver.solve_eikonal(12) == math.inf


def test_neighbours_not_lower_than_current_are_ignored():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    grid[12].arrival_time = 1.0
    grid[13].arrival_time = 0.5
    assert solver.solve_eikonal(13) == math.inf


def test_zero_velocity_gives_infinity():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    grid[12].arrival_time = 0.0
    grid[13].occupancy = 0.0
    assert solver.solve_eikonal(13) == math.inf


def test_coordinates_are_converted_to_indices():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    solver.set_initial_and_goal_points([(2, 2)], (4, 1))
    assert solver.init_points == [grid.coord2idx((2, 2))]
    assert solver.goal_idx == grid.coord2idx((4, 1))


def test_compute_marks_grid_used_and_times_run():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    solver.set_initial_points([12])
    solver.compute()
    assert grid[12].arrival_time == 0.0
    assert grid.is_clean is False
    assert solver.time >= 0.0


def test_second_compute_cleans_grid():
    grid = NDGridMap((5, 5))
    solver = _probe(grid)
    solver.set_initial_points([12])
    solver.compute()
    grid[3].arrival_time = 7.0
    solver.compute()
    assert math.isinf(grid[3].arrival_time)
    assert grid[12].arrival_time == 0.0


def test_setup_without_environment_raises():
    solver = _Probe("probe")
    with pytest.raises(RuntimeError):
        EikonalSolver.setup(solver)


def test_compute_without_initial_points_raises():
    solver = _probe(NDGridMap((5, 5)))
    with pytest.raises(RuntimeError):
        solver.compute()


def test_initial_point_outside_grid_raises():
    solver = _probe(NDGridMap((5, 5)))
    solver.set_initial_points([100])
    with pytest.raises(RuntimeError):
        solver.setup()