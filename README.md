# fastmarch

Solvers for the Eikonal equation on n-dimensional grid maps with cubic cells.
You give it a grid of cells with velocities (or obstacles) and one or more
start points. It computes the arrival time of a wave front at every cell.

## Installation

```
pip install fastmarch
```

## What is inside

- `fastmarch.grid`: `NDGridMap`, an n-dimensional flat grid of `Cell`
  objects, each with a `value` (arrival time), `velocity`, `occupancy` and
  an `FMState` (`OPEN`, `NARROW`, `FROZEN`). The grid converts between flat
  indices and coordinates (`idx2coord`, `coord2idx`). It gives the 2n face
  neighbours of a cell (`neighbors`, `neighbors_in_dim`) and the lowest
  neighbour value along a dimension (`min_value_in_dim`). It also has
  `max_value`, `avg_speed`, `max_speed`, `clean` and `clear`.
- `fastmarch.queues`: `CellHeap`, a min-heap of cells that can be
  re-prioritised. `UntidyQueue` is a bucketed queue that is only
  approximately ordered. It stores each cell's bucket in `cell.bucket`.
- `fastmarch.eikonal`: `EikonalSolver`, the shared base class. It holds the
  grid, the start and goal points, `setup`, `compute`, `reset` and
  `solve_eikonal`. It also has the helper `is_time_better_than`. After
  `compute()`, the run time in milliseconds is in `solver.time`.
- `fastmarch.fim`: `FIM(name="FIM", error=0.0)`, the Fast Iterative Method.
- `fastmarch.ufmm`: `UFMM(name="UFMM", buckets=1000, increment=2.0)`,
  Fast Marching driven by an `UntidyQueue`.
- `fastmarch.sweeping`: `FSM` (Fast Sweeping Method) and `LSM` (Lock
  Sweeping Method). Both take `(name, max_sweeps=None)`, and `None` means
  no sweep limit. Setting a goal point on them gives a `UserWarning`,
  because stopping at a goal is experimental.
- `fastmarch.maploader`: `load_map_from_image` and `load_map_from_text`.
  They fill a grid from an image or a text grid file and record the
  obstacle indices in `grid.occupied`.
- `fastmarch.config`: `BenchmarkConfig`, which reads a benchmark CFG file.
  The file uses `[grid]`, `[problem]`, `[benchmark]` and `[solvers]`
  sections. The options and their defaults go in `options`. The known
  solvers named in `[solvers]` go in `solver_names` and `ctor_params`.
  `get_value`, `split_and_cast` and `split_params` read those values.
- `fastmarch.directional`: `DirectionalCell`, a cell with a
  `directional_time`. `apply_directional` runs gradient descent over
  directional times and returns `(path, velocities)`.
- `fastmarch.plotter`: renders 2D grids as PIL images. The functions are
  `map_image`, `occupancy_image`, `arrival_times_image`, `map_path_image`,
  `occupancy_path_image`, `map_paths_image`, `arrival_times_path_image` and
  `states_image`. Each image has its title in `img.info["title"]`.
  `jet_lut` returns the colour map as a (256, 3) uint8 array.

## Example

```python
from fastmarch.grid import NDGridMap
from fastmarch.ufmm import UFMM

grid = NDGridMap((300, 300), 1.0)
start = grid.coord2idx((150, 150))
goal = grid.coord2idx((250, 250))

solver = UFMM("UFMM", 1000, 2.0)
solver.set_environment(grid)
solver.set_initial_and_goal_points([start], goal)
solver.compute()

print(grid[goal].value, solver.time)
print(solver.run_info())
```

`FIM`, `FSM` and `LSM` are used the same way.

## Map files

`load_map_from_image` reads the first channel of an image and divides it by
255 to get the occupancy, so black pixels become obstacles. The Y axis is
flipped so that the bottom-left pixel is coordinate (0, 0).

`load_map_from_text` reads files laid out like this. After the header line,
the values may be separated by any whitespace:

```
<header line, ignored>
leafsize
ndims
size of dim 0
size of dim 1
...
occupancy values, one per cell
```

## What it does not do

- It has no command-line program. Everything is used from Python.
- It has no classic heap-based Fast Marching solver and no Fast Marching
  Square planner. The solvers are `FIM`, `UFMM`, `FSM` and `LSM`.
- `BenchmarkConfig` only reads configuration. Nothing here runs benchmarks
  or writes results.
- The plotter builds images but does not open windows. Use
  `img.show()` or `img.save(...)` on the returned PIL image.
- There is no writer for grid values or paths.