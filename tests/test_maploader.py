import pytest
from PIL import Image

from fastmarch.grid import NDGridMap
from fastmarch.maploader import load_map_from_image, load_map_from_text
from fastmarch.sweeping import FSM


def _write_grid(path, leafsize, dims, values, header="grid file"):
    lines = [header, str(leafsize), str(len(dims))]
    lines.extend(str(d) for d in dims)
    lines.extend(str(v) for v in values)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_load_image_flips_y_and_finds_obstacles(tmp_path):
    img = Image.new("L", (4, 3), 255)
    img.putpixel((0, 0), 0)
    img.putpixel((3, 2), 0)
    img.putpixel((1, 1), 128)
    path = tmp_path / "map.png"
    img.save(path)

    grid = NDGridMap()
    load_map_from_image(path, grid)
    assert grid.dimsize == (4, 3)
    top_left = grid.coord2idx((0, 2))
    bottom_right = grid.coord2idx((3, 0))
    assert grid[top_left].is_occupied()
    assert grid[bottom_right].is_occupied()
    assert set(grid.occupied) == {top_left, bottom_right}
    assert grid[grid.coord2idx((1, 1))].occupancy == pytest.approx(128 / 255)
    assert grid[grid.coord2idx((2, 1))].occupancy == pytest.approx(1.0)


def test_load_rgb_image_uses_first_channel(tmp_path):
    img = Image.new("RGB", (2, 2), (255, 255, 255))
    img.putpixel((1, 1), (0, 255, 255))
    img.putpixel((0, 1), (255, 0, 0))
    path = tmp_path / "rgb.png"
    img.save(path)

    grid = NDGridMap()
    load_map_from_image(path, grid)
    assert grid[grid.coord2idx((1, 0))].is_occupied()
    assert not grid[grid.coord2idx((0, 0))].is_occupied()
    assert grid.occupied == [grid.coord2idx((1, 0))]


def test_load_text_2d(tmp_path):
    values = [1, 1, 0, 1, 0.5, 1]
    path = _write_grid(tmp_path / "map.grid", 0.25, (3, 2), values)
    grid = NDGridMap()
    result = load_map_from_text(path, grid)
    assert result is grid
    assert grid.dimsize == (3, 2)
    assert grid.leafsize == pytest.approx(0.25)
    assert [c.occupancy for c in grid] == pytest.approx(values)
    assert grid.occupied == [2]


def test_load_text_3d_then_solve(tmp_path):
    dims = (11, 11, 11)
    path = _write_grid(tmp_path / "map3d.grid", 0.5, dims, [1] * (11 ** 3))
    grid = NDGridMap()
    load_map_from_text(path, grid)
    assert len(grid) == 11 ** 3

    solver = FSM()
    solver.set_environment(grid)
    solver.set_initial_points([grid.coord2idx((5, 5, 5))])
    solver.compute()
    assert grid[grid.coord2idx((5, 5, 5))].value == 0.0
    assert grid[grid.coord2idx((8, 5, 5))].value == pytest.approx(1.5)
    assert grid[grid.coord2idx((5, 5, 0))].value == pytest.approx(2.5)


def test_load_text_dimension_mismatch(tmp_path):
    path = _write_grid(tmp_path / "map3d.grid", 1, (2, 2, 2), [1] * 8)
    grid = NDGridMap((4, 4))
    with pytest.raises(ValueError):
        load_map_from_text(path, grid)


def test_load_text_missing_values(tmp_path):
    path = _write_grid(tmp_path / "short.grid", 1, (3, 3), [1] * 5)
    with pytest.raises(ValueError):
        load_map_from_text(path, NDGridMap())


def test_load_text_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_map_from_text(tmp_path / "absent.grid", NDGridMap())