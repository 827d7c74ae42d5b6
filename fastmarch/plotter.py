"""Rendering of 2D grids, their values and paths into images.

Grids use X-Y coordinates with (0, 0) at the bottom left, so the Y axis is
flipped: the top left pixel of every image is the top left cell of the map.
Every function returns a PIL image whose ``info["title"]`` holds its title.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np
from PIL import Image

from fastmarch.grid import FMState, NDGridMap

Path2D = Sequence[Sequence[float]]

_JET_CONTROL = np.array(
    [[0, 0, 255], [0, 255, 255], [255, 255, 0], [255, 0, 0]], dtype=float
)


def jet_lut() -> np.ndarray:
    """Return the 256-entry jet colour map as a (256, 3) array of uint8."""
    lut = np.zeros((256, 3), dtype=np.uint8)
    last = len(_JET_CONTROL) - 1
    for i in range(256):
        t = i * last / 255
        k = min(int(math.floor(t)), last - 1)
        frac = t - k
        colour = _JET_CONTROL[k] * (1 - frac) + _JET_CONTROL[k + 1] * frac
        lut[i] = colour.astype(np.uint8)
    return lut


def _check_2d(grid: NDGridMap) -> tuple[int, int]:
    if grid.ndims != 2:
        raise ValueError(f"only 2D grids can be plotted, got {grid.ndims} dimensions")
    width, height = grid.dimsize
    return width, height


def _layout(grid: NDGridMap, value: Callable) -> np.ndarray:
    """Return per-cell values as an image-ordered (height, width) float array."""
    width, height = _check_2d(grid)
    values = np.array([value(cell) for cell in grid], dtype=float)
    return values.reshape(height, width)[::-1].copy()


def _to_uint8(values: np.ndarray) -> np.ndarray:
    cleaned = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(cleaned, 0, 255).astype(np.uint8)


def _apply_lut(values: np.ndarray) -> np.ndarray:
    lut = jet_lut()
    with np.errstate(invalid="ignore"):
        valid = np.isfinite(values) & (values >= 0) & (values < 256)
    indices = np.where(valid, values, 0).astype(int)
    coloured = lut[indices]
    coloured[~valid] = 0
    return coloured


def _image(pixels: np.ndarray, title: str) -> Image.Image:
    img = Image.fromarray(np.ascontiguousarray(pixels))
    img.info["title"] = title
    return img


def _pixel(point: Sequence[float], width: int, height: int) -> tuple[int, int]:
    col = int(point[0])
    row = height - int(point[1]) - 1
    if not (0 <= col < width and 0 <= row < height):
        raise IndexError(f"path point {tuple(point)!r} is outside the grid")
    return row, col


def _free(grid: NDGridMap) -> np.ndarray:
    return _layout(grid, lambda c: 0.0 if c.is_occupied() else 255.0)


def _occupancy(grid: NDGridMap) -> np.ndarray:
    return _layout(grid, lambda c: c.occupancy * 255)


def _normalised_values(grid: NDGridMap) -> np.ndarray:
    max_val = grid.max_value()
    values = _layout(grid, lambda c: c.value)
    with np.errstate(divide="ignore", invalid="ignore"):
        return values / max_val * 255


def _draw_path(rgb: np.ndarray, path: Path2D, channels: Sequence[int]) -> None:
    height, width = rgb.shape[:2]
    for point in path:
        row, col = _pixel(point, width, height)
        for channel in channels:
            rgb[row, col, channel] = 0


def map_image(grid: NDGridMap, name: str = "") -> Image.Image:
    """Binary map: free cells white, obstacles black."""
    return _image(_to_uint8(_free(grid)), name + " Map")


def occupancy_image(grid: NDGridMap, name: str = "") -> Image.Image:
    """Grey-level map of cell occupancies."""
    return _image(_to_uint8(_occupancy(grid)), name + " Occupancy Map")


def arrival_times_image(grid: NDGridMap, name: str = "") -> Image.Image:
    """Cell values scaled to the largest finite value and coloured with the jet map."""
    return _image(_apply_lut(_normalised_values(grid)), name + " Grid values")


def map_path_image(grid: NDGridMap, path: Path2D, name: str = "") -> Image.Image:
    """Binary map with the path drawn in red."""
    rgb = np.repeat(_to_uint8(_free(grid))[:, :, None], 3, axis=2)
    _draw_path(rgb, path, (1, 2))
    return _image(rgb, name + " Map and Path")


def occupancy_path_image(grid: NDGridMap, path: Path2D, name: str = "") -> Image.Image:
    """Occupancy map with the path drawn in red."""
    rgb = np.repeat(_to_uint8(_occupancy(grid))[:, :, None], 3, axis=2)
    _draw_path(rgb, path, (1, 2))
    return _image(rgb, name + " Map and Path")


def map_paths_image(grid: NDGridMap, paths: Sequence[Path2D], name: str = "") -> Image.Image:
    """Binary map with up to two paths: the first in blue, the second in red."""
    if len(paths) > 2:
        raise ValueError(f"at most 2 paths can be drawn, got {len(paths)}")
    rgb = np.repeat(_to_uint8(_free(grid))[:, :, None], 3, axis=2)
    for j, path in enumerate(paths):
        _draw_path(rgb, path, (j, j + 1))
    return _image(rgb, name + " Map and Paths")


def arrival_times_path_image(grid: NDGridMap, path: Path2D, name: str = "") -> Image.Image:
    """Jet-coloured cell values with the path drawn at the top of the scale."""
    values = _normalised_values(grid)
    height, width = values.shape
    for point in path:
        row, col = _pixel(point, width, height)
        values[row, col] = 255
    return _image(_apply_lut(values), name + " Values and Path")


_STATE_LEVELS = {FMState.FROZEN: 0, FMState.NARROW: 127, FMState.OPEN: 255}


def states_image(grid: NDGridMap, name: str = "") -> Image.Image:
    """Grey-level map of propagation states: frozen black, narrow grey, open white."""
    levels = _layout(grid, lambda c: _STATE_LEVELS[c.state])
    return _image(levels.astype(np.uint8), name + "FMStates")