"""Loading of occupancy maps from images and text files into grids."""

from __future__ import annotations

import os
from typing import Union

from PIL import Image

from fastmarch.grid import NDGridMap

PathLike = Union[str, "os.PathLike[str]"]

_SINGLE_BAND_MODES = ("L", "I", "F", "I;16", "I;16B", "I;16L")


def load_map_from_image(filename: PathLike, grid: NDGridMap) -> NDGridMap:
    """Load a 2D occupancy map from an image into ``grid``.

    Pixel values (first channel) are divided by 255 to give occupancies, so
    black pixels become obstacles. The Y axis is flipped so that the bottom
    left pixel is coordinate (0, 0). The obstacle indices are stored in
    ``grid.occupied``.
    """
    with Image.open(filename) as img:
        if img.mode in _SINGLE_BAND_MODES:
            band = img.copy()
        else:
            band = img.convert("RGB").getchannel(0)
    width, height = band.size
    grid.resize((width, height))
    pixels = list(band.getdata())
    obstacles = []
    for y in range(height):
        row = pixels[y * width:(y + 1) * width]
        for x, value in enumerate(row):
            idx = width * (height - y - 1) + x
            cell = grid[idx]
            cell.occupancy = value / 255
            if cell.is_occupied():
                obstacles.append(idx)
    grid.occupied = obstacles
    return grid


def load_map_from_text(filename: PathLike, grid: NDGridMap) -> NDGridMap:
    """Load an occupancy map from a text file into ``grid``.

    The first line is a header and is ignored. It is followed by the leaf
    size, the number of dimensions, the size of each dimension and then one
    occupancy value per cell, all separated by whitespace.
    """
    with open(filename, encoding="utf-8") as handle:
        handle.readline()
        tokens = handle.read().split()
    if len(tokens) < 2:
        raise ValueError(f"{filename}: missing leaf size or number of dimensions")
    leafsize = float(tokens[0])
    ndims = int(tokens[1])
    if grid.ndims and ndims != grid.ndims:
        raise ValueError("Number of dimensions specified does not match the loaded grid.")
    if len(tokens) < 2 + ndims:
        raise ValueError(f"{filename}: missing dimension sizes")
    dimsize = [int(t) for t in tokens[2:2 + ndims]]
    grid.resize(dimsize)
    grid.leafsize = leafsize
    values = tokens[2 + ndims:]
    if len(values) < len(grid):
        raise ValueError(
            f"{filename}: expected {len(grid)} occupancy values, found {len(values)}"
        )
    obstacles = []
    for cell, token in zip(grid, values):
        cell.occupancy = float(token)
        if cell.is_occupied():
            obstacles.append(cell.index)
    grid.occupied = obstacles
    return grid