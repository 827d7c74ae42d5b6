"""Eikonal solvers (FIM, UFMM, FSM, LSM) on n-dimensional grid maps, with map loading, config reading and plotting."""

__version__ = "0.1.0"

__all__ = [
    "grid",
    "queues",
    "eikonal",
    "fim",
    "ufmm",
    "sweeping",
    "maploader",
    "config",
    "directional",
    "plotter",
]