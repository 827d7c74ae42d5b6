"""Benchmark configuration read from INI-style CFG files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, TypeVar, Union

T = TypeVar("T")

PathLike = Union[str, "os.PathLike[str]"]

KNOWN_SOLVERS = (
    "fmm", "fmmstar", "fmmfib", "fmmfibstar", "sfmm", "sfmmstar",
    "gmm", "fim", "ufmm", "fsm", "lsm", "ddqm",
)

_SOLVERS_PREFIX = "solvers."
_REQUIRED = ("problem.start",)


def _registered_defaults(name: str) -> dict[str, str | None]:
    """Registered options and their defaults; None means no default."""
    return {
        "grid.file": None,
        "grid.text": None,
        "grid.ndims": "2",
        "grid.cell": "FMCell",
        "grid.dimsize": "200,200",
        "grid.leafsize": "1",
        "problem.start": None,
        "problem.goal": "nan",
        "benchmark.name": name,
        "benchmark.runs": "10",
        "benchmark.savegrid": "0",
    }


def _parse_lines(lines: Iterator[str], source: str) -> Iterator[tuple[str, str]]:
    """Yield ``(section.key, value)`` pairs from CFG lines."""
    prefix = ""
    for number, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip()
            prefix = f"{section}." if section else ""
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"{source}:{number}: invalid syntax: {raw.rstrip()!r}")
        yield prefix + key, value.strip()


class BenchmarkConfig:
    """Options of a benchmark read from a CFG file.

    Registered options (grid, problem and benchmark sections) are kept as
    strings in ``options``, defaults included. Entries of the ``solvers``
    section naming a known solver are kept, in file order, in
    ``solver_names`` with their constructor parameters in ``ctor_params``.
    """

    def __init__(self, filename: PathLike | None = None) -> None:
        self.options: dict[str, str] = {}
        self.solver_names: list[str] = []
        self.ctor_params: list[str] = []
        self.path: Path | None = None
        if filename is not None:
            self.read_options(filename)

    @property
    def solvers(self) -> list[tuple[str, str]]:
        """Pairs of solver name and constructor parameters, in file order."""
        return list(zip(self.solver_names, self.ctor_params))

    def read_options(self, filename: PathLike) -> None:
        """Parse the CFG file, replacing any options read before."""
        path = Path(filename)
        try:
            with open(path, encoding="utf-8") as handle:
                entries = list(_parse_lines(iter(handle), str(path)))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Unable to open file: {filename}") from exc

        self.path = path.absolute()
        defaults = _registered_defaults(path.stem)

        given: dict[str, str] = {}
        solver_names: list[str] = []
        ctor_params: list[str] = []
        for key, value in entries:
            if key in defaults:
                if key in given:
                    raise ValueError(f"option '{key}' cannot be specified more than once")
                given[key] = value
                continue
            lowered = key.lower()
            if lowered.startswith(_SOLVERS_PREFIX):
                solver = lowered[len(_SOLVERS_PREFIX):]
                if solver in KNOWN_SOLVERS:
                    solver_names.append(solver)
                    ctor_params.append(value)

        for key in _REQUIRED:
            if key not in given:
                raise ValueError(f"the option '{key}' is required but missing")

        options = {k: v for k, v in defaults.items() if v is not None}
        options.update(given)

        self.options = options
        self.solver_names = solver_names
        self.ctor_params = ctor_params

    def get_value(self, key: str, kind: Callable[[str], T] = str) -> T:
        """Return option ``key`` converted with ``kind``; a missing key converts 0."""
        if key in self.options:
            return kind(self.options[key])
        return kind(0)

    def split_and_cast(self, text: str, count: int, kind: Callable[[str], T] = int) -> tuple[T, ...]:
        """Split comma-separated ``text`` and convert its first ``count`` items."""
        items = text.split(",")
        if len(items) < count:
            raise ValueError(f"expected {count} comma-separated values in {text!r}")
        return tuple(kind(item) for item in items[:count])

    def split_params(self, text: str) -> list[str]:
        """Split comma-separated constructor parameters into strings."""
        if not text:
            return []
        return text.split(",")