[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fastmarch"
version = "0.1.0"
description = "Eikonal solvers on n-dimensional grid maps: fast iterative, untidy fast marching and sweeping methods"
requires-python = ">=3.10"
keywords = ["eikonal", "fast marching", "fast sweeping", "fast iterative method", "grid map"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["fastmarch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
