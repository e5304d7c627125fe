[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cellmap"
version = "0.1.0"
description = "Map cell ids of an adaptively refined Cartesian grid to their refinement level, indices and relatives."
requires-python = ">=3.10"
dependencies = []
keywords = ["amr", "grid", "octree", "mesh", "refinement", "cartesian"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cellmap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
