[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtin-terrain"
version = "0.2.0"
description = "Right-triangulated irregular network (RTIN) terrain meshes built from 16-bit heightmaps"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["terrain", "rtin", "heightmap", "mesh", "triangulation", "level-of-detail", "orbit-camera"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Visualization",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pillow",
]

[tool.hatch.build.targets.wheel]
packages = ["rtin_terrain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
