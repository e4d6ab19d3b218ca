[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "citygen"
version = "0.1.0"
description = "Procedural city road networks, lanes, parking slots and planar geometry helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["city", "procedural", "road-network", "simulation", "parking", "geometry", "perlin"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["citygen*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
