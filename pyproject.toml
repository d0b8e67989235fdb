[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wadkit"
version = "0.1.0"
description = "Read classic WAD archives: lumps, names, levels, sector lighting, images, textures and atlases."
requires-python = ">=3.11"
dependencies = []
keywords = ["wad", "doom", "lump", "level", "texture", "atlas", "game-data"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wadkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
