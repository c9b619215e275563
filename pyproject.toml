[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadkit"
version = "0.1.0"
description = "Headless 2D game simulation: platformer physics, particle emitters and small game models"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "physics", "platformer", "particles", "simulation", "game-of-life", "snake", "asteroids"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["quadkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
