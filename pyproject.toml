[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boardplay"
version = "0.1.0"
description = "Two-player board games with a shared board interface and minimax, solver, rollout and MCTS bots"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "board games",
    "minimax",
    "mcts",
    "game solver",
    "ataxx",
    "connect4",
    "tic-tac-toe",
    "ultimate tic-tac-toe",
    "oware",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["boardplay"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
