[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chute_kun"
version = "0.1.0"
description = "TaskChute-style day planning: tasks, estimates, actual time tracking, TOML snapshots and text-mode rendering"
requires-python = ">=3.11"
keywords = ["taskchute", "todo", "planning", "time-tracking", "tui"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chute_kun"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
