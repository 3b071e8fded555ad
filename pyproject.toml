[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "autolaunch"
version = "0.1.0"
description = "Application settings and project snapshot management for launching repositories locally"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = ["launcher", "snapshots", "settings", "projects", "sandbox"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["autolaunch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
