[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jupiter"
version = "0.0.1"
description = "Formatting helpers, sliding averages and a reloadable YAML configuration for low-latency services."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["configuration", "yaml", "metrics", "average", "formatting", "durations"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["jupiter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
