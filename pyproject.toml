[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shardproxy"
version = "0.1.0"
description = "Building blocks for a MySQL sharding proxy: wire protocol helpers, charset tables, weighted replica balancing, configuration and rotating log files"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["mysql", "proxy", "sharding", "database", "load-balancing", "protocol", "yaml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["shardproxy"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
