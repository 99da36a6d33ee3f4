[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bytetorrent"
version = "0.1.0"
description = "Chunked peer-to-peer file sharing: split a blob into chunks and track pulling it from a swarm of peers in segments"
requires-python = ">=3.10"
dependencies = []
keywords = ["p2p", "file-sharing", "chunks", "swarm", "torrent"]
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
    "Topic :: Communications :: File Sharing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bytetorrent"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
