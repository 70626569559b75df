[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "framebus"
version = "0.1.0"
description = "Simulated master/slave memory bus with CRC-16 framing, noise injection and retries, plus a BST/AVL tree command runner"
requires-python = ">=3.10"
dependencies = []
keywords = ["bus", "simulation", "crc16", "framing", "avl", "binary-search-tree"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
framebus = "framebus.cli:main"
framebus-tree = "framebus.tree:main"

[tool.hatch.build.targets.wheel]
packages = ["framebus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
