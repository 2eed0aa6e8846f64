[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zkmerkle"
version = "0.1.0"
description = "Fixed-depth Merkle trees (full and sparse) and the Poseidon hash over prime fields"
requires-python = ">=3.10"
dependencies = []
keywords = ["merkle", "merkle-tree", "merkle-proof", "poseidon", "hash", "zero-knowledge"]
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
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pycryptodome",
]

[tool.hatch.build.targets.wheel]
packages = ["zkmerkle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
