[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hybridpqc"
version = "0.0.1"
description = "Pure-Python SPHINCS+-SHAKE-256f-simple signatures, Ed25519 signing and NaCl box primitives"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "post-quantum",
    "sphincs+",
    "hash-based signatures",
    "ed25519",
    "curve25519",
    "salsa20",
    "poly1305",
    "nacl",
]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["hybridpqc"]

[tool.hatch.build.targets.sdist]
include = [
    "hybridpqc",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
