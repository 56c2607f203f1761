[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fula"
version = "0.1.0"
description = "Block-store tooling for a storage-pool node: node settings, seed storage, an in-memory block datastore, CID helpers, tracking of stored blocks and an IPFS-style RPC app."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ipfs",
    "cid",
    "multihash",
    "multibase",
    "datastore",
    "storage-pool",
    "wsgi",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fula"]

[tool.hatch.build.targets.sdist]
include = ["fula", "tests"]

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
