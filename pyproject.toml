[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ntfsparse"
version = "0.1.0"
description = "Read-only parsing of NTFS on-disk structures: records, index nodes, strings, timestamps and volume values."
requires-python = ">=3.10"
dependencies = []
keywords = ["ntfs", "filesystem", "forensics", "parser", "b-tree", "index"]
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
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["ntfsparse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
