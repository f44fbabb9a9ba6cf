[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toydb"
version = "0.1.0"
description = "A small in-memory SQL database with B+ tree primary-key indexing and an interactive shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "sql", "b+tree", "in-memory", "repl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
toydb = "toydb.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["toydb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
