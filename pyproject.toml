[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "libdesk"
version = "0.1.0"
description = "A small library desk: books, readers and loans kept in SQLite, with a command-line front end"
requires-python = ">=3.10"
dependencies = []
keywords = ["library", "books", "loans", "sqlite", "catalogue"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
libdesk = "libdesk.cli:main"

[tool.setuptools.packages.find]
include = ["libdesk*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
