[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tablecatalog"
version = "0.1.0"
description = "A small in-memory table store with a system catalog, relationships and a plain-text file format"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "catalog", "schema", "relationships", "serialization"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
tablecatalog-demo = "tablecatalog.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["tablecatalog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
