[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unifiedcatalog"
version = "0.1.0"
description = "Parser for the Catalog chunk of macOS Unified Log tracev3 files"
requires-python = ">=3.10"
dependencies = []
keywords = ["macos", "unified log", "tracev3", "catalog", "forensics", "parser"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["unifiedcatalog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
