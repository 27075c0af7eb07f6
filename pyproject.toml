[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flowcontrib"
version = "0.1.0"
description = "Reusable activities and expression functions for flow-based integration apps"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "flow",
    "activities",
    "expression functions",
    "coercion",
    "jsonpath",
    "sql",
    "rest",
    "xml",
    "json",
]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["flowcontrib"]

[tool.pytest.ini_options]
addopts = "-ra"
