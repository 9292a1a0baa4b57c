[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quamina"
version = "0.1.0"
description = "Byte-driven finite automata for matching event field values against exact, prefix and shell-style patterns"
requires-python = ">=3.10"
dependencies = []
keywords = ["pattern-matching", "automaton", "dfa", "nfa", "events"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["quamina"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
