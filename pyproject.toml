[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slotgraph"
version = "0.1.0"
description = "Core data structures for slotted e-graphs: slots, slot maps, binder-aware languages, permutation groups and patterns"
requires-python = ">=3.10"
dependencies = []
keywords = ["e-graph", "equality saturation", "term rewriting", "binders", "permutation group", "s-expression"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["slotgraph"]

[tool.pytest.ini_options]
addopts = "-ra"
