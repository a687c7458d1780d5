[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rsbits"
version = "1.6.2"
description = "Succinct bit vectors with fast rank and select queries."
requires-python = ">=3.10"
dependencies = []
keywords = ["succinct", "bitvector", "rank", "select", "data-structures"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rsbits"]

[tool.pytest.ini_options]
addopts = "-ra"
