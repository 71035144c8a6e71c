[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tokenfactory"
version = "0.1.0"
description = "Token factory module: create, mint, burn and administer permissionless denoms"
requires-python = ">=3.10"
dependencies = []
keywords = ["tokenfactory", "denom", "bech32", "tokens", "keeper"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tokenfactory"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
