[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rapbee"
version = "0.1.0"
description = "A small UCI chess engine with mailbox move generation and alpha-beta search"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "uci", "engine", "alpha-beta", "fen"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rapbee = "rapbee.uci:main"

[tool.hatch.build.targets.wheel]
packages = ["rapbee"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
