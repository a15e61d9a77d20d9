[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cmdbuf"
version = "0.1.0"
description = "Command buffers: run commands on abstract machines and read their output as streams"
requires-python = ">=3.10"
dependencies = []
keywords = ["command", "shell", "buffer", "pipeline", "stat", "directory-listing"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cmdbuf"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 79
target-version = "py310"
