[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "safeshell"
version = "0.1.0"
description = "A small interactive shell that blocks dangerous commands, applies resource limits and keeps timing statistics"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "rlimit", "pipeline", "tee", "matrix", "validation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
safeshell = "safeshell.shell:main"
safeshell-validate = "safeshell.validator:main"

[tool.hatch.build.targets.wheel]
packages = ["safeshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
