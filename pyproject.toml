[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emu8086"
version = "0.1.0"
description = "8086 assembler building blocks: expression evaluation, operand matching, a flat memory machine and editor helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["8086", "x86", "assembler", "expression", "modrm", "intel", "education"]
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
    "Topic :: Software Development :: Assemblers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["emu8086"]

[tool.hatch.build.targets.sdist]
include = ["emu8086", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
