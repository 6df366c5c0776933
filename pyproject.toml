[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbtools"
version = "0.1.0"
description = "Game Boy cartridge mappers, ROM header inspection, joypad input and band-limited sound synthesis"
requires-python = ">=3.10"
dependencies = []
keywords = ["game boy", "emulator", "mbc", "rom header", "sound", "blip buffer"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gbtools = "gbtools.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gbtools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
