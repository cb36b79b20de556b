[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "synthie"
version = "0.1.0"
description = "A score-driven software synthesizer that renders XML scores and test tones to 16-bit WAVE files."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "synthesizer",
    "audio",
    "wave",
    "additive synthesis",
    "chorus",
    "flange",
    "noise gate",
]
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
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
synthie = "synthie.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["synthie"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
