[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "karaoke_cdg"
version = "0.1.0"
description = "Karaoke lyrics tooling: timed lyrics parsing, validation, highlighting and editing, time adjustment, text encodings and new-version checks."
requires-python = ">=3.10"
dependencies = []
keywords = ["karaoke", "lyrics", "lrc", "timing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Text Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["karaoke_cdg"]

[tool.pytest.ini_options]
addopts = "-ra"
