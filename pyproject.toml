[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jellofin"
version = "0.1.0"
description = "Media library core for a Jellyfin-compatible server: collection scanning, NFO metadata, search and item filtering"
requires-python = ">=3.10"
keywords = ["jellyfin", "media", "library", "nfo", "movies", "tv-shows"]
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
    "Topic :: Multimedia :: Video",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["jellofin"]

[tool.pytest.ini_options]
addopts = "-ra"
