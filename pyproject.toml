[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clipfetch"
version = "0.1.0"
description = "Extract media streams from video and image sites and download them, with resumable, chunked and multi-threaded transfers."
requires-python = ">=3.10"
keywords = ["video", "download", "extractor", "m3u8", "media", "aria2"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "requests>=2.28",
    "beautifulsoup4>=4.11",
    "termcolor>=2.0",
    "tqdm>=4.64",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["clipfetch"]

[tool.hatch.build.targets.sdist]
include = ["clipfetch", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
