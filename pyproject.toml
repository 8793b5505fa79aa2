[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pcstream"
version = "0.1.0"
description = "Point cloud streaming tools: bandwidth estimation, level-of-detail selection, hull meshes and DASH manifests"
requires-python = ">=3.10"
dependencies = [
    "httpx[http2]",
]
keywords = [
    "point cloud",
    "streaming",
    "dash",
    "mpd",
    "level of detail",
    "adaptive bitrate",
    "mesh",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
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

[project.optional-dependencies]
test = [
    "pytest",
    "respx",
]

[project.scripts]
genmpd = "pcstream.mpd:main"

[tool.hatch.build.targets.wheel]
packages = ["pcstream"]

[tool.hatch.build.targets.sdist]
include = [
    "pcstream",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
