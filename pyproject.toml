[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hlsprobe"
version = "0.1.0"
description = "Continuously check that the segments of an HLS stream can be fetched"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["hls", "m3u8", "streaming", "monitoring", "playlist"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
hlsprobe = "hlsprobe.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hlsprobe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
