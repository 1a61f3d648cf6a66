[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "repeateratlas"
version = "0.1.0"
description = "Amateur radio repeater atlas: locators, geocoding, service models, CHIRP export and map views"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = [
    "ham radio",
    "amateur radio",
    "repeater",
    "maidenhead",
    "chirp",
    "geocoding",
    "nominatim",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["repeateratlas"]

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
warn_redundant_casts = true
