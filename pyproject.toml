[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ptlib"
version = "2.1.1"
description = "Portable utility types: string conversions, sorted lists, date arithmetic, variants, output streams and thread synchronisation"
requires-python = ">=3.10"
dependencies = []
keywords = ["strings", "datetime", "variant", "streams", "threads", "rwlock", "semaphore"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ptlib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
