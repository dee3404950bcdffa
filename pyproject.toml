[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitobj"
version = "2.0.0"
description = "Read objects from Git packfiles and pack indexes, and encode and decode tag objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "packfile", "pack-index", "object-database", "delta", "tag"]
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
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitobj"]

[tool.hatch.build.targets.sdist]
include = ["gitobj", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
