[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "moveguard"
version = "0.1.0"
description = "Static safety checks for Move modules: reference leaks, state transitions, unsafe transfers, shared-object access and trust boundaries"
requires-python = ">=3.10"
dependencies = []
keywords = ["move", "sui", "static-analysis", "smart-contracts", "safety", "references"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["moveguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
