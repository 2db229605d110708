[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ringil"
version = "0.1.0"
description = "Perception events, object tracking, face alignment helpers and swarm message buffering for autonomous drones."
requires-python = ">=3.11"
keywords = [
    "drone",
    "perception",
    "object-tracking",
    "bytetrack",
    "kalman-filter",
    "face-alignment",
    "swarm",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy>=1.24",
    "pillow>=10.0",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
ringil-bridge = "ringil.bridge:main"

[tool.hatch.build.targets.wheel]
packages = ["ringil"]

[tool.hatch.build.targets.sdist]
include = ["ringil", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
