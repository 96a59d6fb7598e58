[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tdigestpy"
version = "0.1.0"
description = "Merging t-digest: compact streaming sketch for quantiles, CDF and trimmed means"
requires-python = ">=3.10"
dependencies = []
keywords = ["t-digest", "quantile", "percentile", "histogram", "streaming", "sketch", "statistics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[project.scripts]
tdigestpy-example = "tdigestpy.example:main"

[tool.hatch.build.targets.wheel]
packages = ["tdigestpy"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
files = ["tdigestpy"]
