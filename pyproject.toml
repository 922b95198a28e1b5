[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xsqz"
version = "0.1.0"
description = "Word Aligned Hybrid bit-vector encoding and haplotype phasing helpers for genotype matrices"
requires-python = ">=3.10"
dependencies = []
keywords = ["genomics", "genotype", "phasing", "pbwt", "wah", "bit-vector", "compression"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xsqz"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
