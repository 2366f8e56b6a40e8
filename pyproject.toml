[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snnref"
version = "0.1.0"
description = "Reference computations and helpers for a spiking neural network accelerator simulator"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "spiking neural network",
    "accelerator",
    "convolution",
    "pooling",
    "sparse matrix",
    "reference model",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["snnref"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
