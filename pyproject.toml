[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "angspec"
version = "0.1.0"
description = "Angular spectrum propagation of 2D complex wavefronts, with a streaming model of a tiled FFT pipeline"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "angular spectrum",
    "wave propagation",
    "optics",
    "fft",
    "wavefront",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
angspec = "angspec.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["angspec"]

[tool.pytest.ini_options]
addopts = "-ra"
