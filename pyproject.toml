[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "microtensor"
version = "0.1.0"
description = "A small scalar autograd engine with tensors, layers, losses, optimizers and learning-rate schedules."
requires-python = ">=3.10"
keywords = ["autograd", "neural-network", "deep-learning", "backpropagation", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
microtensor-train = "microtensor.train:main"

[tool.hatch.build.targets.wheel]
packages = ["microtensor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
