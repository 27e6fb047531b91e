[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "burneroperator"
version = "0.1.0"
description = "Reconcilers for GrpcBurner, BurnerJob and ObservabilityConfig resources over an in-memory object store"
requires-python = ">=3.10"
dependencies = []
keywords = ["operator", "reconciler", "controller", "grpc", "load-testing", "finalizer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["burneroperator"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
