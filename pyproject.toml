[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jcontainers"
version = "0.1.0"
description = "Reference-counted object containers with an autorelease queue, garbage collection, script reflection and a batch JSON validator"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "containers",
    "garbage-collection",
    "reference-counting",
    "reflection",
    "code-generation",
    "json",
    "validation",
]
classifiers = [
    "Development Status :: 4 - Beta",
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

[project.scripts]
jcontainers-validate = "jcontainers.json_validator:main"

[tool.hatch.build.targets.wheel]
packages = ["jcontainers"]

[tool.pytest.ini_options]
addopts = "-ra"
