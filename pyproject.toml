[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bicgen"
version = "0.1.0"
description = "Generate the C sources of a syntax tree from a language description, with supporting tree tooling"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "code-generation",
    "c",
    "syntax-tree",
    "language-description",
    "preprocessor",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bicgen-gentypes = "bicgen.codegen:main_gentypes"
bicgen-gentree = "bicgen.codegen:main_gentree"
bicgen-gengc = "bicgen.codegen:main_gengc"
bicgen-gendump = "bicgen.codegen:main_gendump"

[tool.hatch.build.targets.wheel]
packages = ["bicgen"]

[tool.hatch.build.targets.sdist]
include = ["bicgen", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true
