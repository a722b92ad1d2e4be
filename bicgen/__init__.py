"""Generate a syntax tree's C sources from a language description, with tree, typename, hashing, preprocessing and completion helpers."""

__version__ = "0.1.0"