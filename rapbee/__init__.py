"""A small UCI chess engine: board, evaluation, search and UCI front end."""

__version__ = "0.1.0"
__all__ = ["__version__"]