"""Motor de cubos de Rubik NxNxN con resolución por capas."""

__version__ = "0.1.0"
