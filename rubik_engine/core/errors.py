# rubik_engine/core/errors.py
from __future__ import annotations


class CubeError(Exception):
    """Base de los errores recuperables del motor."""


class InvalidInputError(CubeError, ValueError):
    """Entrada inválida: notación, string de facelets o parámetros mal formados."""


class OutOfRangeError(InvalidInputError, IndexError):
    """Índice de cara, eje o capa fuera de rango."""


class SolverDeadEnd(CubeError):
    """El solver no puede seguir (coloración imposible o demasiadas reentradas)."""


class InvariantViolation(AssertionError):
    """Bug interno de geometría o solver. No se recupera."""
