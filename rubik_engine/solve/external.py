# rubik_engine/solve/external.py
from __future__ import annotations

import logging
from typing import Callable

from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.logic.algorithm import Algorithm
from rubik_engine.logic.moves import parse_algorithm, parse_sequence
from rubik_engine.solve.facelets import SOLVED_FACELETS, to_facelets, validate_facelets

_LOGGER = logging.getLogger(__name__)

# Recibe 54 facelets (URFDLB) y devuelve movimientos separados por espacios.
SearchFunction = Callable[[str], str]


def kociemba_search(facelets: str) -> str:
    """Busca una solución corta con el algoritmo de dos fases de Kociemba.

    El paquete `kociemba` es opcional (extra "optimal") y se importa recién aquí
    porque carga tablas grandes.

    Raises:
        InvalidInputError: Si la cadena de facelets es inválida.
        ValueError: Si kociemba rechaza el estado (cubo imposible).
    """
    facelets = validate_facelets(facelets)
    if facelets == SOLVED_FACELETS:
        return ""
    import kociemba

    return kociemba.solve(facelets)


def find_solution(facelets: str, search: SearchFunction = kociemba_search) -> str:
    """Ejecuta la búsqueda y valida que la respuesta sea notación estándar.

    Returns:
        La solución normalizada ("" si el cubo ya está resuelto).

    Raises:
        InvalidInputError: Si la entrada o la respuesta del buscador son inválidas.
    """
    facelets = validate_facelets(facelets)
    raw = search(facelets)
    moves = parse_sequence(raw or "")
    _LOGGER.info("Solución externa de %d movimientos", len(moves))
    return " ".join(moves)


def solve_externally(geometry: CubeGeometry, search: SearchFunction = kociemba_search) -> Algorithm:
    """Versión sincrónica: facelets -> búsqueda -> Algorithm para el motor."""
    return parse_algorithm(find_solution(to_facelets(geometry), search), 3)
