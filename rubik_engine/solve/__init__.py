from __future__ import annotations

from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.solve.base import SolverStrategy, UnsupportedSolver
from rubik_engine.solve.layer_solver import LayerSolver


def select_solver(geometry: CubeGeometry) -> SolverStrategy:
    """Estrategia de resolución para la geometría dada."""
    if geometry.is_3x3x3:
        return LayerSolver()
    return UnsupportedSolver()


__all__ = ["LayerSolver", "SolverStrategy", "UnsupportedSolver", "select_solver"]
