# rubik_engine/app/solve_worker.py
from __future__ import annotations

import traceback

from PySide6.QtCore import QThread, Signal

from rubik_engine.solve.external import SearchFunction, find_solution, kociemba_search


class ExternalSolveWorker(QThread):
    """Hilo de trabajo para buscar una solución externa sin bloquear los ticks.

    Trabaja sobre una copia de las facelets tomada en el hilo de los ticks; el
    resultado vuelve por señal y se aplica allá como una sola operación.

    Signals:
        solution_ready(str): Movimientos en notación estándar ("" si ya está resuelto).
        error(str): Traceback si la búsqueda falla.
    """

    solution_ready = Signal(str)
    error = Signal(str)

    def __init__(self, facelets: str, search: SearchFunction = kociemba_search) -> None:
        """Crea el worker.

        Args:
            facelets: Estado del cubo (54 caracteres URFDLB).
            search: Función de búsqueda; por defecto kociemba.
        """
        super().__init__()
        self.facelets: str = facelets
        self.search: SearchFunction = search

    def run(self) -> None:
        try:
            moves = find_solution(self.facelets, self.search)
        except Exception:
            self.error.emit(traceback.format_exc())
            return
        if self.isInterruptionRequested():
            return
        self.solution_ready.emit(moves)
