# rubik_engine/app/controller.py
from __future__ import annotations

import logging
import random
from typing import Optional

from PySide6.QtCore import QObject, Signal

from rubik_engine.app.solve_worker import ExternalSolveWorker
from rubik_engine.app.ticker import CubeTicker
from rubik_engine.config import EngineConfig
from rubik_engine.core.errors import InvalidInputError
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.engine.turn_engine import TurnEngine
from rubik_engine.logic.scramble import generate_scramble
from rubik_engine.solve.external import SearchFunction, kociemba_search
from rubik_engine.solve.facelets import to_facelets

_LOGGER = logging.getLogger(__name__)


class CubeController(QObject):
    """Une el motor de giros con Qt: ticks por timer, señales y búsqueda externa.

    El controlador es el listener del motor y reemite cada notificación como
    señal. La búsqueda externa corre en un `ExternalSolveWorker`; su resultado
    llega por señal al hilo del controlador y se aplica con `submit_solution`.

    Signals:
        rotation_completed(): Terminó un giro.
        message(str): Texto para mostrar al usuario.
        solved(): El cubo quedó resuelto.
        algorithm_completed(): Terminó un algoritmo o una resolución.
        solution_found(str): La búsqueda externa devolvió una solución.
        search_failed(str): La búsqueda externa falló.
    """

    rotation_completed = Signal()
    message = Signal(str)
    solved = Signal()
    algorithm_completed = Signal()
    solution_found = Signal(str)
    search_failed = Signal(str)

    def __init__(
        self,
        geometry: Optional[CubeGeometry] = None,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        search: SearchFunction = kociemba_search,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.config: EngineConfig = config or EngineConfig()
        self.engine = TurnEngine(geometry, self.config, rng, listener=self)
        self.ticker = CubeTicker(self.engine, self.config.tick_interval_ms, self)
        self.search: SearchFunction = search
        self.auto_apply: bool = True
        self.pending_solution: Optional[str] = None
        self._solve_worker: Optional[ExternalSolveWorker] = None

    # --------------------------
    # CubeListener
    # --------------------------
    def on_rotation_completed(self) -> None:
        self.rotation_completed.emit()

    def on_message(self, text: str) -> None:
        self.message.emit(text)

    def on_solved(self) -> None:
        self.solved.emit()

    def on_algorithm_completed(self) -> None:
        self.algorithm_completed.emit()

    # --------------------------
    # Acciones
    # --------------------------
    def start(self) -> None:
        self.ticker.start()

    def scramble(self, count: Optional[int] = None) -> bool:
        """Nueva partida: cubo resuelto y mezcla instantánea."""
        return self.engine.new_game(self.config.scramble_length if count is None else count)

    def scramble_notation(self, count: Optional[int] = None) -> str:
        """Nueva partida mezclada con una secuencia en notación estándar.

        Returns:
            La secuencia aplicada, por ejemplo "R U' F2 L D2".
        """
        text = generate_scramble(
            self.config.scramble_length if count is None else count, rng=self.engine.rng
        )
        self.engine.reset()
        self.engine.apply_sequence(text)
        return text

    def play_sequence(self, text: str) -> bool:
        try:
            return self.engine.play_sequence(text)
        except InvalidInputError as exc:
            self.message.emit(str(exc))
            return False

    def undo(self) -> bool:
        return self.engine.undo()

    def redo(self) -> bool:
        return self.engine.redo()

    def solve(self) -> bool:
        """Resuelve con el método de capas (animado por los ticks)."""
        return self.engine.solve()

    def cancel_solving(self) -> bool:
        return self.engine.cancel_solving()

    # --------------------------
    # Búsqueda externa
    # --------------------------
    def is_searching(self) -> bool:
        return self._solve_worker is not None and self._solve_worker.isRunning()

    def find_optimal_solution(self, auto_apply: bool = True) -> bool:
        """Lanza la búsqueda externa en un hilo aparte.

        Args:
            auto_apply: Si True, la solución se ejecuta apenas llega.

        Returns:
            True si la búsqueda comenzó.
        """
        if self.is_searching():
            self.message.emit("Ya hay una búsqueda en curso")
            return False
        if self.engine.is_busy:
            self.message.emit("Esperá a que termine el giro actual")
            return False
        if not self.engine.geometry.is_3x3x3:
            self.message.emit("La búsqueda externa solo resuelve cubos de 3x3x3")
            return False

        self.auto_apply = auto_apply
        self.pending_solution = None
        facelets = to_facelets(self.engine.geometry)
        _LOGGER.info("Buscando solución externa para %s", facelets)

        self._solve_worker = ExternalSolveWorker(facelets, self.search)
        self._solve_worker.solution_ready.connect(self._on_solution_ready)
        self._solve_worker.error.connect(self._on_search_error)
        self._solve_worker.finished.connect(self._on_search_thread_finished)
        self._solve_worker.start()
        return True

    def apply_pending_solution(self) -> bool:
        if self.pending_solution is None:
            return False
        try:
            applied = self.engine.submit_solution(self.pending_solution)
        except InvalidInputError as exc:
            self.search_failed.emit(str(exc))
            return False
        if applied:
            self.pending_solution = None
        return applied

    def _on_solution_ready(self, moves: str) -> None:
        self.pending_solution = moves
        self.solution_found.emit(moves)
        if self.auto_apply:
            self.apply_pending_solution()

    def _on_search_error(self, msg: str) -> None:
        _LOGGER.error("Error en la búsqueda externa:\n%s", msg)
        self.search_failed.emit(msg)

    def _on_search_thread_finished(self) -> None:
        if self._solve_worker is not None:
            self._solve_worker.deleteLater()
            self._solve_worker = None

    def cancel_search(self) -> None:
        if self.is_searching():
            self._solve_worker.requestInterruption()
            self._solve_worker.wait(300)
        self.pending_solution = None

    def shutdown(self) -> None:
        """Detiene el timer y espera al hilo de búsqueda si sigue activo."""
        self.ticker.stop()
        if self.is_searching():
            self._solve_worker.requestInterruption()
            self._solve_worker.wait(1500)
