# rubik_engine/solve/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from rubik_engine.core.errors import InvariantViolation

if TYPE_CHECKING:
    from rubik_engine.engine.turn_engine import TurnEngine


class SolverStrategy(ABC):
    """Estrategia de resolución reactiva.

    El motor llama a `start()` una vez y a `update()` cada vez que termina el
    algoritmo que la estrategia le entregó. La estrategia inspecciona la
    geometría, decide el siguiente algoritmo y lo pasa con `engine.set_algorithm`,
    o llama a `engine.finish_solving()` cuando termina.
    """

    name: str = "base"

    @abstractmethod
    def start(self, engine: TurnEngine) -> bool:
        """Comienza a resolver. False si la estrategia no puede resolver este cubo."""

    @abstractmethod
    def update(self, engine: TurnEngine) -> None:
        """Decide el siguiente paso después de completar un algoritmo."""

    def cancel(self) -> None:
        pass


class UnsupportedSolver(SolverStrategy):
    """Estrategia para cubos que todavía no se saben resolver."""

    name = "unsupported"

    def __init__(self, reason: Optional[str] = None) -> None:
        self.reason = reason or "Solo se pueden resolver cubos de 3x3x3"

    def start(self, engine: TurnEngine) -> bool:
        engine.send_message(self.reason)
        return False

    def update(self, engine: TurnEngine) -> None:
        raise InvariantViolation("UnsupportedSolver nunca entrega algoritmos")
