# rubik_engine/logic/algorithm.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from rubik_engine.core.rotation import Axis, Direction, Rotation

_LOGGER = logging.getLogger(__name__)


class Algorithm:
    """Secuencia ordenada de giros con un cursor de lectura.

    Los pasos se entregan como copias (`Rotation.duplicate`) para que la
    animación en curso no altere la plantilla.
    """

    def __init__(self, steps: Optional[Iterable[Rotation]] = None) -> None:
        self._steps: List[Rotation] = [s.duplicate() for s in steps] if steps else []
        self._cursor: int = 0

    @classmethod
    def rotate_whole(
        cls, axis: Axis, direction: Direction, size: int, count: int = 1
    ) -> Algorithm:
        """Algoritmo que gira el cubo completo `count` veces alrededor de `axis`.

        Args:
            axis: Eje de giro.
            direction: Sentido de giro.
            size: Tamaño del cubo sobre ese eje (cantidad de capas).
            count: Cantidad de cuartos de vuelta.
        """
        algo = cls()
        for _ in range(count):
            algo.add_step(axis, direction, 0, size)
        return algo

    def add_step(
        self,
        axis: Union[Axis, Rotation],
        direction: Direction = Direction.CLOCKWISE,
        start_layer: int = 0,
        layer_count: int = 1,
    ) -> Algorithm:
        if isinstance(axis, Rotation):
            self._steps.append(axis.duplicate())
        else:
            self._steps.append(Rotation(axis, direction, start_layer, layer_count))
        return self

    def append(self, other: Algorithm) -> Algorithm:
        """Agrega todos los pasos de `other` al final."""
        for step in other._steps:
            self._steps.append(step.duplicate())
        return self

    def repeat_last_step(self) -> Algorithm:
        if not self._steps:
            _LOGGER.warning("repeat_last_step sobre un algoritmo vacío")
            return self
        self._steps.append(self._steps[-1].duplicate())
        return self

    def is_done(self) -> bool:
        return self._cursor >= len(self._steps)

    def next_step(self) -> Optional[Rotation]:
        """Devuelve una copia del siguiente paso y avanza el cursor.

        Returns:
            El giro, o None si el algoritmo ya terminó.
        """
        if self.is_done():
            _LOGGER.warning("No quedan pasos en el algoritmo")
            return None
        step = self._steps[self._cursor].duplicate()
        self._cursor += 1
        return step

    def rewind(self) -> None:
        self._cursor = 0

    def reversed(self) -> Algorithm:
        """Algoritmo inverso: pasos invertidos en orden opuesto."""
        return Algorithm(step.inverse() for step in reversed(self._steps))

    @property
    def steps(self) -> List[Rotation]:
        return [s.duplicate() for s in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Algorithm({len(self._steps)} pasos, cursor={self._cursor})"
