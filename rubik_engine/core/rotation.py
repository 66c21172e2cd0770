# rubik_engine/core/rotation.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Axis(IntEnum):
    """Ejes del cubo (regla de la mano derecha: x derecha, y arriba, z hacia el frente)."""

    X_AXIS = 0
    Y_AXIS = 1
    Z_AXIS = 2


class Direction(Enum):
    """Sentido de giro relativo al sentido positivo del eje, no a la cara visible."""

    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"

    def reverse(self) -> "Direction":
        if self is Direction.CLOCKWISE:
            return Direction.COUNTER_CLOCKWISE
        return Direction.CLOCKWISE


AXIS_VECTORS = {
    Axis.X_AXIS: (1.0, 0.0, 0.0),
    Axis.Y_AXIS: (0.0, 1.0, 0.0),
    Axis.Z_AXIS: (0.0, 0.0, 1.0),
}


@dataclass
class Rotation:
    """Comando de giro: eje, sentido, capa inicial y cantidad de capas contiguas.

    `angle` y `active` son estado transitorio de la animación y no participan
    en la igualdad.
    """

    axis: Axis = Axis.Z_AXIS
    direction: Direction = Direction.CLOCKWISE
    start_layer: int = 0
    layer_count: int = 1
    angle: float = field(default=0.0, compare=False)
    active: bool = field(default=False, compare=False)

    def duplicate(self) -> Rotation:
        """Copia sin estado de animación."""
        return Rotation(self.axis, self.direction, self.start_layer, self.layer_count)

    def inverse(self) -> Rotation:
        """Devuelve el giro que deshace a este."""
        return Rotation(self.axis, self.direction.reverse(), self.start_layer, self.layer_count)

    def start(self) -> None:
        self.angle = 0.0
        self.active = True

    def reset(self) -> None:
        self.angle = 0.0
        self.active = False

    def increment(self, delta: float) -> None:
        """Avanza el ángulo; CW se anima con ángulos negativos."""
        if self.direction is Direction.CLOCKWISE:
            self.angle -= delta
        else:
            self.angle += delta

    def layers(self) -> range:
        return range(self.start_layer, self.start_layer + self.layer_count)

    def __str__(self) -> str:
        return (
            f"{self.axis.name}/{self.direction.name}"
            f"[{self.start_layer}:{self.start_layer + self.layer_count}]"
        )
