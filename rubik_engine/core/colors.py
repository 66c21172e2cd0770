# rubik_engine/core/colors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from rubik_engine.core.errors import InvariantViolation, OutOfRangeError
from rubik_engine.core.model import FACE_COUNT, Color


@dataclass(frozen=True)
class ColorScheme:
    """Colores por cara que se usan al construir o reiniciar la geometría.

    Los valores por defecto coinciden con el estado resuelto clásico:
    U blanco, D amarillo, L naranja, R rojo, F verde, B azul.
    """

    front: Color = "G"
    right: Color = "R"
    back: Color = "B"
    left: Color = "O"
    top: Color = "W"
    bottom: Color = "Y"

    def __post_init__(self) -> None:
        if len(set(self.as_tuple())) != FACE_COUNT:
            raise InvariantViolation(f"Los colores del esquema deben ser distintos: {self}")

    def as_tuple(self) -> Tuple[Color, ...]:
        """Colores en orden de índice de cara (FACE_FRONT..FACE_BOTTOM)."""
        return (self.front, self.right, self.back, self.left, self.top, self.bottom)

    def color_for_face(self, face: int) -> Color:
        if not 0 <= face < FACE_COUNT:
            raise OutOfRangeError(f"Cara fuera de rango: {face}")
        return self.as_tuple()[face]

    def face_for_color(self, color: Color) -> int:
        mapping: Dict[Color, int] = {c: f for f, c in enumerate(self.as_tuple())}
        try:
            return mapping[color]
        except KeyError:
            raise InvariantViolation(f"Color fuera del esquema: {color!r}") from None


DEFAULT_SCHEME = ColorScheme()
