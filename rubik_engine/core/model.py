# rubik_engine/core/model.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from rubik_engine.core.errors import InvariantViolation

Color = str  # letras "W", "Y", "O", "R", "G", "B" (o cualquier etiqueta hasheable)
Vec3f = Tuple[float, float, float]

# Índices de cara. El orden importa: FRONT, RIGHT, BACK, LEFT giran en sentido
# horario visto desde arriba.
FACE_FRONT = 0
FACE_RIGHT = 1
FACE_BACK = 2
FACE_LEFT = 3
FACE_TOP = 4
FACE_BOTTOM = 5
FACE_COUNT = 6

FACE_NAMES: List[str] = ["front", "right", "back", "left", "top", "bottom"]

MAX_PIECE_SQUARES = 6


class PieceType(Enum):
    CORNER = "corner"
    EDGE = "edge"
    CENTER = "center"


def piece_type_for(row: int, col: int, rows: int, cols: int) -> PieceType:
    """Infere el tipo de pieza a partir de la posición fila/columna dentro de la cara."""
    on_row_border = row == 0 or row == rows - 1
    on_col_border = col == 0 or col == cols - 1
    if on_row_border and on_col_border:
        return PieceType.CORNER
    if on_row_border or on_col_border:
        return PieceType.EDGE
    return PieceType.CENTER


class Square:
    """Sticker (facelet). Su identidad no cambia nunca; solo muta el color.

    Attributes:
        face: Índice de la cara que lo contiene (FACE_*).
        color: Color actual.
        position: Centro del sticker en coordenadas del cubo (origen en el centro).
        normal: Normal exterior del sticker.
        piece_index: Índice (no propietario) de la pieza en `CubeGeometry.pieces`.
    """

    __slots__ = ("face", "color", "position", "normal", "piece_index")

    def __init__(self, face: int, color: Color, position: Vec3f, normal: Vec3f) -> None:
        self.face: int = face
        self.color: Color = color
        self.position: Vec3f = position
        self.normal: Vec3f = normal
        self.piece_index: int = -1

    def __repr__(self) -> str:
        return f"Square({FACE_NAMES[self.face]}, {self.color!r})"


class Piece:
    """Conjunto de 1..6 stickers que se mueven juntos (cubie)."""

    def __init__(self, piece_type: PieceType) -> None:
        self.type: PieceType = piece_type
        self.squares: List[Square] = []

    def add_square(self, square: Square) -> None:
        """Agrega un sticker a la pieza.

        Raises:
            InvariantViolation: Si la pieza ya tiene `MAX_PIECE_SQUARES` stickers.
        """
        if len(self.squares) >= MAX_PIECE_SQUARES:
            raise InvariantViolation(f"Demasiados stickers para la pieza {self!r}")
        self.squares.append(square)

    def has_color(self, color: Color) -> bool:
        return any(sq.color == color for sq in self.squares)

    def square_with_color(self, color: Color) -> Optional[Square]:
        for sq in self.squares:
            if sq.color == color:
                return sq
        return None

    def square_on_face(self, face: int) -> Optional[Square]:
        for sq in self.squares:
            if sq.face == face:
                return sq
        return None

    def colors(self) -> List[Color]:
        return [sq.color for sq in self.squares]

    def __repr__(self) -> str:
        return f"Piece({self.type.value}, {self.squares!r})"
