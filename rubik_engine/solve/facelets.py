# rubik_engine/solve/facelets.py
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Tuple

from rubik_engine.core.colors import DEFAULT_SCHEME, ColorScheme
from rubik_engine.core.errors import InvalidInputError, InvariantViolation
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.core.model import (
    FACE_BACK,
    FACE_BOTTOM,
    FACE_FRONT,
    FACE_LEFT,
    FACE_RIGHT,
    FACE_TOP,
    Color,
)

# Orden de caras de la cadena de 54 facelets (U, R, F, D, L, B).
FACELET_ORDER: List[Tuple[str, int]] = [
    ("U", FACE_TOP),
    ("R", FACE_RIGHT),
    ("F", FACE_FRONT),
    ("D", FACE_BOTTOM),
    ("L", FACE_LEFT),
    ("B", FACE_BACK),
]
FACELET_LETTERS = "".join(letter for letter, _ in FACELET_ORDER)
FACELET_COUNT = 54
SOLVED_FACELETS = "".join(letter * 9 for letter in FACELET_LETTERS)


def validate_facelets(text: str) -> str:
    """Valida una cadena de facelets.

    Reglas: 54 caracteres del alfabeto URFDLB, 9 de cada uno y los centros
    en el orden U, R, F, D, L, B.

    Returns:
        La cadena sin espacios alrededor.

    Raises:
        InvalidInputError: Si la cadena no cumple las reglas.
    """
    text = text.strip()
    if len(text) != FACELET_COUNT:
        raise InvalidInputError(f"Se esperaban {FACELET_COUNT} facelets, hay {len(text)}")
    bad = sorted(set(text) - set(FACELET_LETTERS))
    if bad:
        raise InvalidInputError(f"Caracteres inválidos: {''.join(bad)}")
    counts = Counter(text)
    wrong = {letter: n for letter, n in counts.items() if n != 9}
    if wrong:
        raise InvalidInputError(f"Cada cara necesita 9 facelets: {wrong}")
    centers = "".join(text[i * 9 + 4] for i in range(6))
    if centers != FACELET_LETTERS:
        raise InvalidInputError(f"Centros en orden inválido: {centers}")
    return text


def to_facelets(geometry: CubeGeometry) -> str:
    """Describe la coloración actual como cadena de facelets.

    Cada color se traduce a la letra de la cara cuyo centro lo tiene, por lo
    que la cadena es válida aunque el cubo esté reorientado.

    Raises:
        InvalidInputError: Si el cubo no es de 3x3x3.
        InvariantViolation: Si los centros no tienen seis colores distintos.
    """
    if not geometry.is_3x3x3:
        raise InvalidInputError("Las facelets solo existen para el cubo de 3x3x3")
    letter_for: Dict[Color, str] = {
        geometry.center_color(face): letter for letter, face in FACELET_ORDER
    }
    if len(letter_for) != 6:
        raise InvariantViolation("Los centros no tienen seis colores distintos")

    chars: List[str] = []
    for _, face in FACELET_ORDER:
        for sq in geometry.faces[face]:
            letter = letter_for.get(sq.color)
            if letter is None:
                raise InvariantViolation(f"Color {sq.color!r} sin centro")
            chars.append(letter)
    return "".join(chars)


def apply_facelets(geometry: CubeGeometry, text: str) -> None:
    """Pinta la geometría con los colores del esquema según una cadena de facelets.

    Raises:
        InvalidInputError: Si la cadena es inválida o el cubo no es de 3x3x3.
    """
    text = validate_facelets(text)
    if not geometry.is_3x3x3:
        raise InvalidInputError("Las facelets solo existen para el cubo de 3x3x3")
    color_for = {
        letter: geometry.scheme.color_for_face(face) for letter, face in FACELET_ORDER
    }
    for index, (_, face) in enumerate(FACELET_ORDER):
        chunk = text[index * 9:(index + 1) * 9]
        for sq, letter in zip(geometry.faces[face], chunk):
            sq.color = color_for[letter]


def from_facelets(text: str, scheme: Optional[ColorScheme] = None) -> CubeGeometry:
    """Crea un cubo de 3x3x3 con la coloración descrita por la cadena."""
    geometry = CubeGeometry(3, 3, 3, scheme or DEFAULT_SCHEME)
    apply_facelets(geometry, text)
    return geometry
