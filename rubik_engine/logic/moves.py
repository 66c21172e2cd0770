# rubik_engine/logic/moves.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from rubik_engine.core.errors import InvalidInputError
from rubik_engine.core.rotation import Axis, Direction, Rotation
from rubik_engine.logic.algorithm import Algorithm

VALID_FACES: Set[str] = {"U", "D", "L", "R", "F", "B"}
VALID_SUFFIX: Set[str] = {"", "'", "2"}

# cara -> (eje, ¿capa exterior positiva?, sentido base)
FACE_TABLE: Dict[str, Tuple[Axis, bool, Direction]] = {
    "U": (Axis.Y_AXIS, True, Direction.CLOCKWISE),
    "D": (Axis.Y_AXIS, False, Direction.COUNTER_CLOCKWISE),
    "R": (Axis.X_AXIS, True, Direction.CLOCKWISE),
    "L": (Axis.X_AXIS, False, Direction.COUNTER_CLOCKWISE),
    "F": (Axis.Z_AXIS, True, Direction.CLOCKWISE),
    "B": (Axis.Z_AXIS, False, Direction.COUNTER_CLOCKWISE),
}

# Giros del cubo completo, solo para mostrar (x sigue a R, y a U, z a F).
WHOLE_CUBE_LETTERS: Dict[Axis, str] = {Axis.X_AXIS: "x", Axis.Y_AXIS: "y", Axis.Z_AXIS: "z"}


def normalize_token(tok: str) -> str:
    """Normaliza un token de movimiento a un formato estándar.

    Reglas principales:
    - Elimina espacios y convierte comilla tipográfica (’ o ‘) a comilla simple (').
    - Acepta una cara con sufijo opcional: "" (ej: "R"), "'" (ej: "R'") o "2" (ej: "R2").

    Args:
        tok: Token de movimiento (por ejemplo: "R", "U'", "F2").

    Returns:
        Token normalizado.

    Raises:
        InvalidInputError: Si la cara no es válida o si el sufijo no es válido.
    """
    tok = tok.strip().replace("’", "'").replace("‘", "'")
    if not tok:
        return ""

    base = tok[0]
    suf = tok[1:]

    if base not in VALID_FACES:
        raise InvalidInputError(f"Movimiento inválido: {tok}")
    if suf not in VALID_SUFFIX:
        raise InvalidInputError(f"Sufijo inválido en: {tok}")

    return base + suf


def inverse_token(m: str) -> str:
    """Devuelve el movimiento inverso de un token.

    Ejemplos:
        - "R"  -> "R'"
        - "R'" -> "R"
        - "R2" -> "R2"
    """
    m = normalize_token(m)
    if not m:
        return m

    base, suf = m[0], m[1:]
    if suf == "":
        return base + "'"
    if suf == "'":
        return base
    return base + "2"


def parse_sequence(text: str) -> List[str]:
    """Convierte una secuencia escrita como texto en una lista de tokens normalizados.

    La entrada debe separar movimientos por espacios. Por ejemplo:
        "R U R' U'" -> ["R", "U", "R'", "U'"]

    Raises:
        InvalidInputError: Si algún token es inválido.
    """
    return [normalize_token(t) for t in text.split() if t.strip()]


def axis_sizes(size: Union[int, Sequence[int]]) -> Tuple[int, int, int]:
    """Tamaño por eje (x, y, z); un entero vale para los tres ejes."""
    if isinstance(size, int):
        return size, size, size
    if len(size) != 3:
        raise InvalidInputError(f"Se esperaban 3 tamaños (x, y, z), no {len(size)}")
    return size[0], size[1], size[2]


def token_to_rotations(token: str, size: Union[int, Sequence[int]] = 3) -> List[Rotation]:
    """Traduce un token a 1 o 2 giros del motor.

    Args:
        token: Movimiento, por ejemplo "R2" o "U'".
        size: Capas por eje (x, y, z), o un entero si el cubo es NxNxN. La cara
            exterior positiva de cada eje es la capa `size-1` de ese eje.

    Returns:
        Lista de giros: uno para "" y "'", dos iguales para "2".
    """
    tok = normalize_token(token)
    if not tok:
        return []
    axis, positive, direction = FACE_TABLE[tok[0]]
    suffix = tok[1:]
    if suffix == "'":
        direction = direction.reverse()
    rotation = Rotation(axis, direction, axis_sizes(size)[axis] - 1 if positive else 0, 1)
    if suffix == "2":
        return [rotation, rotation.duplicate()]
    return [rotation]


def parse_algorithm(text: str, size: Union[int, Sequence[int]] = 3) -> Algorithm:
    """Convierte una cadena de movimientos (por ejemplo la salida de un solver) en un Algorithm.

    En cubos no cúbicos `size` debe ser la terna (x, y, z) para que U/D y F/B
    giren la capa exterior de su propio eje.

    Raises:
        InvalidInputError: Si algún token es inválido.
    """
    algo = Algorithm()
    for token in parse_sequence(text):
        for rotation in token_to_rotations(token, size):
            algo.add_step(rotation)
    return algo


def rotation_to_token(rotation: Rotation, size: int = 3) -> Optional[str]:
    """Token equivalente a un giro, si existe.

    Las capas exteriores se escriben como caras (R, U', ...), el cubo completo
    como x/y/z. Las capas interiores no tienen token y devuelven None.
    """
    if rotation.start_layer == 0 and rotation.layer_count == size:
        letter = WHOLE_CUBE_LETTERS[rotation.axis]
        return letter if rotation.direction is Direction.CLOCKWISE else letter + "'"
    if rotation.layer_count != 1:
        return None

    for face, (axis, positive, direction) in FACE_TABLE.items():
        if axis is not rotation.axis:
            continue
        layer = size - 1 if positive else 0
        if rotation.start_layer != layer:
            continue
        return face if rotation.direction is direction else face + "'"
    return None
