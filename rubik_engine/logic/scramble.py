# rubik_engine/logic/scramble.py
from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from rubik_engine.core.errors import InvalidInputError
from rubik_engine.core.rotation import Axis, Direction, Rotation

FACES: List[str] = ["U", "D", "L", "R", "F", "B"]
SUFFIX: List[str] = ["", "'", "2"]
AXES: List[Axis] = [Axis.X_AXIS, Axis.Y_AXIS, Axis.Z_AXIS]

FACE_AXIS: Dict[str, Axis] = {
    "U": Axis.Y_AXIS, "D": Axis.Y_AXIS,
    "L": Axis.X_AXIS, "R": Axis.X_AXIS,
    "F": Axis.Z_AXIS, "B": Axis.Z_AXIS,
}


def generate_scramble(n: int, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> str:
    """Genera un scramble en notación estándar.

    Nunca repite la cara anterior ("U U'") y no encadena tres giros sobre el
    mismo eje ("R L R"), que se simplificarían entre sí.

    Args:
        n: Cantidad de movimientos.
        seed: Semilla opcional; se ignora si se pasa `rng`.
        rng: Fuente aleatoria inyectable.

    Returns:
        Movimientos separados por espacios, por ejemplo "R U' F2 L D2".

    Raises:
        InvalidInputError: Si `n` es menor o igual a 0.
    """
    if n <= 0:
        raise InvalidInputError("n debe ser mayor que 0.")

    rng = rng or random.Random(seed)

    faces: List[str] = []
    for _ in range(n):
        blocked_axis = None
        if len(faces) >= 2 and FACE_AXIS[faces[-1]] == FACE_AXIS[faces[-2]]:
            blocked_axis = FACE_AXIS[faces[-1]]
        options = [
            f for f in FACES
            if (not faces or f != faces[-1]) and FACE_AXIS[f] != blocked_axis
        ]
        faces.append(rng.choice(options))

    return " ".join(f + rng.choice(SUFFIX) for f in faces)


def random_rotation(rng: random.Random, sizes: Sequence[int]) -> Rotation:
    """Giro de una capa elegido al azar: eje, sentido y capa uniformes.

    Args:
        rng: Fuente aleatoria.
        sizes: Tamaño del cubo por eje (x, y, z).
    """
    axis = rng.choice(AXES)
    direction = Direction.CLOCKWISE if rng.random() < 0.5 else Direction.COUNTER_CLOCKWISE
    layer = rng.randrange(sizes[axis])
    return Rotation(axis, direction, layer, 1)
