# rubik_engine/core/rotation_algebra.py
"""Permutaciones de colores in-place sobre listas de stickers.

Todas las funciones mutan solo `Square.color`; la identidad de los stickers y
de las piezas no cambia nunca.
"""
from __future__ import annotations

from typing import List, Sequence, TypeVar

from rubik_engine.core.model import Square
from rubik_engine.core.rotation import Direction

T = TypeVar("T")


def _swap(a: Square, b: Square) -> None:
    a.color, b.color = b.color, a.color


def rotate_ring_colors(strips: Sequence[List[Square]], direction: Direction) -> None:
    """Desplaza los 4 bordes que rodean una capa.

    Horario mueve los colores del borde k al borde k+1 (0->1->2->3->0);
    antihorario al revés. Se guarda un solo borde temporal.

    Args:
        strips: Los 4 bordes, en el orden en que un giro horario los recorre.
        direction: Sentido del giro.
    """
    length = len(strips[0])
    if direction is Direction.CLOCKWISE:
        saved = [sq.color for sq in strips[3]]
        for k in (3, 2, 1):
            for i in range(length):
                strips[k][i].color = strips[k - 1][i].color
        for i in range(length):
            strips[0][i].color = saved[i]
    else:
        saved = [sq.color for sq in strips[0]]
        for k in (0, 1, 2):
            for i in range(length):
                strips[k][i].color = strips[k + 1][i].color
        for i in range(length):
            strips[3][i].color = saved[i]


def rotate_face_colors(squares: List[Square], direction: Direction, n: int) -> None:
    """Rota 90° una grilla NxN (fila-mayor, vista desde afuera).

    Cada anillo se resuelve con 4 ciclos esquina/borde; luego se recursa sobre
    la subgrilla interior (N-2)x(N-2).
    """
    if n < 2:
        return
    last = n * n - 1
    for i in range(n - 1):
        top = squares[i]
        left = squares[n * (n - 1 - i)]
        bottom = squares[last - i]
        right = squares[i * n + n - 1]
        tmp = top.color
        if direction is Direction.CLOCKWISE:
            top.color = left.color
            left.color = bottom.color
            bottom.color = right.color
            right.color = tmp
        else:
            top.color = right.color
            right.color = bottom.color
            bottom.color = left.color
            left.color = tmp

    if n > 3:
        inner = [squares[r * n + c] for r in range(1, n - 1) for c in range(1, n - 1)]
        rotate_face_colors(inner, direction, n - 2)


def skewed_rotate_ring_colors(strips: Sequence[List[Square]]) -> None:
    """Media vuelta degenerada: intercambia los bordes 0<->2 y 1<->3."""
    for a, b in ((0, 2), (1, 3)):
        for sq_a, sq_b in zip(strips[a], strips[b]):
            _swap(sq_a, sq_b)


def skewed_rotate_face_colors(squares: List[Square], width: int, height: int) -> None:
    """Rota 180° una grilla rectangular intercambiando posiciones diametrales.

    Intercambia el borde exterior y recursa sobre el rectángulo interior.
    """
    count = width * height
    if width == 1 or height == 1:
        for i in range(count // 2):
            _swap(squares[i], squares[count - 1 - i])
        return

    for c in range(width):
        _swap(squares[c], squares[count - 1 - c])
    for r in range(1, height - 1):
        _swap(squares[r * width], squares[count - 1 - r * width])

    if width > 2 and height > 2:
        inner = [
            squares[r * width + c]
            for r in range(1, height - 1)
            for c in range(1, width - 1)
        ]
        skewed_rotate_face_colors(inner, width - 2, height - 2)


# --------------------------
# Matrices planas (reorientación del cubo completo)
# --------------------------
def rotate_matrix(matrix: Sequence[T], width: int, height: int) -> List[T]:
    """Rota 90° horario una matriz fila-mayor de `width` columnas y `height` filas.

    El resultado tiene `height` columnas y `width` filas.
    """
    out: List[T] = []
    for i in range(width):
        for j in range(height, 0, -1):
            out.append(matrix[(j - 1) * width + i])
    return out


def rotate_matrix_ccw(matrix: Sequence[T], width: int, height: int) -> List[T]:
    """Rota 90° antihorario una matriz fila-mayor."""
    out: List[T] = []
    for i in range(width - 1, -1, -1):
        for j in range(height):
            out.append(matrix[j * width + i])
    return out
