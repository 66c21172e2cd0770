# rubik_engine/core/geometry.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from rubik_engine.core.colors import DEFAULT_SCHEME, ColorScheme
from rubik_engine.core.errors import InvalidInputError, InvariantViolation, OutOfRangeError
from rubik_engine.core.model import (
    FACE_BACK,
    FACE_BOTTOM,
    FACE_COUNT,
    FACE_FRONT,
    FACE_LEFT,
    FACE_RIGHT,
    FACE_TOP,
    Color,
    Piece,
    Square,
    Vec3f,
    piece_type_for,
)
from rubik_engine.core.rotation import Axis, Direction
from rubik_engine.core import rotation_algebra as algebra

_LOGGER = logging.getLogger(__name__)

ColorSnapshot = Tuple[Tuple[Color, ...], ...]

# Cara en la capa 0 y en la capa size-1 de cada eje.
AXIS_FACES: Dict[Axis, Tuple[int, int]] = {
    Axis.X_AXIS: (FACE_LEFT, FACE_RIGHT),
    Axis.Y_AXIS: (FACE_BOTTOM, FACE_TOP),
    Axis.Z_AXIS: (FACE_BACK, FACE_FRONT),
}


def rotate_vector(v: Vec3f, axis: Axis, turns: int) -> Vec3f:
    """Rota un vector 90°*turns alrededor del eje (regla de la mano derecha)."""
    x, y, z = v
    for _ in range(turns % 4):
        if axis is Axis.X_AXIS:
            x, y, z = x, -z, y
        elif axis is Axis.Y_AXIS:
            x, y, z = z, y, -x
        else:
            x, y, z = -y, x, z
    return (x, y, z)


class CubeGeometry:
    """Modelo geométrico de un cubo de tamaño arbitrario (sizeX x sizeY x sizeZ).

    Representación:
        - `faces[f]` es la lista fila-mayor de stickers de la cara `f`, vista desde
          afuera. Ese orden es la base de todos los índices posicionales.
        - `pieces` agrupa los stickers que se mueven juntos. La pertenencia no
          cambia nunca; solo cambian los colores.
        - `layers[axis][i]` son las piezas de la rebanada `i` (0 = izquierda,
          abajo o atrás según el eje).

    Orden de escaneo por cara (filas i, columnas j):
        - front: y de arriba a abajo, x de izquierda a derecha.
        - back: y de arriba a abajo, x de +x a -x.
        - left: y de arriba a abajo, z de atrás hacia adelante.
        - right: y de arriba a abajo, z de adelante hacia atrás.
        - top: z de atrás hacia adelante, x de izquierda a derecha.
        - bottom: z de adelante hacia atrás, x de izquierda a derecha.
    """

    def __init__(
        self,
        size_x: int = 3,
        size_y: int = 3,
        size_z: int = 3,
        scheme: ColorScheme = DEFAULT_SCHEME,
    ) -> None:
        for name, value in (("size_x", size_x), ("size_y", size_y), ("size_z", size_z)):
            if value < 1:
                raise InvalidInputError(f"{name} debe ser >= 1 (recibido {value})")

        self.size_x: int = size_x
        self.size_y: int = size_y
        self.size_z: int = size_z
        self.scheme: ColorScheme = scheme

        self.faces: List[List[Square]] = [[] for _ in range(FACE_COUNT)]
        self.all_squares: List[Square] = []
        self.pieces: List[Piece] = []
        self.face_pieces: List[List[Piece]] = [[] for _ in range(FACE_COUNT)]
        self.layers: Dict[Axis, List[List[Piece]]] = {}

        self._create_squares()
        self._create_pieces()
        self._create_layers()

    # --------------------------
    # Public API
    # --------------------------
    @property
    def is_3x3x3(self) -> bool:
        return self.size_x == self.size_y == self.size_z == 3

    def axis_size(self, axis: Axis) -> int:
        if axis is Axis.X_AXIS:
            return self.size_x
        if axis is Axis.Y_AXIS:
            return self.size_y
        return self.size_z

    def is_symmetric_around_axis(self, axis: Axis) -> bool:
        """True si las dos dimensiones perpendiculares al eje son iguales."""
        if axis is Axis.X_AXIS:
            return self.size_y == self.size_z
        if axis is Axis.Y_AXIS:
            return self.size_x == self.size_z
        return self.size_x == self.size_y

    def face_dims(self, face: int) -> Tuple[int, int]:
        """(ancho, alto) de la grilla de una cara."""
        if face in (FACE_FRONT, FACE_BACK):
            return self.size_x, self.size_y
        if face in (FACE_LEFT, FACE_RIGHT):
            return self.size_z, self.size_y
        return self.size_x, self.size_z

    def layer(self, axis: Axis, index: int) -> List[Piece]:
        layers = self.layers[axis]
        if not 0 <= index < len(layers):
            raise OutOfRangeError(f"Capa {index} fuera de rango para el eje {axis.name}")
        return layers[index]

    def piece_of(self, square: Square) -> Piece:
        return self.pieces[square.piece_index]

    def center_square(self, face: int) -> Square:
        squares = self.faces[face]
        return squares[len(squares) // 2]

    def center_color(self, face: int) -> Color:
        return self.center_square(face).color

    def face_with_center(self, color: Color) -> int:
        """Cara cuyo centro tiene `color`.

        Raises:
            InvariantViolation: Si ningún centro tiene ese color.
        """
        for face in range(FACE_COUNT):
            if self.center_color(face) == color:
                return face
        raise InvariantViolation(f"Ningún centro tiene el color {color!r}")

    def face_colors(self, face: int) -> List[Color]:
        if not 0 <= face < FACE_COUNT:
            raise OutOfRangeError(f"Cara fuera de rango: {face}")
        return [sq.color for sq in self.faces[face]]

    def snapshot(self) -> ColorSnapshot:
        """Coloración actual como estructura inmutable y hasheable."""
        return tuple(tuple(sq.color for sq in face) for face in self.faces)

    def is_solved(self) -> bool:
        """Cada cara tiene un solo color: el de su sticker central."""
        for face in self.faces:
            center = face[len(face) // 2].color
            if any(sq.color != center for sq in face):
                return False
        return True

    # --------------------------
    # Colores
    # --------------------------
    def reset_colors(self) -> None:
        """Vuelve a los colores del esquema (estado resuelto)."""
        for face, squares in enumerate(self.faces):
            color = self.scheme.color_for_face(face)
            for sq in squares:
                sq.color = color

    def set_color(self, color: Color) -> None:
        for sq in self.all_squares:
            sq.color = color

    def set_face_color(self, face: int, color: Color) -> None:
        if not 0 <= face < FACE_COUNT:
            raise OutOfRangeError(f"Cara fuera de rango: {face}")
        for sq in self.faces[face]:
            sq.color = color

    def set_layer_color(self, axis: Axis, index: int, color: Color) -> None:
        for piece in self.layer(axis, index):
            for sq in piece.squares:
                sq.color = color

    # --------------------------
    # Giros
    # --------------------------
    def rotate_layer(self, axis: Axis, direction: Direction, layer: int) -> None:
        """Confirma el giro de una capa sobre los colores.

        En ejes simétricos es un cuarto de vuelta; en ejes no simétricos es una
        media vuelta degenerada (el sentido no importa).

        Raises:
            OutOfRangeError: Si `layer` no existe en el eje. No se modifica nada.
        """
        size = self.axis_size(axis)
        if not 0 <= layer < size:
            raise OutOfRangeError(f"Capa {layer} fuera de rango (tamaño {size}) en {axis.name}")

        strips = self._ring_strips(axis, layer)
        low_face, high_face = AXIS_FACES[axis]

        if self.is_symmetric_around_axis(axis):
            n = self.face_dims(low_face)[0]
            algebra.rotate_ring_colors(strips, direction)
            if layer == 0:
                # La cara de la capa 0 se ve desde el lado negativo del eje.
                algebra.rotate_face_colors(self.faces[low_face], direction.reverse(), n)
                if size == 1:
                    algebra.rotate_face_colors(self.faces[high_face], direction, n)
            elif layer == size - 1:
                algebra.rotate_face_colors(self.faces[high_face], direction, n)
        else:
            width, height = self.face_dims(low_face)
            algebra.skewed_rotate_ring_colors(strips)
            if layer == 0:
                algebra.skewed_rotate_face_colors(self.faces[low_face], width, height)
                if size == 1:
                    algebra.skewed_rotate_face_colors(self.faces[high_face], width, height)
            elif layer == size - 1:
                algebra.skewed_rotate_face_colors(self.faces[high_face], width, height)

    def reorient(self, axis: Axis, direction: Direction) -> None:
        """Reorienta el cubo completo 90° alrededor de `axis`.

        No cambia colores: reasigna los stickers a otras caras, rota las
        grillas de las caras perpendiculares, intercambia las dimensiones,
        reetiqueta `Square.face` y aplica la rotación visual a posiciones y
        normales.
        """
        turns = 1 if direction is Direction.CLOCKWISE else 3
        for _ in range(turns):
            if axis is Axis.X_AXIS:
                self._rotate_cube_x()
            elif axis is Axis.Y_AXIS:
                self._rotate_cube_y()
            else:
                self._rotate_cube_z()

        visual_turns = -1 if direction is Direction.CLOCKWISE else 1
        for face, squares in enumerate(self.faces):
            for sq in squares:
                sq.face = face
                sq.position = rotate_vector(sq.position, axis, visual_turns)
                sq.normal = rotate_vector(sq.normal, axis, visual_turns)

        self._collect_face_pieces()
        self._create_layers()
        _LOGGER.debug(
            "Cubo reorientado en %s: ahora %dx%dx%d",
            axis.name, self.size_x, self.size_y, self.size_z,
        )

    # --------------------------
    # Construcción
    # --------------------------
    def _create_squares(self) -> None:
        sx, sy, sz = self.size_x, self.size_y, self.size_z
        hx, hy, hz = sx / 2.0, sy / 2.0, sz / 2.0
        ox, oy, oz = (sx - 1) / 2.0, (sy - 1) / 2.0, (sz - 1) / 2.0

        def add(face: int, pos: Vec3f, normal: Vec3f) -> None:
            sq = Square(face, self.scheme.color_for_face(face), pos, normal)
            self.faces[face].append(sq)
            self.all_squares.append(sq)

        for i in range(sy):
            for j in range(sx):
                add(FACE_FRONT, (j - ox, oy - i, hz), (0.0, 0.0, 1.0))
        for i in range(sy):
            for j in range(sx):
                add(FACE_BACK, (ox - j, oy - i, -hz), (0.0, 0.0, -1.0))
        for i in range(sy):
            for j in range(sz):
                add(FACE_LEFT, (-hx, oy - i, j - oz), (-1.0, 0.0, 0.0))
        for i in range(sy):
            for j in range(sz):
                add(FACE_RIGHT, (hx, oy - i, oz - j), (1.0, 0.0, 0.0))
        for i in range(sz):
            for j in range(sx):
                add(FACE_TOP, (j - ox, hy, i - oz), (0.0, 1.0, 0.0))
        for i in range(sz):
            for j in range(sx):
                add(FACE_BOTTOM, (j - ox, -hy, oz - i), (0.0, -1.0, 0.0))

    def _create_pieces(self) -> None:
        """Agrupa stickers en piezas.

        Dos stickers pertenecen a la misma pieza si el centro del cubie que
        tocan (posición menos media normal) coincide. Si ya existe una pieza en
        ese cubie, el sticker se une a ella; si no, se crea una nueva con el
        tipo deducido de su fila/columna.
        """
        owners: Dict[Tuple[int, int, int], Piece] = {}

        for face in (FACE_FRONT, FACE_RIGHT, FACE_LEFT, FACE_TOP, FACE_BOTTOM, FACE_BACK):
            width, height = self.face_dims(face)
            for idx, sq in enumerate(self.faces[face]):
                key = self._cubie_key(sq)
                piece: Optional[Piece] = owners.get(key)
                if piece is None:
                    piece = Piece(piece_type_for(idx // width, idx % width, height, width))
                    owners[key] = piece
                    self.pieces.append(piece)
                piece.add_square(sq)

        for index, piece in enumerate(self.pieces):
            for sq in piece.squares:
                sq.piece_index = index

        self._collect_face_pieces()

    @staticmethod
    def _cubie_key(sq: Square) -> Tuple[int, int, int]:
        # Coordenadas *2 para trabajar con enteros.
        p, n = sq.position, sq.normal
        return (
            int(round(2 * p[0] - n[0])),
            int(round(2 * p[1] - n[1])),
            int(round(2 * p[2] - n[2])),
        )

    def _collect_face_pieces(self) -> None:
        self.face_pieces = [
            [self.pieces[sq.piece_index] for sq in self.faces[face]]
            for face in range(FACE_COUNT)
        ]

    def _create_layers(self) -> None:
        sx, sy, sz = self.size_x, self.size_y, self.size_z
        front = self.face_pieces[FACE_FRONT]
        back = self.face_pieces[FACE_BACK]
        left = self.face_pieces[FACE_LEFT]
        right = self.face_pieces[FACE_RIGHT]
        top = self.face_pieces[FACE_TOP]
        bottom = self.face_pieces[FACE_BOTTOM]

        x_layers: List[List[Piece]] = [list(left)]
        for i in range(1, sx - 1):
            ring = [top[j * sx + i] for j in range(sz - 1)]
            ring += [front[j * sx + i] for j in range(sy - 1)]
            ring += [bottom[j * sx + i] for j in range(sz - 1)]
            ring += [back[sx * (sy - 1 - j) + (sx - 1 - i)] for j in range(sy - 1)]
            x_layers.append(ring)
        if sx > 1:
            x_layers.append(list(right))

        y_layers: List[List[Piece]] = [list(bottom)]
        for i in range(1, sy - 1):
            row = sy - 1 - i
            ring = [front[row * sx + j] for j in range(sx - 1)]
            ring += [right[row * sz + j] for j in range(sz - 1)]
            ring += [back[row * sx + j] for j in range(sx - 1)]
            ring += [left[row * sz + j] for j in range(sz - 1)]
            y_layers.append(ring)
        if sy > 1:
            y_layers.append(list(top))

        z_layers: List[List[Piece]] = [list(back)]
        for i in range(1, sz - 1):
            ring = [top[i * sx + j] for j in range(sx - 1)]
            ring += [right[sz * j + sz - 1 - i] for j in range(sy - 1)]
            ring += [bottom[(sz - 1 - i) * sx + (sx - 1 - j)] for j in range(sx - 1)]
            ring += [left[(sy - 1 - j) * sz + i] for j in range(sy - 1)]
            z_layers.append(ring)
        if sz > 1:
            z_layers.append(list(front))

        self.layers = {
            Axis.X_AXIS: [self._unique(layer) for layer in x_layers],
            Axis.Y_AXIS: [self._unique(layer) for layer in y_layers],
            Axis.Z_AXIS: [self._unique(layer) for layer in z_layers],
        }

    @staticmethod
    def _unique(pieces: List[Piece]) -> List[Piece]:
        # En cubos de grosor 1 las caras opuestas comparten piezas.
        seen = set()
        out: List[Piece] = []
        for piece in pieces:
            if id(piece) not in seen:
                seen.add(id(piece))
                out.append(piece)
        return out

    # --------------------------
    # Bordes de una capa
    # --------------------------
    def _ring_strips(self, axis: Axis, f: int) -> List[List[Square]]:
        """Los 4 bordes de la capa `f`, en el orden que recorre un giro horario."""
        sx, sy, sz = self.size_x, self.size_y, self.size_z
        front = self.faces[FACE_FRONT]
        back = self.faces[FACE_BACK]
        left = self.faces[FACE_LEFT]
        right = self.faces[FACE_RIGHT]
        top = self.faces[FACE_TOP]
        bottom = self.faces[FACE_BOTTOM]

        if axis is Axis.X_AXIS:
            return [
                [front[sx * i + f] for i in range(sy)],
                [top[sx * i + f] for i in range(sz)],
                [back[(sy - 1 - i) * sx + (sx - 1 - f)] for i in range(sy)],
                [bottom[sx * i + f] for i in range(sz)],
            ]
        if axis is Axis.Y_AXIS:
            row = sy - 1 - f
            return [
                [front[row * sx + i] for i in range(sx)],
                [left[row * sz + i] for i in range(sz)],
                [back[row * sx + i] for i in range(sx)],
                [right[row * sz + i] for i in range(sz)],
            ]
        return [
            [top[sx * f + i] for i in range(sx)],
            [right[sz * i + sz - 1 - f] for i in range(sy)],
            [bottom[sx * (sz - 1 - f) + (sx - 1 - i)] for i in range(sx)],
            [left[sz * (sy - 1 - i) + f] for i in range(sy)],
        ]

    # --------------------------
    # Reorientación (un cuarto de vuelta horario por llamada)
    # --------------------------
    def _rotate_cube_x(self) -> None:
        sy, sz = self.size_y, self.size_z
        faces = self.faces
        old_top = faces[FACE_TOP]
        faces[FACE_TOP] = faces[FACE_FRONT]
        faces[FACE_FRONT] = faces[FACE_BOTTOM]
        faces[FACE_BOTTOM] = list(reversed(faces[FACE_BACK]))
        faces[FACE_BACK] = list(reversed(old_top))
        faces[FACE_RIGHT] = algebra.rotate_matrix(faces[FACE_RIGHT], sz, sy)
        faces[FACE_LEFT] = algebra.rotate_matrix_ccw(faces[FACE_LEFT], sz, sy)
        self.size_y, self.size_z = sz, sy

    def _rotate_cube_y(self) -> None:
        sx, sz = self.size_x, self.size_z
        faces = self.faces
        old_front = faces[FACE_FRONT]
        faces[FACE_FRONT] = faces[FACE_RIGHT]
        faces[FACE_RIGHT] = faces[FACE_BACK]
        faces[FACE_BACK] = faces[FACE_LEFT]
        faces[FACE_LEFT] = old_front
        faces[FACE_TOP] = algebra.rotate_matrix(faces[FACE_TOP], sx, sz)
        faces[FACE_BOTTOM] = algebra.rotate_matrix_ccw(faces[FACE_BOTTOM], sx, sz)
        self.size_x, self.size_z = sz, sx

    def _rotate_cube_z(self) -> None:
        sx, sy, sz = self.size_x, self.size_y, self.size_z
        faces = self.faces
        old_top = faces[FACE_TOP]
        faces[FACE_TOP] = algebra.rotate_matrix(faces[FACE_LEFT], sz, sy)
        faces[FACE_LEFT] = algebra.rotate_matrix(faces[FACE_BOTTOM], sx, sz)
        faces[FACE_BOTTOM] = algebra.rotate_matrix(faces[FACE_RIGHT], sz, sy)
        faces[FACE_RIGHT] = algebra.rotate_matrix(old_top, sx, sz)
        faces[FACE_FRONT] = algebra.rotate_matrix(faces[FACE_FRONT], sx, sy)
        faces[FACE_BACK] = algebra.rotate_matrix_ccw(faces[FACE_BACK], sx, sy)
        self.size_x, self.size_y = sy, sx
