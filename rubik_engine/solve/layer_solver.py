# rubik_engine/solve/layer_solver.py
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Set, Tuple, Union

from rubik_engine.core.errors import InvariantViolation, SolverDeadEnd
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.core.model import (
    FACE_BACK,
    FACE_BOTTOM,
    FACE_FRONT,
    FACE_LEFT,
    FACE_RIGHT,
    FACE_TOP,
    Color,
    Piece,
)
from rubik_engine.core.rotation import Axis, Direction
from rubik_engine.logic.algorithm import Algorithm
from rubik_engine.logic.moves import parse_algorithm
from rubik_engine.solve.base import SolverStrategy

if TYPE_CHECKING:
    from rubik_engine.engine.turn_engine import TurnEngine

_LOGGER = logging.getLogger(__name__)

SIZE = 3
INNER, MIDDLE, OUTER = 0, 1, 2

SIDE_FACES = (FACE_FRONT, FACE_RIGHT, FACE_BACK, FACE_LEFT)

# Posición de la arista de la cara superior/inferior adyacente a cada cara lateral.
TOP_EDGE_POS: Dict[int, int] = {FACE_FRONT: 7, FACE_RIGHT: 5, FACE_BACK: 1, FACE_LEFT: 3}
# Las esquinas se indexan por la primera cara del par (k, k+1): 0=FR, 1=RB, 2=BL, 3=LF.
TOP_CORNER_POS: Dict[int, int] = {0: 8, 1: 2, 2: 0, 3: 6}
BOTTOM_CORNER_POS: Dict[int, int] = {0: 2, 1: 8, 2: 6, 3: 0}
# Índice de cada arista del medio dentro de la capa Y del medio.
MIDDLE_EDGE_INDEX: Dict[int, int] = {3: 0, 0: 2, 1: 4, 2: 6}

# Subir a UF una arista del medio, según la ranura y la cara con el color de la cruz.
MIDDLE_EDGE_TO_FRONT: Dict[Tuple[int, int], str] = {
    (3, FACE_LEFT): "F",
    (3, FACE_FRONT): "U L' U'",
    (0, FACE_RIGHT): "F'",
    (0, FACE_FRONT): "U' R U",
    (1, FACE_BACK): "U' R' U",
    (1, FACE_RIGHT): "U2 B U2",
    (2, FACE_BACK): "U L U'",
    (2, FACE_LEFT): "U2 B' U2",
}

# Llevar a UF una arista de la capa superior: (cara lateral, ¿color de la cruz arriba?).
TOP_EDGE_TO_FRONT: Dict[Tuple[int, bool], str] = {
    (FACE_FRONT, False): "F U' R U",
    (FACE_RIGHT, True): "R' U' R U",
    (FACE_RIGHT, False): "R' F'",
    (FACE_LEFT, True): "L U L' U'",
    (FACE_LEFT, False): "L F",
    (FACE_BACK, True): "B' U2 B U2",
    (FACE_BACK, False): "B' U' R' U",
}

INSERT_FRONT = "U R U' R' U' F' U F"
INSERT_RIGHT = "U' F' U F U R U' R'"
ORIENT_EDGES = "F R U R' U' F'"
SWAP_EDGES = "R U R' U R U2 R' U"
CYCLE_CORNERS = "U R U' L' U R' U' L"
TWIST_CORNER = "R' D' R D"


class SolveState(Enum):
    NONE = "none"
    FIRST_FACE_CROSS = "first_face_cross"
    FIRST_FACE_CORNERS = "first_face_corners"
    MIDDLE_LAYER = "middle_layer"
    LAST_FACE_CROSS = "last_face_cross"
    LAST_FACE_CROSS_ALIGN = "last_face_cross_align"
    LAST_FACE_CORNERS = "last_face_corners"
    LAST_FACE_CORNER_ALIGN = "last_face_corner_align"


PHASE_ORDER: List[SolveState] = [
    SolveState.FIRST_FACE_CROSS,
    SolveState.FIRST_FACE_CORNERS,
    SolveState.MIDDLE_LAYER,
    SolveState.LAST_FACE_CROSS,
    SolveState.LAST_FACE_CROSS_ALIGN,
    SolveState.LAST_FACE_CORNERS,
    SolveState.LAST_FACE_CORNER_ALIGN,
]

PHASE_MESSAGES: Dict[SolveState, str] = {
    SolveState.FIRST_FACE_CROSS: "Armando la cruz de la primera cara",
    SolveState.FIRST_FACE_CORNERS: "Ubicando las esquinas de la primera cara",
    SolveState.MIDDLE_LAYER: "Resolviendo la capa del medio",
    SolveState.LAST_FACE_CROSS: "Armando la cruz de la última cara",
    SolveState.LAST_FACE_CROSS_ALIGN: "Alineando la cruz de la última cara",
    SolveState.LAST_FACE_CORNERS: "Ubicando las esquinas de la última cara",
    SolveState.LAST_FACE_CORNER_ALIGN: "Orientando las esquinas de la última cara",
}

Part = Union[Algorithm, str]


def _quarter_turns(count: int, start_layer: int, layer_count: int) -> Algorithm:
    """`count` cuartos de vuelta horarios alrededor de Y (3 se hace como uno antihorario).

    Un giro horario en Y lleva cada cara lateral al índice anterior (frente -> izquierda).
    """
    count %= 4
    algo = Algorithm()
    if count == 3:
        return algo.add_step(Axis.Y_AXIS, Direction.COUNTER_CLOCKWISE, start_layer, layer_count)
    for _ in range(count):
        algo.add_step(Axis.Y_AXIS, Direction.CLOCKWISE, start_layer, layer_count)
    return algo


def whole_y(count: int) -> Algorithm:
    return _quarter_turns(count, 0, SIZE)


def layer_y(layer: int, count: int) -> Algorithm:
    return _quarter_turns(count, layer, 1)


def sequence(*parts: Part) -> Algorithm:
    algo = Algorithm()
    for part in parts:
        algo.append(parse_algorithm(part, SIZE) if isinstance(part, str) else part)
    return algo


def slot_of(face_a: int, face_b: int) -> int:
    """Índice de la ranura (primera cara del par) formada por dos caras laterales adyacentes.

    Raises:
        SolverDeadEnd: Si las caras no son adyacentes.
    """
    if (face_b - face_a) % 4 == 1:
        return face_a
    if (face_a - face_b) % 4 == 1:
        return face_b
    raise SolverDeadEnd(f"Las caras {face_a} y {face_b} no son adyacentes")


class LayerSolver(SolverStrategy):
    """Método de capas en siete fases para el cubo de 3x3x3.

    Cada invocación inspecciona la coloración actual, encuentra el primer
    problema de la fase en curso y devuelve un algoritmo corto que lo corrige.
    Cuando una fase no tiene nada para corregir se pasa a la siguiente. Entre
    la segunda y la tercera fase el cubo se da vuelta (z2) para que la cara
    resuelta quede abajo.
    """

    name = "layer"

    def __init__(self) -> None:
        self.phase: SolveState = SolveState.NONE
        self.steps: int = 0
        self.max_steps: int = 0
        self._engine: Optional[TurnEngine] = None

    # --------------------------
    # SolverStrategy
    # --------------------------
    def start(self, engine: TurnEngine) -> bool:
        if not engine.geometry.is_3x3x3:
            engine.send_message("El método de capas solo resuelve cubos de 3x3x3")
            return False
        self._engine = engine
        self.steps = 0
        self.max_steps = engine.config.max_solver_steps
        if engine.geometry.is_solved():
            self.phase = SolveState.NONE
            engine.finish_solving()
            return True
        self._enter(SolveState.FIRST_FACE_CROSS)
        self._advance()
        return True

    def update(self, engine: TurnEngine) -> None:
        self._engine = engine
        if self.phase is SolveState.NONE:
            raise InvariantViolation("update() sin una resolución en curso")
        self._advance()

    def cancel(self) -> None:
        self.phase = SolveState.NONE
        self._engine = None

    # --------------------------
    # Ciclo de fases
    # --------------------------
    @property
    def geometry(self) -> CubeGeometry:
        if self._engine is None:
            raise InvariantViolation("El solver no está asociado a un motor")
        return self._engine.geometry

    def _enter(self, phase: SolveState) -> None:
        self.phase = phase
        _LOGGER.debug("Fase %s", phase.value)
        self._engine.send_message(PHASE_MESSAGES[phase])

    def _advance(self) -> None:
        while True:
            self.steps += 1
            if self.steps > self.max_steps:
                raise SolverDeadEnd(
                    f"Se superaron {self.max_steps} pasos en la fase {self.phase.value}"
                )
            algo = self._handlers()[self.phase]()
            if algo is not None:
                self._submit(algo)
                return
            if not self._next_phase():
                return

    def _submit(self, algo: Algorithm) -> None:
        if len(algo) == 0:
            raise InvariantViolation(f"Algoritmo vacío en la fase {self.phase.value}")
        if not self._engine.set_algorithm(algo):
            raise InvariantViolation("El motor rechazó el algoritmo del solver")

    def _next_phase(self) -> bool:
        """Pasa a la fase siguiente. False si hay que esperar o si terminó."""
        if self.geometry.is_solved():
            self.phase = SolveState.NONE
            self._engine.finish_solving()
            return False
        if self.phase is SolveState.LAST_FACE_CORNER_ALIGN:
            raise SolverDeadEnd("Todas las fases terminaron pero el cubo no está resuelto")
        following = PHASE_ORDER[PHASE_ORDER.index(self.phase) + 1]
        self._enter(following)
        if following is SolveState.MIDDLE_LAYER:
            # La cara resuelta pasa abajo.
            self._submit(Algorithm.rotate_whole(Axis.Z_AXIS, Direction.CLOCKWISE, SIZE, 2))
            return False
        return True

    def _handlers(self) -> Dict[SolveState, Callable[[], Optional[Algorithm]]]:
        return {
            SolveState.FIRST_FACE_CROSS: self._first_face_cross,
            SolveState.FIRST_FACE_CORNERS: self._first_face_corners,
            SolveState.MIDDLE_LAYER: self._middle_layer,
            SolveState.LAST_FACE_CROSS: self._last_face_cross,
            SolveState.LAST_FACE_CROSS_ALIGN: self._last_face_cross_align,
            SolveState.LAST_FACE_CORNERS: self._last_face_corners,
            SolveState.LAST_FACE_CORNER_ALIGN: self._last_face_corner_align,
        }

    # --------------------------
    # Consultas sobre piezas
    # --------------------------
    def _find_piece(self, colors: Set[Color]) -> Tuple[int, Piece]:
        """Busca la pieza con exactamente esos colores recorriendo las capas Y.

        Returns:
            (índice de capa Y, pieza)

        Raises:
            SolverDeadEnd: Si no existe.
        """
        for index, pieces in enumerate(self.geometry.layers[Axis.Y_AXIS]):
            for piece in pieces:
                if len(piece.squares) == len(colors) and set(piece.colors()) == colors:
                    return index, piece
        raise SolverDeadEnd(f"No se encontró la pieza {sorted(colors)}")

    def _is_aligned(self, piece: Piece) -> bool:
        return all(sq.color == self.geometry.center_color(sq.face) for sq in piece.squares)

    def _is_positioned(self, piece: Piece) -> bool:
        centers = {self.geometry.center_color(sq.face) for sq in piece.squares}
        return set(piece.colors()) == centers

    def _top_piece(self, position: int) -> Piece:
        return self.geometry.piece_of(self.geometry.faces[FACE_TOP][position])

    def _bottom_piece(self, position: int) -> Piece:
        return self.geometry.piece_of(self.geometry.faces[FACE_BOTTOM][position])

    # --------------------------
    # Fase 1: cruz de la primera cara
    # --------------------------
    def _first_face_cross(self) -> Optional[Algorithm]:
        g = self.geometry
        cross = g.center_color(FACE_TOP)
        for side in SIDE_FACES:
            top_sq = g.faces[FACE_TOP][TOP_EDGE_POS[side]]
            side_sq = g.faces[side][1]
            if top_sq.color == cross and side_sq.color == g.center_color(side):
                continue
            if side != FACE_FRONT:
                return whole_y(side)
            return self._bring_cross_edge(cross, g.center_color(FACE_FRONT))
        return None

    def _bring_cross_edge(self, cross: Color, front: Color) -> Algorithm:
        layer, piece = self._find_piece({cross, front})
        cross_sq = piece.square_with_color(cross)
        other_sq = piece.square_with_color(front)

        if layer == INNER:
            if cross_sq.face == FACE_BOTTOM:
                return sequence(layer_y(INNER, other_sq.face), "F2")
            side = cross_sq.face
            if side in (FACE_FRONT, FACE_LEFT):
                pre = layer_y(INNER, 1) if side == FACE_FRONT else Algorithm()
                return sequence(pre, "L' F L")
            pre = layer_y(INNER, 1) if side == FACE_BACK else Algorithm()
            return sequence(pre, "R F' R'")

        if layer == MIDDLE:
            slot = slot_of(cross_sq.face, other_sq.face)
            return sequence(MIDDLE_EDGE_TO_FRONT[(slot, cross_sq.face)])

        on_top = cross_sq.face == FACE_TOP
        side = other_sq.face if on_top else cross_sq.face
        key = (side, on_top)
        if key not in TOP_EDGE_TO_FRONT:
            raise InvariantViolation(f"Arista ya resuelta en UF: {key}")
        return sequence(TOP_EDGE_TO_FRONT[key])

    # --------------------------
    # Fase 2: esquinas de la primera cara
    # --------------------------
    def _first_face_corners(self) -> Optional[Algorithm]:
        g = self.geometry
        cross = g.center_color(FACE_TOP)

        # Esquinas abajo con el color de arriba en una cara lateral.
        for slot, pos in BOTTOM_CORNER_POS.items():
            piece = self._bottom_piece(pos)
            cross_sq = piece.square_with_color(cross)
            if cross_sq is None or cross_sq.face == FACE_BOTTOM:
                continue
            side_sq = next(
                sq for sq in piece.squares if sq is not cross_sq and sq.face != FACE_BOTTOM
            )
            target = g.face_with_center(side_sq.color)
            turn = (cross_sq.face - side_sq.face) % 4
            if turn == 1:
                insert = "R' D' R"
            elif turn == 3:
                insert = "L D L'"
            else:
                raise SolverDeadEnd(f"Esquina inválida en la ranura {slot}")
            return sequence(
                whole_y(target), layer_y(INNER, side_sq.face - target), insert
            )

        # Esquinas abajo con el color de arriba mirando hacia abajo.
        for slot, pos in BOTTOM_CORNER_POS.items():
            piece = self._bottom_piece(pos)
            cross_sq = piece.square_with_color(cross)
            if cross_sq is None:
                continue
            faces = [g.face_with_center(sq.color) for sq in piece.squares if sq is not cross_sq]
            target = slot_of(faces[0], faces[1])
            return sequence(whole_y(target), layer_y(INNER, slot - target), "R' D2 R")

        # Esquinas arriba en la ranura equivocada o giradas.
        for slot, pos in TOP_CORNER_POS.items():
            piece = self._top_piece(pos)
            if self._is_aligned(piece):
                continue
            cross_sq = piece.square_with_color(cross)
            extract = "R' D' R"
            if cross_sq is not None:
                face = cross_sq.face if cross_sq.face == FACE_TOP else (cross_sq.face - slot) % 4
                if face in (FACE_TOP, FACE_FRONT):
                    extract = "F D F'"
            return sequence(whole_y(slot), extract)
        return None

    # --------------------------
    # Fase 3: capa del medio (la cara resuelta está abajo)
    # --------------------------
    def _middle_layer(self) -> Optional[Algorithm]:
        g = self.geometry
        last = g.center_color(FACE_TOP)

        for side in SIDE_FACES:
            piece = self._top_piece(TOP_EDGE_POS[side])
            if piece.has_color(last):
                continue
            side_sq = piece.square_on_face(side)
            top_sq = piece.square_on_face(FACE_TOP)
            target = g.face_with_center(side_sq.color)
            slot = slot_of(target, g.face_with_center(top_sq.color))
            insert = INSERT_FRONT if target == slot else INSERT_RIGHT
            return sequence(whole_y(slot), layer_y(OUTER, side - target), insert)

        middle = g.layers[Axis.Y_AXIS][MIDDLE]
        for slot in range(4):
            piece = middle[MIDDLE_EDGE_INDEX[slot]]
            if not self._is_aligned(piece):
                return sequence(whole_y(slot), INSERT_FRONT)
        return None

    # --------------------------
    # Fase 4: cruz de la última cara
    # --------------------------
    def _last_face_cross(self) -> Optional[Algorithm]:
        g = self.geometry
        last = g.center_color(FACE_TOP)
        up = [g.faces[FACE_TOP][TOP_EDGE_POS[side]].color == last for side in SIDE_FACES]
        count = sum(up)
        if count == 4:
            return None
        if count == 0:
            return sequence(ORIENT_EDGES)
        if count != 2:
            raise SolverDeadEnd(f"{count} aristas orientadas en la última cara")
        if up[FACE_LEFT] and up[FACE_RIGHT]:
            return sequence(ORIENT_EDGES)
        if up[FACE_FRONT] and up[FACE_BACK]:
            return sequence("U", ORIENT_EDGES)
        # Forma de L: se lleva a atrás-izquierda.
        first = next(side for side in SIDE_FACES if up[side] and up[(side + 1) % 4])
        return sequence(layer_y(OUTER, first - FACE_BACK), ORIENT_EDGES)

    # --------------------------
    # Fase 5: alinear la cruz de la última cara
    # --------------------------
    def _last_face_cross_align(self) -> Optional[Algorithm]:
        g = self.geometry
        offsets = []
        for side in SIDE_FACES:
            color = g.faces[side][1].color
            offsets.append((g.face_with_center(color) - side) % 4)
        if all(o == 0 for o in offsets):
            return None

        best = max(range(4), key=lambda v: (offsets.count(v), v == 0))
        if best != 0:
            return layer_y(OUTER, -best)

        matched = [side for side in SIDE_FACES if offsets[side] == 0]
        if len(matched) != 2:
            raise SolverDeadEnd(f"Cruz de la última cara imposible: {offsets}")
        a, b = matched
        if (b - a) % 4 == 2:
            # Aristas correctas opuestas: se dejan a izquierda y derecha.
            pre = whole_y(1) if a == FACE_FRONT else Algorithm()
            return sequence(pre, SWAP_EDGES)
        first = slot_of(a, b)
        return sequence(whole_y(first - 1), SWAP_EDGES)

    # --------------------------
    # Fase 6: ubicar las esquinas de la última cara
    # --------------------------
    def _last_face_corners(self) -> Optional[Algorithm]:
        placed = [self._is_positioned(self._top_piece(TOP_CORNER_POS[slot])) for slot in range(4)]
        if all(placed):
            return None
        if not any(placed):
            return sequence(CYCLE_CORNERS)
        slot = placed.index(True)
        return sequence(whole_y(slot), CYCLE_CORNERS)

    # --------------------------
    # Fase 7: orientar las esquinas de la última cara
    # --------------------------
    def _last_face_corner_align(self) -> Optional[Algorithm]:
        g = self.geometry
        last = g.center_color(FACE_TOP)
        if g.faces[FACE_TOP][TOP_CORNER_POS[0]].color != last:
            return sequence(TWIST_CORNER)
        if all(self._is_aligned(self._top_piece(pos)) for pos in TOP_CORNER_POS.values()):
            return None
        return sequence("U")
