# rubik_engine/engine/turn_engine.py
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, List, Optional, Protocol, Union

from rubik_engine.config import EngineConfig
from rubik_engine.core.errors import InvalidInputError, OutOfRangeError, SolverDeadEnd
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.core.model import Color, Square
from rubik_engine.core.rotation import AXIS_VECTORS, Axis, Direction, Rotation
from rubik_engine.logic.algorithm import Algorithm
from rubik_engine.logic.history import MoveHistory
from rubik_engine.logic.moves import parse_algorithm, rotation_to_token
from rubik_engine.logic.scramble import random_rotation
from rubik_engine.solve import SolverStrategy, select_solver

_LOGGER = logging.getLogger(__name__)


class CubeState(Enum):
    IDLE = "idle"
    RANDOMIZE = "randomize"
    SOLVING = "solving"
    HELPING = "helping"
    TESTING = "testing"


class RotateMode(Enum):
    NONE = "none"
    MANUAL = "manual"
    RANDOM = "random"
    ALGORITHM = "algorithm"
    REPEAT = "repeat"


class CubeListener(Protocol):
    """Callbacks que el motor dispara sincrónicamente desde `tick()`."""

    def on_rotation_completed(self) -> None: ...

    def on_message(self, text: str) -> None: ...

    def on_solved(self) -> None: ...

    def on_algorithm_completed(self) -> None: ...


class CubeRenderer(Protocol):
    """Dibuja un sticker, opcionalmente rotado `angle` grados alrededor de (x, y, z)."""

    def draw_square(
        self, square: Square, angle: float = 0.0, x: float = 0.0, y: float = 0.0, z: float = 0.0
    ) -> None: ...


class NullListener:
    def on_rotation_completed(self) -> None:
        pass

    def on_message(self, text: str) -> None:
        pass

    def on_solved(self) -> None:
        pass

    def on_algorithm_completed(self) -> None:
        pass


SolverFactory = Callable[[CubeGeometry], SolverStrategy]


class TurnEngine:
    """Máquina de estados del cubo, avanzada por ticks.

    Solo puede haber un giro activo. Cada `tick()` avanza su ángulo; al llegar
    al máximo se confirman los colores en la geometría y se elige la próxima
    acción según el modo (manual, algoritmo, aleatorio o repetición).

    Args:
        geometry: Geometría a controlar (por defecto un 3x3x3).
        config: Parámetros (velocidades, capacidad del historial, etc).
        rng: Fuente aleatoria inyectable para mezclas.
        listener: Receptor de notificaciones.
        solver_factory: Elige la estrategia de resolución según la geometría.
    """

    def __init__(
        self,
        geometry: Optional[CubeGeometry] = None,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        listener: Optional[CubeListener] = None,
        solver_factory: SolverFactory = select_solver,
    ) -> None:
        self.geometry: CubeGeometry = geometry or CubeGeometry()
        self.config: EngineConfig = config or EngineConfig()
        self.rng: random.Random = rng or random.Random()
        self.listener: CubeListener = listener or NullListener()
        self._solver_factory: SolverFactory = solver_factory

        self._initial_sizes = (self.geometry.size_x, self.geometry.size_y, self.geometry.size_z)

        self.state: CubeState = CubeState.IDLE
        self.mode: RotateMode = RotateMode.NONE
        self.rotation: Rotation = Rotation()
        self.speed: int = self.config.speed
        self.angle_delta: float = self.config.angle_delta()
        self.history: MoveHistory = MoveHistory(self.config.max_undo_count)
        self.move_count: int = 0
        self.randomized_moves: List[Rotation] = []

        self._algorithm: Optional[Algorithm] = None
        self._solver: Optional[SolverStrategy] = None
        self._undoing: bool = False

    # --------------------------
    # Consultas
    # --------------------------
    @property
    def is_busy(self) -> bool:
        return self.state is not CubeState.IDLE or self.mode is not RotateMode.NONE

    @property
    def solver(self) -> Optional[SolverStrategy]:
        return self._solver

    def is_solved(self) -> bool:
        return self.geometry.is_solved()

    def axis_sizes(self) -> List[int]:
        return [self.geometry.size_x, self.geometry.size_y, self.geometry.size_z]

    def max_angle(self, rotation: Rotation) -> float:
        """90° para ejes simétricos o giros del cubo completo, 180° si no."""
        size = self.geometry.axis_size(rotation.axis)
        if self.geometry.is_symmetric_around_axis(rotation.axis) or rotation.layer_count == size:
            return 90.0
        return 180.0

    # --------------------------
    # Tick
    # --------------------------
    def tick(self) -> None:
        """Avanza la animación un paso y confirma el giro al completarse."""
        rotation = self.rotation
        if not rotation.active:
            return
        max_angle = self.max_angle(rotation)
        if abs(rotation.angle) > max_angle - 0.01:
            self._finish_rotation()
            return
        rotation.increment(self.angle_delta)
        if abs(rotation.angle) > max_angle:
            rotation.angle = max_angle if rotation.angle > 0 else -max_angle

    def _finish_rotation(self) -> None:
        rotation = self.rotation
        whole = rotation.layer_count == self.geometry.axis_size(rotation.axis)
        self.commit(rotation)

        if self._undoing:
            self._undoing = False
            if not whole:
                self.move_count -= 1
        elif not whole:
            self.move_count += 1

        if self.mode is RotateMode.ALGORITHM:
            if self._algorithm is None or self._algorithm.is_done():
                rotation.reset()
                self._update_algorithm()
            else:
                self._start_rotation(self._algorithm.next_step())
        elif self.mode is RotateMode.REPEAT:
            rotation.start()
        elif self.mode is RotateMode.RANDOM:
            self._start_rotation(random_rotation(self.rng, self.axis_sizes()))
        else:
            rotation.reset()
            self.mode = RotateMode.NONE
            self.state = CubeState.IDLE

        self.listener.on_rotation_completed()
        if self.state is CubeState.IDLE and self.geometry.is_solved():
            self.listener.on_solved()

    def _start_rotation(self, rotation: Optional[Rotation]) -> None:
        if rotation is None:
            self.rotation = Rotation()
            return
        _LOGGER.debug("Giro %s (modo %s)", self.describe(rotation), self.mode.value)
        self.rotation = rotation
        rotation.start()

    def commit(self, rotation: Rotation) -> None:
        """Aplica un giro a los colores sin animación."""
        size = self.geometry.axis_size(rotation.axis)
        if rotation.layer_count == size and not self.geometry.is_symmetric_around_axis(rotation.axis):
            self.geometry.reorient(rotation.axis, rotation.direction)
            return
        for layer in rotation.layers():
            self.geometry.rotate_layer(rotation.axis, rotation.direction, layer)

    # --------------------------
    # Giros manuales e historial
    # --------------------------
    def _reject(self, action: str) -> bool:
        text = f"No se puede {action} ahora (estado {self.state.value}, modo {self.mode.value})"
        _LOGGER.warning(text)
        self.listener.on_message(text)
        return False

    def rotate(
        self,
        axis: Union[Axis, Rotation],
        direction: Direction = Direction.CLOCKWISE,
        start_layer: int = 0,
        layer_count: int = 1,
    ) -> bool:
        """Inicia un giro manual animado y lo registra en el historial.

        Returns:
            True si el giro comenzó; False si se rechazó por el estado actual.

        Raises:
            OutOfRangeError: Si la capa inicial no existe en el eje.
        """
        if isinstance(axis, Rotation):
            axis, direction, start_layer, layer_count = (
                axis.axis, axis.direction, axis.start_layer, axis.layer_count,
            )
        size = self.geometry.axis_size(axis)
        if not 0 <= start_layer < size:
            raise OutOfRangeError(f"Capa {start_layer} fuera de rango (tamaño {size})")
        if layer_count < 1:
            raise InvalidInputError(f"Cantidad de capas inválida: {layer_count}")
        if self.is_busy:
            return self._reject("girar")

        rotation = Rotation(axis, direction, start_layer, min(layer_count, size - start_layer))
        self.history.record(rotation)
        self.mode = RotateMode.MANUAL
        self._start_rotation(rotation)
        return True

    def undo(self) -> bool:
        if self.is_busy:
            return self._reject("deshacer")
        rotation = self.history.pop_undo()
        if rotation is None:
            _LOGGER.debug("Nada para deshacer")
            return False
        self._undoing = True
        self.mode = RotateMode.MANUAL
        self._start_rotation(rotation)
        return True

    def redo(self) -> bool:
        if self.is_busy:
            return self._reject("rehacer")
        rotation = self.history.pop_redo()
        if rotation is None:
            _LOGGER.debug("Nada para rehacer")
            return False
        self.mode = RotateMode.MANUAL
        self._start_rotation(rotation)
        return True

    # --------------------------
    # Algoritmos
    # --------------------------
    def set_algorithm(self, algorithm: Algorithm) -> bool:
        """Comienza a ejecutar un algoritmo, un paso por giro.

        Solo es válido en SOLVING, TESTING o HELPING y sin otro algoritmo activo.
        """
        if self._algorithm is not None and not self._algorithm.is_done():
            return self._reject("iniciar otro algoritmo")
        if self.state not in (CubeState.SOLVING, CubeState.TESTING, CubeState.HELPING):
            return self._reject("ejecutar un algoritmo")
        if len(algorithm) == 0:
            _LOGGER.warning("Algoritmo vacío ignorado")
            return False

        algorithm.rewind()
        self._algorithm = algorithm
        self.mode = RotateMode.ALGORITHM
        self._start_rotation(algorithm.next_step())
        return True

    def _update_algorithm(self) -> None:
        """El algoritmo actual terminó: volver al estado que lo pidió."""
        self.mode = RotateMode.NONE
        self._algorithm = None
        if self.state in (CubeState.TESTING, CubeState.HELPING):
            self.state = CubeState.IDLE
            self.listener.on_algorithm_completed()
        elif self.state is CubeState.SOLVING:
            if self._solver is None:
                self.finish_solving()
            else:
                self._run_solver(self._solver.update)

    def play_sequence(self, text: str) -> bool:
        """Ejecuta una secuencia en notación estándar (estado TESTING).

        Raises:
            InvalidInputError: Si la secuencia tiene tokens inválidos.
        """
        algorithm = parse_algorithm(text, self.axis_sizes())
        if self.is_busy:
            return self._reject("ejecutar la secuencia")
        if len(algorithm) == 0:
            return False
        self.state = CubeState.TESTING
        if not self.set_algorithm(algorithm):
            self.state = CubeState.IDLE
            return False
        return True

    def apply_sequence(self, text: str) -> bool:
        """Aplica una secuencia en notación al instante, sin animación ni historial.

        Raises:
            InvalidInputError: Si la secuencia tiene tokens inválidos.
        """
        algorithm = parse_algorithm(text, self.axis_sizes())
        if self.is_busy:
            return self._reject("aplicar la secuencia")
        for step in algorithm.steps:
            self.commit(step)
        return True

    def start_repeat(self, rotation: Rotation) -> bool:
        """Repite el mismo giro indefinidamente hasta `stop_repeat()`."""
        size = self.geometry.axis_size(rotation.axis)
        if not 0 <= rotation.start_layer < size:
            raise OutOfRangeError(f"Capa {rotation.start_layer} fuera de rango (tamaño {size})")
        if self.is_busy:
            return self._reject("repetir")
        self.mode = RotateMode.REPEAT
        self._start_rotation(rotation.duplicate())
        return True

    def stop_repeat(self) -> bool:
        if self.mode is not RotateMode.REPEAT:
            return False
        # El próximo fin de giro vuelve a IDLE.
        self.mode = RotateMode.MANUAL
        return True

    # --------------------------
    # Mezcla
    # --------------------------
    def randomize(self, count: int) -> bool:
        """Mezcla instantánea de `count` giros (sin animación)."""
        if count < 0:
            raise InvalidInputError(f"Cantidad de giros inválida: {count}")
        if self.is_busy:
            return self._reject("mezclar")
        moves: List[Rotation] = []
        while len(moves) < count:
            # Se genera con los tamaños actuales: un giro completo puede reorientar el cubo.
            rotation = random_rotation(self.rng, self.axis_sizes())
            if moves and rotation == moves[-1].inverse():
                continue
            self.commit(rotation)
            moves.append(rotation)
        self.randomized_moves = moves
        self.move_count = 0
        self.history.clear()
        _LOGGER.info("Cubo mezclado con %d giros", count)
        return True

    def new_game(self, count: int) -> bool:
        self.reset()
        return self.randomize(count)

    def start_randomize(self) -> bool:
        """Mezcla animada: giros al azar hasta `stop_randomize()`."""
        if self.is_busy:
            return self._reject("mezclar")
        self.history.clear()
        self.mode = RotateMode.RANDOM
        self.state = CubeState.RANDOMIZE
        self._start_rotation(random_rotation(self.rng, self.axis_sizes()))
        return True

    def stop_randomize(self) -> bool:
        if self.state is not CubeState.RANDOMIZE:
            _LOGGER.warning("No hay mezcla en curso (estado %s)", self.state.value)
            return False
        self.mode = RotateMode.NONE
        if self.rotation.active:
            self._finish_rotation()
        self.rotation.reset()
        self.state = CubeState.IDLE
        self.move_count = 0
        return True

    def help_me(self) -> bool:
        """Vuelve a aplicar la mezcla registrada y la deshace animada (estado HELPING)."""
        if not self.randomized_moves:
            self.send_message("No hay una mezcla para deshacer")
            return False
        if self.is_busy:
            return self._reject("ayudar")
        moves = list(self.randomized_moves)
        self.reset()
        for rotation in moves:
            self.commit(rotation)
        self.randomized_moves = moves
        self.state = CubeState.HELPING
        return self.set_algorithm(Algorithm(r.inverse() for r in reversed(moves)))

    # --------------------------
    # Resolución
    # --------------------------
    def solve(self) -> bool:
        """Resuelve el cubo con la estrategia adecuada a su tamaño."""
        if self.is_busy:
            return self._reject("resolver")
        solver = self._solver_factory(self.geometry)
        self.history.clear()
        self.move_count = 0
        self.state = CubeState.SOLVING
        self._solver = solver
        _LOGGER.info("Resolviendo con la estrategia %s", solver.name)

        started = self._run_solver(solver.start)
        if not started and self.state is CubeState.SOLVING:
            self._leave_solving()
        if self.state is CubeState.IDLE and self.geometry.is_solved():
            self.listener.on_solved()
        return started

    def _run_solver(self, step: Callable[["TurnEngine"], Optional[bool]]) -> bool:
        try:
            result = step(self)
        except SolverDeadEnd as exc:
            self._abort_solving(str(exc))
            return False
        return result is not False

    def submit_solution(self, solution: Union[str, Algorithm]) -> bool:
        """Ejecuta una solución calculada externamente como una sola operación.

        Raises:
            InvalidInputError: Si la cadena de movimientos es inválida.
        """
        if isinstance(solution, str):
            solution = parse_algorithm(solution, self.axis_sizes())
        if self.is_busy:
            return self._reject("aplicar la solución")
        if len(solution) == 0:
            self.send_message("El cubo ya está resuelto")
            return True
        self.history.clear()
        self.move_count = 0
        self.state = CubeState.SOLVING
        self._solver = None
        if not self.set_algorithm(solution):
            self._leave_solving()
            return False
        return True

    def cancel_solving(self) -> bool:
        """Cancela la resolución en el próximo fin de giro (no corta la animación)."""
        if self.state is not CubeState.SOLVING:
            return False
        if self._solver is not None:
            self._solver.cancel()
            self._solver = None
        self._algorithm = None
        if self.rotation.active:
            self.mode = RotateMode.MANUAL
        else:
            self._leave_solving()
        self.send_message("Resolución cancelada")
        return True

    def finish_solving(self) -> None:
        """Llamado por la estrategia (o al terminar una solución externa)."""
        self.send_message(f"Cubo resuelto en {self.move_count} movimientos")
        self._leave_solving()
        self.listener.on_algorithm_completed()

    def _abort_solving(self, reason: str) -> None:
        _LOGGER.warning("Sin solución: %s", reason)
        self.listener.on_message(f"Sin solución: {reason}")
        self.rotation.reset()
        self._leave_solving()

    def _leave_solving(self) -> None:
        self._solver = None
        self._algorithm = None
        self.mode = RotateMode.NONE
        self.state = CubeState.IDLE

    # --------------------------
    # Varios
    # --------------------------
    def send_message(self, text: str) -> None:
        _LOGGER.info(text)
        self.listener.on_message(text)

    def set_speed(self, speed: int) -> None:
        self.angle_delta = self.config.angle_delta(speed)
        self.speed = speed

    def reset(self) -> None:
        """Vuelve al estado resuelto y cancela todo lo que esté en curso."""
        sizes = (self.geometry.size_x, self.geometry.size_y, self.geometry.size_z)
        if sizes != self._initial_sizes:
            self.geometry = CubeGeometry(*self._initial_sizes, scheme=self.geometry.scheme)
        else:
            self.geometry.reset_colors()
        self.rotation = Rotation()
        self._undoing = False
        self._leave_solving()
        self.history.clear()
        self.move_count = 0

    def set_color(self, color: Color, face: Optional[int] = None) -> None:
        if face is None:
            self.geometry.set_color(color)
        else:
            self.geometry.set_face_color(face, color)

    def set_layer_color(self, axis: Axis, layer: int, color: Color) -> None:
        self.geometry.set_layer_color(axis, layer, color)

    def describe(self, rotation: Rotation) -> str:
        token = rotation_to_token(rotation, self.geometry.axis_size(rotation.axis))
        return token if token is not None else str(rotation)

    def draw(self, renderer: CubeRenderer) -> None:
        """Dibuja cada sticker una vez; los de las capas en giro con el ángulo actual."""
        rotation = self.rotation
        if not rotation.active:
            for sq in self.geometry.all_squares:
                renderer.draw_square(sq)
            return

        x, y, z = AXIS_VECTORS[rotation.axis]
        for index, pieces in enumerate(self.geometry.layers[rotation.axis]):
            moving = index in rotation.layers()
            for piece in pieces:
                for sq in piece.squares:
                    if moving:
                        renderer.draw_square(sq, rotation.angle, x, y, z)
                    else:
                        renderer.draw_square(sq)
