# rubik_engine/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from rubik_engine.core.errors import InvalidInputError

# Velocidades (grados por tick)
SPEED_SLOW = 0
SPEED_NORMAL = 1
SPEED_FAST = 2

ANGLE_DELTA_SLOW = 2.0
ANGLE_DELTA_NORMAL = 4.0
ANGLE_DELTA_FAST = 10.0

MAX_UNDO_COUNT = 40
TICK_INTERVAL_MS = 16  # ~60 FPS
MAX_SOLVER_STEPS = 1000
DEFAULT_SCRAMBLE_LENGTH = 25

ENV_PREFIX = "RUBIK_ENGINE_"


@dataclass(frozen=True)
class EngineConfig:
    """Parámetros del motor de giros.

    Attributes:
        angle_deltas: Grados por tick para velocidad lenta, normal y rápida.
        speed: Velocidad inicial (SPEED_SLOW, SPEED_NORMAL o SPEED_FAST).
        max_undo_count: Capacidad de las pilas de deshacer/rehacer.
        tick_interval_ms: Intervalo del timer que genera los ticks.
        max_solver_steps: Reentradas máximas del solver antes de abandonar.
        scramble_length: Largo por defecto de una mezcla.
    """

    angle_deltas: Tuple[float, float, float] = (
        ANGLE_DELTA_SLOW,
        ANGLE_DELTA_NORMAL,
        ANGLE_DELTA_FAST,
    )
    speed: int = SPEED_NORMAL
    max_undo_count: int = MAX_UNDO_COUNT
    tick_interval_ms: int = TICK_INTERVAL_MS
    max_solver_steps: int = MAX_SOLVER_STEPS
    scramble_length: int = DEFAULT_SCRAMBLE_LENGTH

    def __post_init__(self) -> None:
        if self.speed not in (SPEED_SLOW, SPEED_NORMAL, SPEED_FAST):
            raise InvalidInputError(f"Velocidad inválida: {self.speed}")
        if self.max_undo_count < 1:
            raise InvalidInputError("max_undo_count debe ser >= 1")
        if self.tick_interval_ms < 1:
            raise InvalidInputError("tick_interval_ms debe ser >= 1")

    def angle_delta(self, speed: Optional[int] = None) -> float:
        speed = self.speed if speed is None else speed
        if speed not in (SPEED_SLOW, SPEED_NORMAL, SPEED_FAST):
            raise InvalidInputError(f"Velocidad inválida: {speed}")
        return self.angle_deltas[speed]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
        """Construye la configuración leyendo variables RUBIK_ENGINE_*.

        Soporta TICK_INTERVAL_MS, SPEED y MAX_UNDO_COUNT.

        Raises:
            InvalidInputError: Si alguna variable no es un entero válido.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        overrides = {}
        for field_name in ("tick_interval_ms", "speed", "max_undo_count"):
            raw = environ.get(ENV_PREFIX + field_name.upper())
            if raw is None:
                continue
            try:
                overrides[field_name] = int(raw)
            except ValueError:
                raise InvalidInputError(
                    f"{ENV_PREFIX}{field_name.upper()} debe ser entero: {raw!r}"
                ) from None
        return replace(config, **overrides)
