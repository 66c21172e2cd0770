# rubik_engine/app/ticker.py
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from rubik_engine.config import TICK_INTERVAL_MS
from rubik_engine.engine.turn_engine import TurnEngine


class CubeTicker(QObject):
    """Genera los ticks del motor con un QTimer (~60 FPS por defecto)."""

    ticked = Signal()

    def __init__(
        self,
        engine: TurnEngine,
        interval_ms: int = TICK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.engine = engine
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_tick)

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def interval(self) -> int:
        return self._timer.interval()

    def _on_tick(self) -> None:
        self.engine.tick()
        self.ticked.emit()
