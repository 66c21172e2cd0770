# rubik_engine/logic/history.py
from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from rubik_engine.core.rotation import Rotation


class MoveHistory:
    """Pilas acotadas de deshacer/rehacer.

    Cada entrada es el *inverso* del giro que la produjo. Al superar la
    capacidad se descarta la entrada más vieja.
    """

    def __init__(self, capacity: int = 40) -> None:
        self.capacity: int = capacity
        self._undo: Deque[Rotation] = deque(maxlen=capacity)
        self._redo: Deque[Rotation] = deque(maxlen=capacity)

    def record(self, rotation: Rotation) -> None:
        """Registra un giro manual nuevo; invalida la pila de rehacer."""
        self._undo.append(rotation.inverse())
        self._redo.clear()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def pop_undo(self) -> Optional[Rotation]:
        """Saca el giro a ejecutar para deshacer y deja su inverso en rehacer."""
        if not self._undo:
            return None
        rotation = self._undo.pop()
        self._redo.append(rotation.inverse())
        return rotation.duplicate()

    def pop_redo(self) -> Optional[Rotation]:
        if not self._redo:
            return None
        rotation = self._redo.pop()
        self._undo.append(rotation.inverse())
        return rotation.duplicate()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    @property
    def undo_entries(self) -> List[Rotation]:
        return list(self._undo)

    @property
    def redo_entries(self) -> List[Rotation]:
        return list(self._redo)
