# main.py
from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication, QTimer

from rubik_engine.app.controller import CubeController
from rubik_engine.config import SPEED_FAST, EngineConfig
from rubik_engine.core.geometry import CubeGeometry


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mezcla y resuelve un cubo sin interfaz gráfica")
    parser.add_argument("--size", type=int, nargs=3, default=[3, 3, 3], metavar=("X", "Y", "Z"))
    parser.add_argument("--scramble", type=int, default=None, help="cantidad de giros de la mezcla")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--notation", action="store_true", help="mezclar con una secuencia en notación")
    parser.add_argument("--optimal", action="store_true", help="usar la búsqueda de kociemba")
    parser.add_argument("--timeout", type=float, default=120.0, help="segundos antes de abandonar")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Punto de entrada: mezcla el cubo, lo resuelve animado por ticks y termina.

    Returns:
        0 si el cubo terminó resuelto, 1 si no.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QCoreApplication(sys.argv[:1])
    config = EngineConfig.from_env()
    controller = CubeController(
        geometry=CubeGeometry(*args.size),
        config=config,
        rng=random.Random(args.seed),
    )
    controller.engine.set_speed(SPEED_FAST)
    controller.message.connect(lambda text: print(text))
    controller.search_failed.connect(lambda _msg: app.exit(1))
    controller.algorithm_completed.connect(lambda: app.exit(0 if controller.engine.is_solved() else 1))

    def on_solution(moves: str) -> None:
        if not moves:
            app.exit(0)

    controller.solution_found.connect(on_solution)

    if args.notation:
        print(f"Mezcla: {controller.scramble_notation(args.scramble)}")
    else:
        controller.scramble(args.scramble)
    controller.start()
    if args.optimal:
        started = controller.find_optimal_solution()
    else:
        started = controller.solve()
    if not started or not (controller.engine.is_busy or controller.is_searching()):
        controller.shutdown()
        return 0 if controller.engine.is_solved() else 1

    QTimer.singleShot(int(args.timeout * 1000), lambda: app.exit(1))
    code = app.exec()
    controller.shutdown()
    print(f"Movimientos: {controller.engine.move_count}")
    return code


if __name__ == "__main__":
    sys.exit(main())
