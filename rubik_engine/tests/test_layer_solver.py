# rubik_engine/tests/test_layer_solver.py
import random
import unittest

from rubik_engine.config import SPEED_FAST, EngineConfig
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.engine.turn_engine import CubeState, TurnEngine
from rubik_engine.logic.scramble import generate_scramble
from rubik_engine.solve import LayerSolver, UnsupportedSolver, select_solver
from rubik_engine.solve.facelets import SOLVED_FACELETS, from_facelets
from rubik_engine.solve.layer_solver import SolveState, slot_of


class Listener:
    def __init__(self):
        self.messages = []
        self.solved = 0

    def on_rotation_completed(self):
        pass

    def on_message(self, text):
        self.messages.append(text)

    def on_solved(self):
        self.solved += 1

    def on_algorithm_completed(self):
        pass


def solve(engine, limit=500000):
    """Corre la resolución completa tick a tick."""
    started = engine.solve()
    ticks = 0
    while engine.is_busy:
        engine.tick()
        ticks += 1
        if ticks > limit:
            raise AssertionError("la resolución no terminó")
    return started


def make_engine(geometry=None, seed=0):
    listener = Listener()
    engine = TurnEngine(geometry, EngineConfig(speed=SPEED_FAST), random.Random(seed), listener)
    return engine, listener


class TestSelectSolver(unittest.TestCase):
    def test_3x3x3_uses_layer_solver(self):
        self.assertIsInstance(select_solver(CubeGeometry()), LayerSolver)

    def test_other_sizes_unsupported(self):
        self.assertIsInstance(select_solver(CubeGeometry(4, 4, 4)), UnsupportedSolver)
        self.assertIsInstance(select_solver(CubeGeometry(3, 3, 2)), UnsupportedSolver)

    def test_slot_of(self):
        self.assertEqual(slot_of(0, 1), 0)
        self.assertEqual(slot_of(0, 3), 3)
        self.assertEqual(slot_of(2, 1), 1)


class TestLayerSolver(unittest.TestCase):
    def test_solved_string_needs_no_moves(self):
        engine, listener = make_engine(from_facelets(SOLVED_FACELETS))
        self.assertTrue(solve(engine))
        self.assertEqual(engine.move_count, 0)
        self.assertEqual(engine.state, CubeState.IDLE)
        self.assertEqual(listener.solved, 1)

    def test_single_quarter_turns(self):
        for token in ("R", "R'", "U", "U'", "F", "F'", "L", "L'", "D", "D'", "B", "B'"):
            engine, listener = make_engine()
            engine.apply_sequence(token)
            self.assertTrue(solve(engine), token)
            self.assertTrue(engine.is_solved(), token)
            self.assertEqual(engine.state, CubeState.IDLE)
            self.assertEqual(listener.solved, 1, token)

    def test_known_scrambles(self):
        scrambles = [
            "R U R' U'",
            "F R U' R' U' R U R' F' R U R' U' R' F R F'",
            "D2 B L' F2 U R2 D' B2 L U'",
            "L2 D' R F' U2 B' D R2 F L' B2 U",
        ]
        for text in scrambles:
            engine, _ = make_engine()
            engine.apply_sequence(text)
            solve(engine)
            self.assertTrue(engine.is_solved(), text)

    def test_random_scrambles(self):
        for seed in range(8):
            engine, listener = make_engine(seed=seed)
            engine.apply_sequence(generate_scramble(25, seed=seed))
            solve(engine)
            self.assertTrue(engine.is_solved(), seed)
            self.assertFalse(any("Sin solución" in m for m in listener.messages), seed)

    def test_scramble_with_slice_moves(self):
        for seed in (3, 4):
            engine, _ = make_engine(seed=seed)
            engine.randomize(30)
            solve(engine)
            self.assertTrue(engine.is_solved(), seed)

    def test_phase_messages(self):
        engine, listener = make_engine()
        engine.apply_sequence("R U F' L D2 B")
        solve(engine)
        self.assertIn("Armando la cruz de la primera cara", listener.messages)
        self.assertTrue(listener.messages[-1].startswith("Cubo resuelto en"))

    def test_cancel_resets_phase(self):
        solver = LayerSolver()
        solver.phase = SolveState.MIDDLE_LAYER
        solver.cancel()
        self.assertEqual(solver.phase, SolveState.NONE)


if __name__ == "__main__":
    unittest.main()
