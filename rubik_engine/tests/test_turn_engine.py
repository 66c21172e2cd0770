# rubik_engine/tests/test_turn_engine.py
import random
import unittest

from rubik_engine.config import SPEED_FAST, EngineConfig
from rubik_engine.core.errors import InvalidInputError, OutOfRangeError, SolverDeadEnd
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.core.model import FACE_BACK, FACE_BOTTOM, FACE_FRONT, FACE_TOP
from rubik_engine.core.rotation import Axis, Direction, Rotation
from rubik_engine.engine.turn_engine import CubeState, RotateMode, TurnEngine
from rubik_engine.logic.moves import parse_algorithm
from rubik_engine.solve.base import SolverStrategy

R = Rotation(Axis.X_AXIS, Direction.CLOCKWISE, 2, 1)


class RecordingListener:
    def __init__(self):
        self.rotations = 0
        self.messages = []
        self.solved = 0
        self.algorithms = 0

    def on_rotation_completed(self):
        self.rotations += 1

    def on_message(self, text):
        self.messages.append(text)

    def on_solved(self):
        self.solved += 1

    def on_algorithm_completed(self):
        self.algorithms += 1


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def draw_square(self, square, angle=0.0, x=0.0, y=0.0, z=0.0):
        self.calls.append((square, angle, (x, y, z)))


def run_until_idle(engine, limit=200000):
    ticks = 0
    while engine.is_busy:
        engine.tick()
        ticks += 1
        if ticks > limit:
            raise AssertionError("el motor no volvió a IDLE")
    return ticks


def make_engine(geometry=None, **kwargs):
    listener = RecordingListener()
    engine = TurnEngine(geometry, EngineConfig(speed=SPEED_FAST), random.Random(11), listener, **kwargs)
    return engine, listener


class TestManualRotation(unittest.TestCase):
    def test_rotation_commits_after_ticks(self):
        engine, listener = make_engine()
        self.assertTrue(engine.rotate(R))
        self.assertEqual(engine.mode, RotateMode.MANUAL)
        self.assertTrue(engine.is_solved())
        ticks = run_until_idle(engine)
        self.assertEqual(ticks, 10)
        self.assertFalse(engine.is_solved())
        self.assertEqual(engine.move_count, 1)
        self.assertEqual(listener.rotations, 1)
        self.assertEqual(engine.state, CubeState.IDLE)

    def test_rotate_while_busy_is_rejected(self):
        engine, listener = make_engine()
        engine.rotate(R)
        engine.tick()
        self.assertFalse(engine.rotate(Rotation(Axis.Y_AXIS)))
        self.assertTrue(listener.messages)
        run_until_idle(engine)
        self.assertEqual(engine.move_count, 1)

    def test_out_of_range_layer(self):
        engine, _ = make_engine()
        with self.assertRaises(OutOfRangeError):
            engine.rotate(Axis.X_AXIS, Direction.CLOCKWISE, 3)
        self.assertFalse(engine.is_busy)

    def test_layer_count_is_clamped(self):
        engine, _ = make_engine()
        engine.rotate(Axis.Y_AXIS, Direction.CLOCKWISE, 1, 5)
        self.assertEqual(engine.rotation.layer_count, 2)

    def test_undo_redo(self):
        engine, listener = make_engine()
        engine.rotate(R)
        run_until_idle(engine)
        self.assertTrue(engine.undo())
        run_until_idle(engine)
        self.assertTrue(engine.is_solved())
        self.assertEqual(engine.move_count, 0)
        self.assertEqual(listener.solved, 1)
        self.assertTrue(engine.redo())
        run_until_idle(engine)
        self.assertFalse(engine.is_solved())
        self.assertEqual(engine.move_count, 1)
        self.assertFalse(engine.redo())

    def test_whole_cube_turn_does_not_count(self):
        engine, _ = make_engine()
        engine.rotate(Axis.Y_AXIS, Direction.CLOCKWISE, 0, 3)
        run_until_idle(engine)
        self.assertEqual(engine.move_count, 0)
        self.assertTrue(engine.is_solved())

    def test_repeat(self):
        engine, listener = make_engine()
        self.assertTrue(engine.start_repeat(R))
        while listener.rotations < 4:
            engine.tick()
        self.assertTrue(engine.is_solved())
        self.assertTrue(engine.stop_repeat())
        run_until_idle(engine)
        self.assertEqual(listener.rotations, 5)


class TestSequences(unittest.TestCase):
    def test_play_sequence_six_times_returns(self):
        engine, listener = make_engine()
        for _ in range(6):
            self.assertTrue(engine.play_sequence("R U R' U'"))
            self.assertEqual(engine.state, CubeState.TESTING)
            run_until_idle(engine)
        self.assertTrue(engine.is_solved())
        self.assertEqual(listener.algorithms, 6)
        self.assertEqual(engine.move_count, 24)

    def test_play_invalid_sequence(self):
        engine, _ = make_engine()
        with self.assertRaises(InvalidInputError):
            engine.play_sequence("R Q")
        self.assertEqual(engine.state, CubeState.IDLE)

    def test_apply_sequence_is_instant(self):
        engine, _ = make_engine()
        engine.apply_sequence("R U R' U'")
        self.assertFalse(engine.is_busy)
        self.assertFalse(engine.is_solved())
        engine.apply_sequence("U R U' R'")
        self.assertTrue(engine.is_solved())

    def test_U_turns_outer_top_layer_on_skewed_cube(self):
        engine, _ = make_engine(CubeGeometry(2, 3, 4))
        g = engine.geometry
        front, back = g.center_color(FACE_FRONT), g.center_color(FACE_BACK)
        engine.apply_sequence("U")
        colors = g.face_colors(FACE_FRONT)
        self.assertEqual(colors[0:2], [back] * 2)
        self.assertEqual(colors[2:6], [front] * 4)
        engine.apply_sequence("U")
        self.assertTrue(engine.is_solved())

    def test_F_turns_outer_front_layer_on_skewed_cube(self):
        engine, _ = make_engine(CubeGeometry(2, 3, 4))
        g = engine.geometry
        top, bottom = g.center_color(FACE_TOP), g.center_color(FACE_BOTTOM)
        engine.apply_sequence("F")
        colors = g.face_colors(FACE_TOP)
        self.assertEqual(colors[0:6], [top] * 6)
        self.assertEqual(colors[6:8], [bottom] * 2)

    def test_play_sequence_on_skewed_cube(self):
        engine, _ = make_engine(CubeGeometry(2, 3, 4))
        self.assertTrue(engine.play_sequence("U F R"))
        run_until_idle(engine)
        expected = CubeGeometry(2, 3, 4)
        expected.rotate_layer(Axis.Y_AXIS, Direction.CLOCKWISE, 2)
        expected.rotate_layer(Axis.Z_AXIS, Direction.CLOCKWISE, 3)
        expected.rotate_layer(Axis.X_AXIS, Direction.CLOCKWISE, 1)
        self.assertEqual(engine.geometry.snapshot(), expected.snapshot())

    def test_set_algorithm_requires_algorithm_state(self):
        engine, _ = make_engine()
        self.assertFalse(engine.set_algorithm(parse_algorithm("R")))
        self.assertEqual(engine.mode, RotateMode.NONE)


class TestScrambles(unittest.TestCase):
    def test_randomize_and_help_me(self):
        engine, listener = make_engine()
        self.assertTrue(engine.randomize(20))
        self.assertEqual(len(engine.randomized_moves), 20)
        self.assertFalse(engine.is_solved())
        self.assertTrue(engine.help_me())
        self.assertEqual(engine.state, CubeState.HELPING)
        run_until_idle(engine)
        self.assertTrue(engine.is_solved())
        self.assertEqual(listener.algorithms, 1)

    def test_help_me_without_scramble(self):
        engine, listener = make_engine()
        self.assertFalse(engine.help_me())
        self.assertTrue(listener.messages)

    def test_animated_randomize(self):
        engine, listener = make_engine()
        self.assertTrue(engine.start_randomize())
        self.assertEqual(engine.state, CubeState.RANDOMIZE)
        for _ in range(55):
            engine.tick()
        self.assertTrue(engine.stop_randomize())
        self.assertEqual(engine.state, CubeState.IDLE)
        self.assertEqual(engine.mode, RotateMode.NONE)
        self.assertEqual(engine.move_count, 0)
        self.assertFalse(engine.rotation.active)
        self.assertEqual(listener.rotations, 6)

    def test_new_game_resets_history(self):
        engine, _ = make_engine()
        engine.rotate(R)
        run_until_idle(engine)
        engine.new_game(5)
        self.assertFalse(engine.history.can_undo())
        self.assertEqual(engine.move_count, 0)

    def test_randomize_skewed_cube(self):
        engine, _ = make_engine(CubeGeometry(2, 3, 4))
        self.assertTrue(engine.randomize(30))
        counts = {}
        for sq in engine.geometry.all_squares:
            counts[sq.color] = counts.get(sq.color, 0) + 1
        self.assertEqual(sum(counts.values()), 52)


class TestSolving(unittest.TestCase):
    def test_solve_already_solved(self):
        engine, listener = make_engine()
        self.assertTrue(engine.solve())
        self.assertEqual(engine.state, CubeState.IDLE)
        self.assertEqual(engine.move_count, 0)
        self.assertEqual(listener.solved, 1)

    def test_submit_solution(self):
        engine, listener = make_engine()
        engine.apply_sequence("R U")
        self.assertTrue(engine.submit_solution("U' R'"))
        self.assertEqual(engine.state, CubeState.SOLVING)
        run_until_idle(engine)
        self.assertTrue(engine.is_solved())
        self.assertEqual(engine.move_count, 2)
        self.assertEqual(listener.solved, 1)

    def test_submit_invalid_solution(self):
        engine, _ = make_engine()
        with self.assertRaises(InvalidInputError):
            engine.submit_solution("R Z")
        self.assertEqual(engine.state, CubeState.IDLE)

    def test_unsupported_size(self):
        engine, listener = make_engine(CubeGeometry(2, 2, 2))
        engine.apply_sequence("R")
        self.assertFalse(engine.solve())
        self.assertEqual(engine.state, CubeState.IDLE)
        self.assertTrue(any("3x3x3" in m for m in listener.messages))

    def test_dead_end_reports_no_solution(self):
        class Broken(SolverStrategy):
            name = "broken"

            def start(self, engine):
                raise SolverDeadEnd("pieza perdida")

            def update(self, engine):
                pass

        engine, listener = make_engine(solver_factory=lambda g: Broken())
        engine.apply_sequence("R")
        self.assertFalse(engine.solve())
        self.assertEqual(engine.state, CubeState.IDLE)
        self.assertTrue(any("Sin solución" in m for m in listener.messages))

    def test_cancel_solving(self):
        engine, _ = make_engine()
        engine.apply_sequence("R U F")
        engine.solve()
        engine.tick()
        self.assertTrue(engine.cancel_solving())
        run_until_idle(engine)
        self.assertEqual(engine.state, CubeState.IDLE)
        self.assertIsNone(engine.solver)


class TestMisc(unittest.TestCase):
    def test_set_speed(self):
        engine, _ = make_engine()
        engine.set_speed(0)
        self.assertEqual(engine.angle_delta, 2.0)
        with self.assertRaises(InvalidInputError):
            engine.set_speed(7)

    def test_draw_at_rest(self):
        engine, _ = make_engine()
        renderer = RecordingRenderer()
        engine.draw(renderer)
        self.assertEqual(len(renderer.calls), 54)
        self.assertTrue(all(angle == 0.0 for _, angle, _ in renderer.calls))

    def test_draw_while_turning(self):
        engine, _ = make_engine()
        engine.rotate(R)
        engine.tick()
        renderer = RecordingRenderer()
        engine.draw(renderer)
        self.assertEqual(len(renderer.calls), 54)
        moving = [c for c in renderer.calls if c[1] != 0.0]
        self.assertEqual(len(moving), 21)
        self.assertTrue(all(c[2] == (1.0, 0.0, 0.0) and c[1] < 0 for c in moving))

    def test_rotation_logged_as_token(self):
        engine, _ = make_engine()
        with self.assertLogs("rubik_engine.engine.turn_engine", level="DEBUG") as logs:
            engine.rotate(R)
        self.assertTrue(any("Giro R " in line for line in logs.output))
        self.assertEqual(engine.describe(Rotation(Axis.Y_AXIS, Direction.CLOCKWISE, 0, 3)), "y")

    def test_reset(self):
        engine, _ = make_engine()
        engine.apply_sequence("R U")
        engine.reset()
        self.assertTrue(engine.is_solved())
        self.assertFalse(engine.is_busy)


if __name__ == "__main__":
    unittest.main()
