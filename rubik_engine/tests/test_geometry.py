# rubik_engine/tests/test_geometry.py
import random
import unittest
from collections import Counter

from rubik_engine.core import rotation_algebra as algebra
from rubik_engine.core.errors import InvalidInputError, InvariantViolation, OutOfRangeError
from rubik_engine.core.geometry import CubeGeometry
from rubik_engine.core.model import (
    FACE_BACK,
    FACE_BOTTOM,
    FACE_FRONT,
    FACE_LEFT,
    FACE_RIGHT,
    FACE_TOP,
    MAX_PIECE_SQUARES,
    Piece,
    PieceType,
    Square,
)
from rubik_engine.core.rotation import Axis, Direction


def color_counts(g):
    return Counter(sq.color for sq in g.all_squares)


def piece_signatures(g):
    return {tuple(sorted(p.colors())) for p in g.pieces}


def random_turns(g, rng, count, reorient=False):
    for _ in range(count):
        axis = rng.choice(list(Axis))
        direction = rng.choice(list(Direction))
        if reorient and rng.random() < 0.2:
            g.reorient(axis, direction)
        else:
            g.rotate_layer(axis, direction, rng.randrange(g.axis_size(axis)))


class TestCubeGeometry(unittest.TestCase):
    def test_starts_solved(self):
        g = CubeGeometry()
        self.assertTrue(g.is_solved())
        self.assertTrue(g.is_3x3x3)

    def test_counts_3x3x3(self):
        g = CubeGeometry()
        self.assertEqual(len(g.all_squares), 54)
        self.assertEqual(len(g.pieces), 26)
        types = Counter(p.type for p in g.pieces)
        self.assertEqual(types[PieceType.CORNER], 8)
        self.assertEqual(types[PieceType.EDGE], 12)
        self.assertEqual(types[PieceType.CENTER], 6)

    def test_each_piece_in_one_layer_per_axis(self):
        for size in (2, 3, 4):
            g = CubeGeometry(size, size, size)
            for axis in Axis:
                seen = [id(p) for layer in g.layers[axis] for p in layer]
                self.assertEqual(len(seen), len(g.pieces))
                self.assertEqual(len(set(seen)), len(g.pieces))

    def test_invalid_size(self):
        with self.assertRaises(InvalidInputError):
            CubeGeometry(0, 3, 3)

    def test_R_moves_front_to_top(self):
        g = CubeGeometry()
        front = g.center_color(FACE_FRONT)
        g.rotate_layer(Axis.X_AXIS, Direction.CLOCKWISE, 2)
        self.assertFalse(g.is_solved())
        top = g.face_colors(FACE_TOP)
        self.assertEqual([top[2], top[5], top[8]], [front] * 3)

    def test_U_moves_right_to_front(self):
        g = CubeGeometry()
        right = g.center_color(FACE_RIGHT)
        g.rotate_layer(Axis.Y_AXIS, Direction.CLOCKWISE, 2)
        self.assertEqual(g.face_colors(FACE_FRONT)[:3], [right] * 3)

    def test_layer_then_inverse_returns(self):
        for size in (2, 3, 4):
            g = CubeGeometry(size, size, size)
            before = g.snapshot()
            for axis in Axis:
                for layer in range(size):
                    g.rotate_layer(axis, Direction.CLOCKWISE, layer)
                    g.rotate_layer(axis, Direction.COUNTER_CLOCKWISE, layer)
                    self.assertEqual(before, g.snapshot())

    def test_four_quarter_turns_is_identity(self):
        g = CubeGeometry(4, 4, 4)
        g.rotate_layer(Axis.Z_AXIS, Direction.CLOCKWISE, 1)
        before = g.snapshot()
        for axis in Axis:
            for layer in range(4):
                for _ in range(4):
                    g.rotate_layer(axis, Direction.CLOCKWISE, layer)
                self.assertEqual(before, g.snapshot())

    def test_color_counts_remain_constant(self):
        g = CubeGeometry()
        rng = random.Random(7)
        for _ in range(50):
            g.rotate_layer(rng.choice(list(Axis)), rng.choice(list(Direction)), rng.randrange(3))
        counts = color_counts(g)
        self.assertEqual(sorted(counts.values()), [9] * 6)

    def test_out_of_range_layer(self):
        g = CubeGeometry()
        before = g.snapshot()
        with self.assertRaises(OutOfRangeError):
            g.rotate_layer(Axis.X_AXIS, Direction.CLOCKWISE, 3)
        with self.assertRaises(OutOfRangeError):
            g.layer(Axis.Y_AXIS, -1)
        self.assertEqual(before, g.snapshot())

    def test_face_with_center_missing(self):
        g = CubeGeometry()
        with self.assertRaises(InvariantViolation):
            g.face_with_center("P")

    def test_set_layer_color(self):
        g = CubeGeometry()
        g.set_layer_color(Axis.X_AXIS, 2, "P")
        self.assertEqual(color_counts(g)["P"], 21)


class TestReorient(unittest.TestCase):
    def test_whole_y_keeps_solved(self):
        g = CubeGeometry()
        right = g.center_color(FACE_RIGHT)
        g.reorient(Axis.Y_AXIS, Direction.CLOCKWISE)
        self.assertTrue(g.is_solved())
        self.assertEqual(g.center_color(FACE_FRONT), right)

    def test_reorient_relabels_faces(self):
        g = CubeGeometry()
        g.rotate_layer(Axis.X_AXIS, Direction.CLOCKWISE, 2)
        counts = color_counts(g)
        g.reorient(Axis.Z_AXIS, Direction.COUNTER_CLOCKWISE)
        self.assertEqual(counts, color_counts(g))
        for face, squares in enumerate(g.faces):
            self.assertTrue(all(sq.face == face for sq in squares))

    def test_reorient_then_inverse_returns(self):
        g = CubeGeometry()
        g.rotate_layer(Axis.Y_AXIS, Direction.CLOCKWISE, 0)
        before = g.snapshot()
        for axis in Axis:
            g.reorient(axis, Direction.CLOCKWISE)
            g.reorient(axis, Direction.COUNTER_CLOCKWISE)
            self.assertEqual(before, g.snapshot())


class TestSkewedCube(unittest.TestCase):
    def test_dims(self):
        g = CubeGeometry(2, 3, 4)
        self.assertFalse(g.is_3x3x3)
        self.assertTrue(g.is_solved())
        self.assertEqual(len(g.all_squares), 2 * (2 * 3 + 3 * 4 + 2 * 4))
        self.assertFalse(g.is_symmetric_around_axis(Axis.Y_AXIS))

    def test_half_turn_twice_returns(self):
        g = CubeGeometry(2, 3, 4)
        before = g.snapshot()
        counts = color_counts(g)
        for layer in range(3):
            g.rotate_layer(Axis.Y_AXIS, Direction.CLOCKWISE, layer)
            self.assertEqual(counts, color_counts(g))
            g.rotate_layer(Axis.Y_AXIS, Direction.CLOCKWISE, layer)
            self.assertEqual(before, g.snapshot())

    def test_reorient_swaps_dims(self):
        g = CubeGeometry(2, 3, 4)
        g.reorient(Axis.Y_AXIS, Direction.CLOCKWISE)
        self.assertEqual((g.size_x, g.size_y, g.size_z), (4, 3, 2))
        self.assertTrue(g.is_solved())
        for axis in Axis:
            self.assertEqual(len(g.layers[axis]), g.axis_size(axis))


SKEWED_SIZES = [(2, 3, 4), (1, 2, 3), (3, 3, 5), (2, 2, 5)]

# Cara nueva -> cara de origen tras una reorientación horaria.
REORIENT_SOURCE = {
    Axis.X_AXIS: {
        FACE_TOP: FACE_FRONT, FACE_FRONT: FACE_BOTTOM, FACE_BOTTOM: FACE_BACK,
        FACE_BACK: FACE_TOP, FACE_RIGHT: FACE_RIGHT, FACE_LEFT: FACE_LEFT,
    },
    Axis.Y_AXIS: {
        FACE_FRONT: FACE_RIGHT, FACE_RIGHT: FACE_BACK, FACE_BACK: FACE_LEFT,
        FACE_LEFT: FACE_FRONT, FACE_TOP: FACE_TOP, FACE_BOTTOM: FACE_BOTTOM,
    },
    Axis.Z_AXIS: {
        FACE_TOP: FACE_LEFT, FACE_LEFT: FACE_BOTTOM, FACE_BOTTOM: FACE_RIGHT,
        FACE_RIGHT: FACE_TOP, FACE_FRONT: FACE_FRONT, FACE_BACK: FACE_BACK,
    },
}


class TestSkewedProperties(unittest.TestCase):
    def test_turn_then_inverse_on_every_axis(self):
        for dims in SKEWED_SIZES:
            g = CubeGeometry(*dims)
            random_turns(g, random.Random(1), 10)
            before = g.snapshot()
            for axis in Axis:
                for layer in range(g.axis_size(axis)):
                    g.rotate_layer(axis, Direction.CLOCKWISE, layer)
                    g.rotate_layer(axis, Direction.COUNTER_CLOCKWISE, layer)
                    self.assertEqual(before, g.snapshot(), (dims, axis, layer))

    def test_half_turn_is_an_involution(self):
        for dims in SKEWED_SIZES:
            g = CubeGeometry(*dims)
            random_turns(g, random.Random(2), 10)
            before = g.snapshot()
            for axis in Axis:
                if g.is_symmetric_around_axis(axis):
                    continue
                for layer in range(g.axis_size(axis)):
                    g.rotate_layer(axis, Direction.CLOCKWISE, layer)
                    self.assertEqual(color_counts(g), color_counts(CubeGeometry(*dims)))
                    g.rotate_layer(axis, Direction.CLOCKWISE, layer)
                    self.assertEqual(before, g.snapshot(), (dims, axis, layer))

    def test_pieces_stay_physical(self):
        for dims in SKEWED_SIZES + [(3, 3, 3), (4, 4, 4)]:
            solved = piece_signatures(CubeGeometry(*dims))
            g = CubeGeometry(*dims)
            random_turns(g, random.Random(3), 60, reorient=True)
            for piece in g.pieces:
                self.assertIn(tuple(sorted(piece.colors())), solved, dims)

    def test_reorient_matches_fresh_geometry(self):
        for dims in SKEWED_SIZES:
            for axis in Axis:
                for direction in Direction:
                    g = CubeGeometry(*dims)
                    g.reorient(axis, direction)
                    fresh = CubeGeometry(g.size_x, g.size_y, g.size_z)
                    for face in range(len(g.faces)):
                        self.assertEqual(len(g.faces[face]), len(fresh.faces[face]))
                        for sq, ref in zip(g.faces[face], fresh.faces[face]):
                            for a, b in zip(sq.position + sq.normal, ref.position + ref.normal):
                                self.assertAlmostEqual(a, b)

    def test_reorient_keeps_face_multisets(self):
        for dims in SKEWED_SIZES:
            for axis in Axis:
                g = CubeGeometry(*dims)
                random_turns(g, random.Random(4), 20)
                before = [Counter(g.face_colors(face)) for face in range(len(g.faces))]
                g.reorient(axis, Direction.CLOCKWISE)
                for face, source in REORIENT_SOURCE[axis].items():
                    self.assertEqual(Counter(g.face_colors(face)), before[source], (dims, axis, face))

    def test_layer_turns_after_reorient(self):
        for dims in SKEWED_SIZES:
            g = CubeGeometry(*dims)
            random_turns(g, random.Random(5), 10)
            original = g.snapshot()
            g.reorient(Axis.Y_AXIS, Direction.CLOCKWISE)
            reoriented = g.snapshot()
            for axis in Axis:
                for layer in range(g.axis_size(axis)):
                    g.rotate_layer(axis, Direction.CLOCKWISE, layer)
                    g.rotate_layer(axis, Direction.COUNTER_CLOCKWISE, layer)
                    self.assertEqual(reoriented, g.snapshot())
            g.reorient(Axis.Y_AXIS, Direction.COUNTER_CLOCKWISE)
            self.assertEqual(original, g.snapshot())


class TestPiece(unittest.TestCase):
    def test_too_many_squares(self):
        piece = Piece(PieceType.CORNER)
        for _ in range(MAX_PIECE_SQUARES):
            piece.add_square(Square(0, "W", (0.0, 0.0, 0.0), (0.0, 0.0, 1.0)))
        with self.assertRaises(InvariantViolation):
            piece.add_square(Square(0, "W", (0.0, 0.0, 0.0), (0.0, 0.0, 1.0)))


class TestRotationAlgebra(unittest.TestCase):
    def squares(self, n):
        return [Square(0, str(i), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0)) for i in range(n)]

    def test_face_clockwise(self):
        sq = self.squares(9)
        algebra.rotate_face_colors(sq, Direction.CLOCKWISE, 3)
        self.assertEqual([s.color for s in sq], list("630741852"))

    def test_face_clockwise_then_counter(self):
        sq = self.squares(16)
        algebra.rotate_face_colors(sq, Direction.CLOCKWISE, 4)
        algebra.rotate_face_colors(sq, Direction.COUNTER_CLOCKWISE, 4)
        self.assertEqual([s.color for s in sq], [str(i) for i in range(16)])

    def test_skewed_face_is_point_reflection(self):
        sq = self.squares(12)
        algebra.skewed_rotate_face_colors(sq, 4, 3)
        self.assertEqual([s.color for s in sq], [str(11 - i) for i in range(12)])

    def test_ring_clockwise(self):
        strips = [self.squares(2) for _ in range(4)]
        for k, strip in enumerate(strips):
            for s in strip:
                s.color = str(k)
        algebra.rotate_ring_colors(strips, Direction.CLOCKWISE)
        self.assertEqual([strip[0].color for strip in strips], ["3", "0", "1", "2"])

    def test_rotate_matrix(self):
        m = list("abcdef")
        self.assertEqual(algebra.rotate_matrix(m, 3, 2), list("daebfc"))
        self.assertEqual(algebra.rotate_matrix_ccw(m, 3, 2), list("cfbead"))


if __name__ == "__main__":
    unittest.main()
