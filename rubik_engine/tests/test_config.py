# rubik_engine/tests/test_config.py
import unittest

from rubik_engine.config import (
    ANGLE_DELTA_FAST,
    ANGLE_DELTA_NORMAL,
    MAX_UNDO_COUNT,
    SPEED_FAST,
    EngineConfig,
)
from rubik_engine.core.errors import InvalidInputError


class TestEngineConfig(unittest.TestCase):
    def test_defaults(self):
        c = EngineConfig()
        self.assertEqual(c.angle_delta(), ANGLE_DELTA_NORMAL)
        self.assertEqual(c.angle_delta(SPEED_FAST), ANGLE_DELTA_FAST)
        self.assertEqual(c.max_undo_count, MAX_UNDO_COUNT)
        self.assertEqual(c.tick_interval_ms, 16)

    def test_from_env(self):
        c = EngineConfig.from_env({
            "RUBIK_ENGINE_TICK_INTERVAL_MS": "33",
            "RUBIK_ENGINE_SPEED": "2",
            "OTHER": "x",
        })
        self.assertEqual(c.tick_interval_ms, 33)
        self.assertEqual(c.speed, SPEED_FAST)
        self.assertEqual(c.max_undo_count, MAX_UNDO_COUNT)

    def test_from_env_not_an_int(self):
        with self.assertRaises(InvalidInputError):
            EngineConfig.from_env({"RUBIK_ENGINE_MAX_UNDO_COUNT": "muchos"})

    def test_invalid_values(self):
        with self.assertRaises(InvalidInputError):
            EngineConfig(speed=5)
        with self.assertRaises(InvalidInputError):
            EngineConfig(max_undo_count=0)
        with self.assertRaises(InvalidInputError):
            EngineConfig.from_env({"RUBIK_ENGINE_TICK_INTERVAL_MS": "0"})


if __name__ == "__main__":
    unittest.main()
