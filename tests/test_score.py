import unittest

from puyo_grid import ClearedGroup
from puyo_score import (ALL_CLEAR_BONUS, ScoreEngine, chain_power, chain_score,
                        color_bonus, group_bonus)


class BonusTableTests(unittest.TestCase):
    def test_chain_power_table_and_extrapolation(self):
        self.assertEqual(chain_power(1), 0)
        self.assertEqual(chain_power(2), 8)
        self.assertEqual(chain_power(19), 512)
        self.assertEqual(chain_power(20), 32 * 17)

    def test_color_bonus_table_and_extrapolation(self):
        self.assertEqual(color_bonus(1), 0)
        self.assertEqual(color_bonus(2), 3)
        self.assertEqual(color_bonus(5), 24)
        self.assertEqual(color_bonus(6), 3 * 2 ** 4)

    def test_group_bonus_saturates(self):
        self.assertEqual(group_bonus(4), 0)
        self.assertEqual(group_bonus(5), 2)
        self.assertEqual(group_bonus(11), 10)
        self.assertEqual(group_bonus(12), 10)
        self.assertEqual(group_bonus(30), 10)


class ChainScoreTests(unittest.TestCase):
    def test_single_four_at_chain_one_scores_forty(self):
        self.assertEqual(chain_score([ClearedGroup(1, 4)], 1), 40)

    def test_two_colors_beat_one(self):
        one = chain_score([ClearedGroup(1, 4)], 1)
        two = chain_score([ClearedGroup(1, 4), ClearedGroup(2, 4)], 1)
        self.assertGreater(two, one)
        self.assertEqual(two, 10 * 8 * 3)

    def test_second_chain(self):
        self.assertEqual(chain_score([ClearedGroup(2, 4)], 2), 320)

    def test_group_bonus_counts_per_group(self):
        self.assertEqual(chain_score([ClearedGroup(1, 5), ClearedGroup(1, 6)], 1), 10 * 11 * (2 + 3))

    def test_nothing_cleared_scores_nothing(self):
        self.assertEqual(chain_score([], 1), 0)


class ScoreEngineTests(unittest.TestCase):
    def test_running_total(self):
        s = ScoreEngine()
        self.assertEqual(s.score([ClearedGroup(1, 4)], 1), 40)
        self.assertEqual(s.score([ClearedGroup(2, 4)], 2), 320)
        self.assertEqual(s.total, 360)

    def test_all_clear_bonus_added_once(self):
        s = ScoreEngine()
        s.flag_all_clear()
        self.assertTrue(s.all_clear_pending)
        earned = s.score([ClearedGroup(1, 4)], 1)
        self.assertEqual(earned, 40)
        self.assertEqual(s.total, 40 + ALL_CLEAR_BONUS)
        self.assertFalse(s.all_clear_pending)
        s.score([ClearedGroup(1, 4)], 1)
        self.assertEqual(s.total, 80 + ALL_CLEAR_BONUS)

    def test_reset(self):
        s = ScoreEngine()
        s.score([ClearedGroup(1, 4)], 1)
        s.flag_all_clear()
        s.reset()
        self.assertEqual(s.total, 0)
        self.assertFalse(s.all_clear_pending)


if __name__ == "__main__":
    unittest.main()
