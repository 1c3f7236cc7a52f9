"""Chain scoring: chain power, color bonus, group bonus, all-clear bonus"""
from typing import Iterable

CHAIN_POWER = [0, 0, 8, 16, 32, 64, 96, 128, 160, 192, 224, 256, 288, 320, 352, 384, 416, 448, 480, 512]
COLOR_BONUS = [0, 0, 3, 6, 12, 24]
GROUP_BONUS = [0, 0, 0, 0, 0, 2, 3, 4, 5, 6, 7, 10]
GROUP_BONUS_MAX = 10

MIN_CLEAR_SCORE = 40        # one group of four at chain 1
ALL_CLEAR_BONUS = 2100


def chain_power(chain: int) -> int:
    if chain >= len(CHAIN_POWER):
        return 32 * (chain - 3)
    return CHAIN_POWER[chain]


def color_bonus(colors: int) -> int:
    if colors >= len(COLOR_BONUS):
        return 3 * 2 ** (colors - 2)
    return COLOR_BONUS[colors]


def group_bonus(size: int) -> int:
    if size >= len(GROUP_BONUS):
        return GROUP_BONUS_MAX
    return GROUP_BONUS[size]


def chain_score(groups: Iterable, chain: int) -> int:
    """Points for one clearing pass. `groups` need `.color` and `.count`."""
    groups = list(groups)
    tokens = sum(g.count for g in groups)
    gb = sum(group_bonus(g.count) for g in groups)
    cb = color_bonus(len({g.color for g in groups}))
    points = 10 * tokens * (chain_power(chain) + cb + gb)
    if points == 0 and tokens > 0:
        points = MIN_CLEAR_SCORE
    return points


class ScoreEngine:
    def __init__(self):
        self.total = 0
        self.all_clear_pending = False

    def score(self, groups, chain: int) -> int:
        """Add one pass's points to the total; returns those points (without the all-clear bonus)."""
        points = chain_score(groups, chain)
        self.total += points
        if self.all_clear_pending:
            self.total += ALL_CLEAR_BONUS
            self.all_clear_pending = False
        return points

    def flag_all_clear(self) -> None:
        self.all_clear_pending = True

    def reset(self) -> None:
        self.total = 0
        self.all_clear_pending = False
