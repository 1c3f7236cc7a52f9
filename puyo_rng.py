"""Bag randomizer for piece color pairs"""
import logging
import random
from typing import List, Optional, Sequence

from puyo_piece import PiecePair

logger = logging.getLogger(__name__)

COPIES_PER_COLOR = 64
OPENING_COLORS = 3


class PieceSequencer:
    """
    Draws color pairs from a shuffled bag holding every color COPIES_PER_COLOR
    times, so long-run frequencies stay level.

    Equal pairs get one best-effort swap with the next bag entry; doubles
    can still come out when the bag is lopsided.
    """

    def __init__(self, colors: Sequence[int], seed: Optional[int] = None):
        self.colors = list(colors)
        self.rng = random.Random(seed)
        self.bag: List[int] = []

    def _pile(self) -> List[int]:
        return [c for c in self.colors for _ in range(COPIES_PER_COLOR)]

    def _refill(self):
        self.bag.extend(self._pile())
        self.rng.shuffle(self.bag)
        logger.debug("bag refilled: %d colors", len(self.bag))

    def next(self) -> PiecePair:
        if len(self.bag) < 2:
            self._refill()
        color1 = self.bag.pop()
        color2 = self.bag.pop()
        if color1 == color2:
            if len(self.bag) < 2:
                self._refill()
            other = self.bag.pop()
            if other != color2:
                self.bag.append(color2)
                self.rng.shuffle(self.bag)
                color2 = other
            else:
                self.bag.append(other)
                self.rng.shuffle(self.bag)
                color2 = self.bag.pop()
        return PiecePair(color1, color2)

    def first_two(self) -> List[PiecePair]:
        """Opening pairs drawn from at most three colors."""
        subset = self.rng.sample(self.colors, min(OPENING_COLORS, len(self.colors)))
        return [PiecePair(self.rng.choice(subset), self.rng.choice(subset)) for _ in range(2)]
