"""Piece model: axis token + attached token, 4-way orientation"""
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

# attached-token offset per orientation: up, right, down, left
OFFSETS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))

SPAWN_Y = 1


class PiecePair(NamedTuple):
    color1: int
    color2: int


@dataclass
class Piece:
    x: int
    y: float
    color1: int
    color2: int
    orientation: int = 0

    @staticmethod
    def spawn(pair: PiecePair, cols: int) -> "Piece":
        return Piece(cols // 2 - 1, SPAWN_Y, pair.color1, pair.color2, 0)

    @property
    def pair(self) -> PiecePair:
        return PiecePair(self.color1, self.color2)

    def attached(self) -> Tuple[int, float]:
        dx, dy = OFFSETS[self.orientation]
        return self.x + dx, self.y + dy

    def positions(self) -> List[Tuple[int, float]]:
        return [(self.x, self.y), self.attached()]

    def copy(self) -> "Piece":
        return Piece(self.x, self.y, self.color1, self.color2, self.orientation)


def rotated(orientation: int, cw: bool = True) -> int:
    return (orientation + (1 if cw else -1)) % 4
