"""Grid: collision, commit, gravity, flood-fill groups, clear, terminal checks"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from puyo_config import EMPTY, HIDDEN_ROWS
from puyo_piece import Piece

Cell = Tuple[int, int]  # (x, y) in buffer coordinates

MIN_GROUP = 4
DIRECTIONS = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass
class ClearedGroup:
    color: int
    count: int
    cells: List[Cell] = field(default_factory=list)


def round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


class Grid:
    """Fixed-size board of color ids; the top HIDDEN_ROWS rows are off-screen."""

    def __init__(self, width: int, height: int, dead_cells: Sequence[Cell] = ()):
        self.width = width
        self.height = height
        self.dead_cells: Tuple[Cell, ...] = tuple(tuple(c) for c in dead_cells)
        self.cells: List[List[int]] = [[EMPTY] * width for _ in range(height + HIDDEN_ROWS)]

    @property
    def total_rows(self) -> int:
        return self.height + HIDDEN_ROWS

    def cell(self, x: int, y: int) -> int:
        return self.cells[y][x]

    def set_cell(self, x: int, y: int, color: int) -> None:
        self.cells[y][x] = color

    def rows(self) -> List[List[int]]:
        return [row[:] for row in self.cells]

    # ---------- collision ----------
    def _collides(self, x: int, y: float) -> bool:
        jy = math.ceil(y)
        if x < 0 or x >= self.width or jy >= self.total_rows:
            return True
        if jy < 0:
            return False
        return self.cells[jy][x] != EMPTY

    def is_valid(self, piece: Piece) -> bool:
        return not any(self._collides(x, y) for x, y in piece.positions())

    def check_ceiling(self, x: int, y: float) -> bool:
        return math.ceil(y) <= 0

    # ---------- mutation ----------
    def commit(self, piece: Piece) -> None:
        """Write both tokens into the buffer. Row 0 is spawn-only and never written."""
        ax, ay = piece.x, round_half_up(piece.y)
        cx, cy = piece.attached()
        cy = round_half_up(cy)
        for x, y, color in ((ax, ay, piece.color1), (cx, cy, piece.color2)):
            if 0 < y < self.total_rows and 0 <= x < self.width:
                self.cells[y][x] = color

    def apply_gravity(self) -> None:
        for x in range(self.width):
            stack = [self.cells[y][x] for y in range(self.total_rows) if self.cells[y][x] != EMPTY]
            pad = self.total_rows - len(stack)
            for y in range(self.total_rows):
                self.cells[y][x] = EMPTY if y < pad else stack[y - pad]

    def clear(self, cells: Iterable[Cell]) -> None:
        for x, y in cells:
            self.cells[y][x] = EMPTY

    # ---------- groups ----------
    def connected(self, x: int, y: int) -> List[Cell]:
        """BFS over 4-neighbours of the same color; empty start gives []."""
        color = self.cells[y][x]
        if color == EMPTY:
            return []
        found = [(x, y)]
        seen = {(x, y)}
        queue = deque([(x, y)])
        while queue:
            cx, cy = queue.popleft()
            for dx, dy in DIRECTIONS:
                nx, ny = cx + dx, cy + dy
                if not (0 <= nx < self.width and 0 <= ny < self.total_rows):
                    continue
                if (nx, ny) in seen or self.cells[ny][nx] != color:
                    continue
                seen.add((nx, ny))
                found.append((nx, ny))
                queue.append((nx, ny))
        return found

    def find_clearable_groups(self) -> List[ClearedGroup]:
        groups: List[ClearedGroup] = []
        visited = set()
        for y in range(self.total_rows):
            for x in range(self.width):
                if self.cells[y][x] == EMPTY or (x, y) in visited:
                    continue
                members = self.connected(x, y)
                visited.update(members)
                if len(members) >= MIN_GROUP:
                    groups.append(ClearedGroup(self.cells[y][x], len(members), members))
        return groups

    # ---------- queries ----------
    def is_terminal(self) -> bool:
        return any(self.cells[y][x] != EMPTY for x, y in self.dead_cells)

    def is_all_clear(self) -> bool:
        return all(v == EMPTY for row in self.cells for v in row)

    def occupied_count(self) -> int:
        return sum(1 for row in self.cells for v in row if v != EMPTY)

    def column_height(self, x: int) -> int:
        """Stack height of column x counted over the whole buffer."""
        for y in range(self.total_rows):
            if self.cells[y][x] != EMPTY:
                return self.total_rows - y
        return 0

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], dead_cells: Sequence[Cell] = ()) -> "Grid":
        g = cls(len(rows[0]), len(rows) - HIDDEN_ROWS, dead_cells)
        g.cells = [list(row) for row in rows]
        return g

    def clone(self) -> "Grid":
        g = Grid(self.width, self.height, self.dead_cells)
        g.cells = self.rows()
        return g

    def __repr__(self):
        body = "\n".join("".join(str(v) if v else "." for v in row) for row in self.cells)
        return f"Grid({self.width}x{self.height})\n{body}"
