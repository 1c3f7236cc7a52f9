"""Tunables for the host window plus the per-game GameConfig"""
from dataclasses import dataclass
from typing import Optional, Tuple

COLS, ROWS = 6, 12
HIDDEN_ROWS = 2
EMPTY = 0
DEFAULT_PALETTE = (EMPTY, 1, 2, 3, 4)
DEFAULT_DEAD_CELLS = ((2, 2),)

CONFIG = {
    "CELL_SIZE": 40,
    "FALL_INTERVAL_MS": 250,
    "FAST_FALL_MULT": 6,
    "LAND_DELAY_MS": 333,
    "DAS_MS": 100,
    "ARR_MS": 30,
    "CHAIN_STEP_MS": 300,
    "AI_MODE": False,
    "AI_MOVE_DELAY_MS": 150,
    "BEAM_WIDTH": 4,
    "SEED": None,
    "LOG_LEVEL": "INFO",
}


@dataclass(frozen=True)
class GameConfig:
    columns: int = COLS
    visible_rows: int = ROWS
    palette: Tuple[int, ...] = DEFAULT_PALETTE
    dead_cells: Tuple[Tuple[int, int], ...] = DEFAULT_DEAD_CELLS
    next_depth: int = 2
    seed: Optional[int] = None

    def __post_init__(self):
        if self.columns <= 0 or self.visible_rows <= 0:
            raise ValueError(f"board must be at least 1x1, got {self.columns}x{self.visible_rows}")
        if not self.palette or self.palette[0] != EMPTY:
            raise ValueError("palette index 0 is reserved for the empty cell")
        if len(self.palette) < 2:
            raise ValueError("palette needs at least one playable color")
        if self.next_depth < 0:
            raise ValueError(f"next_depth must be >= 0, got {self.next_depth}")
        for x, y in self.dead_cells:
            if not (0 <= x < self.columns and 0 <= y < self.visible_rows + HIDDEN_ROWS):
                raise ValueError(f"dead cell {(x, y)} is outside the board")

    @property
    def colors(self) -> Tuple[int, ...]:
        """Playable color ids (the palette minus the empty slot)."""
        return tuple(self.palette[1:])
