"""
Rendering helpers for the pygame host.

- Pre-render one token sprite per color id and blit it.
- Pre-render the static background (grid lines, dead-cell marks, panel frame).
- Cache HUD text surfaces; re-render only when values change.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple
from puyo_config import HIDDEN_ROWS
from puyo_layout import Dims
from puyo_piece import OFFSETS

# RGB per color id (0 is empty)
COLORS: Dict[int, Tuple[int, int, int]] = {
    1: (235, 70, 80),
    2: (80, 200, 110),
    3: (80, 130, 240),
    4: (245, 210, 80),
    5: (190, 100, 230),
}
FALLBACK_COLOR = (200, 200, 200)


@dataclass
class HudCache:
    score: int = -1
    chain: int = -1
    ai: Optional[bool] = None
    title: Optional[pygame.Surface] = None
    score_s: Optional[pygame.Surface] = None
    chain_s: Optional[pygame.Surface] = None
    ai_s: Optional[pygame.Surface] = None
    controls: Optional[list] = None


class RenderAssets:
    """Holds all pre-rendered assets for fast blitting."""
    def __init__(self, dims: Dims, font: pygame.font.Font, dead_cells: Iterable[Tuple[int, int]] = ()):
        self.dims = dims
        self.font = font
        self.dead_cells = list(dead_cells)
        self._make_static()
        self._make_tokens()
        self.hud = HudCache()

    # ---------- Static background ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10, 13, 34))
        grid_col = (40, 50, 90)
        for x in range(d.cols + 1):
            X = d.board_x + x * d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(d.rows + 1):
            Y = d.board_y + y * d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        # dead cells get an X so players know where not to stack
        for cx, cy in self.dead_cells:
            r = self.cell_rect(cx, cy).inflate(-12, -12)
            pygame.draw.line(self.bg, (150, 50, 60), r.topleft, r.bottomright, 3)
            pygame.draw.line(self.bg, (150, 50, 60), r.topright, r.bottomleft, 3)
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.total_h - 2 * d.margin)
        pygame.draw.rect(self.bg, (21, 25, 53), panel_rect)
        pygame.draw.rect(self.bg, (50, 60, 100), panel_rect, 1)

    # ---------- Token sprites ----------
    def _make_tokens(self):
        self.token_surf: Dict[int, pygame.Surface] = {}
        c = self.dims.cell
        for cid, col in COLORS.items():
            self.token_surf[cid] = self._token(col, c)

    @staticmethod
    def _token(col, size) -> pygame.Surface:
        s = pygame.Surface((size, size), pygame.SRCALPHA)
        r = size // 2 - 2
        pygame.draw.circle(s, col, (size // 2, size // 2), r)
        hi = tuple(min(255, v + 60) for v in col)
        pygame.draw.circle(s, hi, (size // 2 - r // 3, size // 2 - r // 3), max(2, r // 4))
        return s

    def sprite(self, color_id: int) -> pygame.Surface:
        if color_id not in self.token_surf:
            self.token_surf[color_id] = self._token(FALLBACK_COLOR, self.dims.cell)
        return self.token_surf[color_id]

    # ---------- Geometry ----------
    def cell_rect(self, bx: int, by: float) -> pygame.Rect:
        """Screen rect of buffer cell (bx, by); by may be fractional while falling."""
        d = self.dims
        top = d.board_y + int(round((by - HIDDEN_ROWS) * d.cell))
        return pygame.Rect(d.board_x + bx * d.cell, top, d.cell, d.cell)

    def _visible(self, by: float) -> bool:
        return by > HIDDEN_ROWS - 2

    # ---------- Drawing ----------
    def redraw_static(self, screen: pygame.Surface):
        screen.blit(self.bg, (0, 0))

    def draw_grid(self, screen: pygame.Surface, grid: Sequence[Sequence[int]]):
        for y, row in enumerate(grid):
            if not self._visible(y):
                continue
            for x, v in enumerate(row):
                if v:
                    screen.blit(self.sprite(v), self.cell_rect(x, y).topleft)

    def draw_piece(self, screen: pygame.Surface, piece):
        if piece is None:
            return
        dx, dy = OFFSETS[piece.orientation]
        for bx, by, cid in ((piece.x, piece.y, piece.color1), (piece.x + dx, piece.y + dy, piece.color2)):
            if self._visible(by):
                screen.blit(self.sprite(cid), self.cell_rect(bx, by).topleft)
        # axis ring
        r = self.cell_rect(piece.x, piece.y)
        if self._visible(piece.y):
            pygame.draw.circle(screen, (255, 255, 255), r.center, self.dims.cell // 2 - 2, 2)

    def draw_panel_hud(self, screen: pygame.Surface, score: int, chain: int, next_pairs, ai_mode: bool):
        d = self.dims
        f = self.font
        if self.hud.title is None:
            self.hud.title = f.render("Chain Puzzle", True, (197, 202, 233))
        if score != self.hud.score:
            self.hud.score = score
            self.hud.score_s = f.render(f"Score: {score}", True, (200, 210, 240))
        if chain != self.hud.chain:
            self.hud.chain = chain
            self.hud.chain_s = f.render(f"Chain: {chain}", True, (200, 210, 240))
        if ai_mode != self.hud.ai:
            self.hud.ai = ai_mode
            self.hud.ai_s = f.render("AI: on" if ai_mode else "AI: off", True, (200, 210, 240))
        screen.blit(self.hud.title, (d.panel_x + 12, d.panel_y + 12))
        screen.blit(self.hud.score_s, (d.panel_x + 12, d.panel_y + 44))
        screen.blit(self.hud.chain_s, (d.panel_x + 12, d.panel_y + 68))
        screen.blit(self.hud.ai_s, (d.panel_x + 12, d.panel_y + 92))
        screen.blit(f.render("Next:", True, (200, 210, 240)), (d.panel_x + 12, d.panel_y + 126))
        # next pairs, attached token on top like a freshly spawned piece
        pv = max(14, int(d.cell * 0.75))
        x = d.panel_x + 16
        for i, pair in enumerate(next_pairs):
            y = d.panel_y + 150 + i * (pv * 2 + 12)
            screen.blit(pygame.transform.smoothscale(self.sprite(pair.color2), (pv, pv)), (x, y))
            screen.blit(pygame.transform.smoothscale(self.sprite(pair.color1), (pv, pv)), (x, y + pv))
        if not self.hud.controls:
            self.hud.controls = [
                f.render("Controls:", True, (200, 210, 240)),
                f.render("←/→ Move", True, (165, 175, 215)),
                f.render("↓ Fast fall", True, (165, 175, 215)),
                f.render("X / ↑ Rot CW", True, (165, 175, 215)),
                f.render("Z Rot CCW", True, (165, 175, 215)),
                f.render("Space Hard", True, (165, 175, 215)),
                f.render("A AI • P Pause • R Restart", True, (165, 175, 215)),
            ]
        y = d.panel_y + 150 + len(next_pairs) * (pv * 2 + 12) + 20
        for surf in self.hud.controls:
            screen.blit(surf, (d.panel_x + 12, y)); y += 20

    def draw_banner(self, screen: pygame.Surface, font: pygame.font.Font, text: str, dy: int = 0):
        d = self.dims
        msg = font.render(text, True, (255, 220, 220))
        rect = msg.get_rect(center=(d.board_x + d.board_w // 2, d.board_y + d.board_h // 2 + dy))
        screen.blit(msg, rect)
