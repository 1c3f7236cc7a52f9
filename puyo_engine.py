"""
Game engine: spawn -> fall -> land -> chain resolution -> spawn.

The engine is a plain synchronous state machine. Hosts drive it with
commands (move/rotate/step/hard_drop/confirm_landing), read `snapshot()`
every frame and either `drain_events()` or register a listener.

With `auto_resolve=False` a landing leaves the engine in RESOLVING and the
host calls `resolve_step()` once per animation beat; otherwise the whole
chain runs inside `confirm_landing()`.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, NamedTuple, Optional, Tuple

from puyo_config import HIDDEN_ROWS, GameConfig
from puyo_grid import Grid
from puyo_piece import Piece, PiecePair, rotated
from puyo_rng import PieceSequencer
from puyo_score import ScoreEngine

logger = logging.getLogger(__name__)

FALL_STEP = 0.5        # rows per step() at multiplier 1
KICKS = (-1, 1)        # x offsets tried when a rotation is blocked
EVENT_BUFFER = 256     # undrained events kept for drain_events()


class EngineState(Enum):
    IDLE = "idle"
    FALLING = "falling"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"


class EventKind(Enum):
    GAME_STARTED = "game_started"
    PIECE_SPAWNED = "piece_spawned"
    PIECE_LANDED = "piece_landed"
    CHAIN_STARTED = "chain_started"
    CELLS_CLEARING = "cells_clearing"
    CHAIN_ENDED = "chain_ended"
    SCORE_CHANGED = "score_changed"
    ALL_CLEAR = "all_clear"
    GAME_OVER = "game_over"


@dataclass
class Event:
    kind: EventKind
    data: Dict[str, Any] = field(default_factory=dict)


class PieceState(NamedTuple):
    x: int
    y: float
    orientation: int
    color1: int
    color2: int


@dataclass(frozen=True)
class Snapshot:
    grid: Tuple[Tuple[int, ...], ...]
    piece: Optional[PieceState]
    next_pairs: Tuple[PiecePair, ...]
    score: int
    chain: int
    game_over: bool
    resolving: bool

    @property
    def width(self) -> int:
        return len(self.grid[0])

    @property
    def height(self) -> int:
        return len(self.grid) - HIDDEN_ROWS


Listener = Callable[[Event], None]


class GameEngine:
    def __init__(self, config: Optional[GameConfig] = None, auto_resolve: bool = True):
        self.auto_resolve = auto_resolve
        self.listeners: List[Listener] = []
        self.events: Deque[Event] = deque(maxlen=EVENT_BUFFER)
        self._reset(config or GameConfig())

    def _reset(self, config: GameConfig):
        self.config = config
        self.grid = Grid(config.columns, config.visible_rows, config.dead_cells)
        self.score = ScoreEngine()
        self.sequencer = PieceSequencer(config.colors, config.seed)
        self.queue: deque = deque()
        self._opening: deque = deque()
        self.piece: Optional[Piece] = None
        self.state = EngineState.IDLE
        self.fall_multiplier = 1.0
        self.chain = 0
        self._cleared_this_cycle = False

    # ---------- lifecycle ----------
    def start(self, config: Optional[GameConfig] = None) -> None:
        self._reset(config or self.config)
        self.events.clear()
        self._opening.extend(self.sequencer.first_two())
        while len(self.queue) < self.config.next_depth + 1:
            self.queue.append(self._draw())
        logger.debug("game started %dx%d, colors=%s", self.grid.width, self.grid.height, self.config.colors)
        self._emit(EventKind.GAME_STARTED)
        self.spawn()

    restart = start

    def spawn(self) -> None:
        if self.state is EngineState.GAME_OVER:
            return
        if not self.queue:
            self.queue.append(self._draw())
        piece = Piece.spawn(self.queue.popleft(), self.grid.width)
        if not self.grid.is_valid(piece):
            self._game_over("spawn blocked")
            return
        self.piece = piece
        self.queue.append(self._draw())
        self.state = EngineState.FALLING
        logger.debug("spawned %s", piece)
        self._emit(EventKind.PIECE_SPAWNED, piece=self._piece_state(), next_pairs=self.next_pairs())

    def _draw(self) -> PiecePair:
        """Opening pairs first, then the sequencer."""
        if self._opening:
            return self._opening.popleft()
        return self.sequencer.next()

    def _game_over(self, reason: str):
        self.piece = None
        self.state = EngineState.GAME_OVER
        logger.info("game over (%s), score=%d", reason, self.score.total)
        self._emit(EventKind.GAME_OVER, score=self.score.total)

    # ---------- events ----------
    def add_listener(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self.listeners.remove(listener)

    def drain_events(self) -> List[Event]:
        out = list(self.events)
        self.events.clear()
        return out

    def _emit(self, kind: EventKind, **data):
        ev = Event(kind, data)
        self.events.append(ev)
        for listener in list(self.listeners):
            listener(ev)

    # ---------- queries ----------
    @property
    def game_over(self) -> bool:
        return self.state is EngineState.GAME_OVER

    @property
    def resolving(self) -> bool:
        return self.state is EngineState.RESOLVING

    def next_pairs(self, count: Optional[int] = None) -> Tuple[PiecePair, ...]:
        n = self.config.next_depth if count is None else count
        return tuple(list(self.queue)[:n])

    def next_pair(self) -> Optional[PiecePair]:
        return self.queue[0] if self.queue else None

    def _piece_state(self) -> Optional[PieceState]:
        p = self.piece
        if p is None:
            return None
        return PieceState(p.x, p.y, p.orientation, p.color1, p.color2)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            grid=tuple(tuple(row) for row in self.grid.cells),
            piece=self._piece_state(),
            next_pairs=self.next_pairs(),
            score=self.score.total,
            chain=self.chain,
            game_over=self.game_over,
            resolving=self.resolving,
        )

    # ---------- commands ----------
    def _controllable(self) -> bool:
        return self.state is EngineState.FALLING and self.piece is not None

    def set_fall_multiplier(self, k: float) -> None:
        self.fall_multiplier = k

    def is_resting(self) -> bool:
        if self.piece is None:
            return False
        trial = self.piece.copy()
        trial.y += FALL_STEP
        return not self.grid.is_valid(trial)

    def step(self) -> bool:
        """Fall by FALL_STEP * multiplier in half-row sub-steps; returns True when resting."""
        if not self._controllable():
            return False
        remaining = FALL_STEP * self.fall_multiplier
        while remaining > 0:
            d = min(FALL_STEP, remaining)
            self.piece.y += d
            if not self.grid.is_valid(self.piece):
                self.piece.y -= d
                break
            remaining -= d
        return self.is_resting()

    def _shift(self, dx: int) -> bool:
        if not self._controllable():
            return False
        self.piece.x += dx
        if not self.grid.is_valid(self.piece):
            self.piece.x -= dx
            return False
        return True

    def move_left(self) -> bool:
        return self._shift(-1)

    def move_right(self) -> bool:
        return self._shift(1)

    def _rotate(self, cw: bool) -> bool:
        if not self._controllable():
            return False
        p = self.piece
        ox, oy, oo = p.x, p.y, p.orientation
        p.orientation = rotated(oo, cw)
        if not self.grid.is_valid(p):
            for dx in KICKS:
                p.x = ox + dx
                if self.grid.is_valid(p):
                    break
            else:
                p.x, p.y, p.orientation = ox, oy, oo
                return False
        if self.grid.check_ceiling(p.x, p.y):
            p.x, p.y, p.orientation = ox, oy, oo
            return False
        return True

    def rotate_cw(self) -> bool:
        return self._rotate(True)

    def rotate_ccw(self) -> bool:
        return self._rotate(False)

    def hard_drop(self) -> bool:
        if not self._controllable():
            return False
        while self.grid.is_valid(self.piece):
            self.piece.y += FALL_STEP
        self.piece.y -= FALL_STEP
        return self.confirm_landing()

    def confirm_landing(self) -> bool:
        if not self._controllable():
            return False
        self.grid.commit(self.piece)
        logger.debug("landed %s", self.piece)
        self.piece = None
        self.state = EngineState.RESOLVING
        self.chain = 0
        self._cleared_this_cycle = False
        self._emit(EventKind.PIECE_LANDED)
        self._emit(EventKind.CHAIN_STARTED)
        if self.auto_resolve:
            self.resolve_chain()
        return True

    # ---------- chain resolution ----------
    def resolve_step(self) -> bool:
        """Run one gravity+clear pass. False once the chain has settled."""
        if self.state is not EngineState.RESOLVING:
            return False
        self.grid.apply_gravity()
        groups = self.grid.find_clearable_groups()
        if not groups:
            self._finish_chain()
            return False
        self.chain += 1
        self._cleared_this_cycle = True
        cells = [c for g in groups for c in g.cells]
        logger.debug("chain %d: %d groups, %d cells", self.chain, len(groups), len(cells))
        self._emit(EventKind.CELLS_CLEARING, chain=self.chain, cells=cells, groups=groups)
        self.grid.clear(cells)
        before = self.score.total
        self.score.score(groups, self.chain)
        self._emit(EventKind.SCORE_CHANGED, total=self.score.total, delta=self.score.total - before)
        return True

    def resolve_chain(self) -> int:
        while self.resolve_step():
            pass
        return self.chain

    def _finish_chain(self):
        if self._cleared_this_cycle and self.grid.is_all_clear():
            self.score.flag_all_clear()
            logger.debug("all clear")
            self._emit(EventKind.ALL_CLEAR)
        self._emit(EventKind.CHAIN_ENDED, chain=self.chain)
        if self.grid.is_terminal():
            self._game_over("dead cell occupied")
            return
        self.state = EngineState.FALLING
        self.spawn()
