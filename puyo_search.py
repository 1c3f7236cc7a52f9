"""
Look-ahead move search for the computer player.

Every candidate (orientation, column) is dropped onto a cloned grid, its
chain is resolved, and the resulting board is scored. The best BEAM_WIDTH
first moves are then extended with the best reply for the next pair, and
the first move with the highest two-ply total wins.
"""
import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from puyo_config import EMPTY
from puyo_engine import FALL_STEP, GameEngine, Snapshot
from puyo_grid import Grid
from puyo_piece import SPAWN_Y, Piece, PiecePair

logger = logging.getLogger(__name__)

BEAM_WIDTH = 4
CHAIN_WEIGHT = 10000
BUILD_COLUMNS = 3       # left-hand columns reserved for the ignition shape


class Move(NamedTuple):
    orientation: int
    column: int


class ChainResult(NamedTuple):
    chain_count: int
    cleared_count: int


@dataclass
class ScoredMove:
    move: Move
    score: float
    grid: Grid


def fallback_move(grid: Grid) -> Move:
    return Move(0, grid.width // 2 - 1)


def generate_moves(grid: Grid, pair: PiecePair) -> List[Move]:
    moves = []
    for orientation in range(4):
        for x in range(grid.width):
            if grid.is_valid(Piece(x, SPAWN_Y, pair.color1, pair.color2, orientation)):
                moves.append(Move(orientation, x))
    return moves


def simulate(grid: Grid, piece: Piece) -> ChainResult:
    """Drop `piece` onto `grid` (mutated in place) and run the chain to completion."""
    while True:
        trial = piece.copy()
        trial.y += FALL_STEP
        if not grid.is_valid(trial):
            break
        piece.y = trial.y
    grid.commit(piece)

    chain = cleared = 0
    while True:
        grid.apply_gravity()
        groups = grid.find_clearable_groups()
        if not groups:
            break
        chain += 1
        cells = [c for g in groups for c in g.cells]
        cleared += len(cells)
        grid.clear(cells)
    return ChainResult(chain, cleared)


# ---------- heuristics ----------
def ignition_score(grid: Grid) -> int:
    """Rewards the bottom-left GTR base and keeps its ignition cell open."""
    rows = grid.cells
    h = len(rows) - 1
    if grid.width < BUILD_COLUMNS or h < 2:
        return 0
    key = rows[h][1]
    if key == EMPTY:
        return 0
    score = 0
    turn = rows[h][2]
    if rows[h - 1][1] == key:
        score += 200
    if turn != EMPTY and turn != key:
        score += 150
    if turn != EMPTY and rows[h - 1][2] == turn:
        score += 250
    if turn != EMPTY and rows[h - 2][2] == turn:
        score += 300

    igniter = rows[h - 2][1]
    if igniter == EMPTY:
        score += 500
    elif igniter == key:
        score -= 100
    else:
        score -= 2000
    return score


def chain_potential(grid: Grid, start_col: int = 0) -> float:
    """Groups of three, weighted toward the floor, plus a small bonus for color layering."""
    rows = grid.cells
    n = len(rows)
    visited = set()
    total = 0.0
    for y in range(n):
        for x in range(start_col, grid.width):
            color = rows[y][x]
            if color == EMPTY or (x, y) in visited:
                continue
            members = grid.connected(x, y)
            if len(members) == 3:
                center = sum(cy for _, cy in members) / 3
                total += (n - center) ** 2 * 2
            if y < n - 1 and rows[y + 1][x] not in (EMPTY, color):
                total += 5
            visited.update(members)
    return total


def evaluate(grid: Grid, result: ChainResult) -> float:
    if result.chain_count > 0:
        return CHAIN_WEIGHT * result.chain_count

    score = float(ignition_score(grid))
    right_height = max((grid.column_height(x) for x in range(BUILD_COLUMNS, grid.width)), default=0)
    score -= right_height ** 2 * 5
    score += chain_potential(grid, BUILD_COLUMNS)
    if right_height > grid.height - 4:
        score -= right_height ** 3
    return score


# ---------- search ----------
class MoveSearch:
    def __init__(self, beam_width: int = BEAM_WIDTH):
        self.beam_width = beam_width

    def rank(self, grid: Grid, pair: PiecePair) -> List[ScoredMove]:
        scored = []
        for move in generate_moves(grid, pair):
            sim = grid.clone()
            piece = Piece(move.column, SPAWN_Y, pair.color1, pair.color2, move.orientation)
            result = simulate(sim, piece)
            scored.append(ScoredMove(move, evaluate(sim, result), sim))
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored

    def best_reply(self, grid: Grid, pair: PiecePair) -> float:
        ranked = self.rank(grid, pair)
        return ranked[0].score if ranked else float("-inf")

    def think(self, grid: Grid, current: PiecePair, next_pair: Optional[PiecePair] = None) -> Move:
        beam = self.rank(grid, current)[:self.beam_width]
        if not beam:
            logger.debug("no candidate moves, falling back")
            return fallback_move(grid)
        if next_pair is None:
            return beam[0].move

        best, best_score = beam[0].move, float("-inf")
        for cand in beam:
            total = cand.score + self.best_reply(cand.grid, next_pair)
            if total > best_score:
                best, best_score = cand.move, total
        logger.debug("chose %s (score %.1f)", best, best_score)
        return best


def think_next_move(snapshot: Snapshot, next_pair: Optional[PiecePair] = None,
                    beam_width: int = BEAM_WIDTH) -> Move:
    """Pick a move for the snapshot's current piece; `next_pair` defaults to the queue head."""
    grid = Grid.from_rows(snapshot.grid)
    if snapshot.piece is None:
        return fallback_move(grid)
    current = PiecePair(snapshot.piece.color1, snapshot.piece.color2)
    if next_pair is None and snapshot.next_pairs:
        next_pair = snapshot.next_pairs[0]
    return MoveSearch(beam_width).think(grid, current, next_pair)


def _turn_to(engine: GameEngine, orientation: int) -> bool:
    turns = (orientation - engine.piece.orientation) % 4
    if turns == 3:
        engine.rotate_ccw()
    else:
        for _ in range(turns):
            if not engine.rotate_cw():
                break
    return engine.piece.orientation == orientation


def _walk_to(engine: GameEngine, column: int) -> None:
    while engine.piece.x != column:
        shifted = engine.move_right() if engine.piece.x < column else engine.move_left()
        if not shifted:
            break


def apply_move(engine: GameEngine, move: Move) -> bool:
    """Turn a Move into rotate/shift commands plus a hard drop.

    A turn blocked at the spawn column is retried over the target column; if
    it is still blocked the pair is left to fall on its own and False is returned.
    """
    if engine.piece is None:
        return False
    target = move.orientation % 4
    if not _turn_to(engine, target):
        _walk_to(engine, move.column)
        if not _turn_to(engine, target):
            logger.debug("rotation to %d rejected at x=%d", target, engine.piece.x)
            return False
    _walk_to(engine, move.column)
    return engine.hard_drop()
