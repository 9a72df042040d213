"""Exhaustive minimax and random move selection for tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple, Union
import math
import random

from .game import (
    BOARD_SIZE,
    Board,
    Cell,
    Player,
    available_moves,
    evaluate,
    is_full,
    other_player,
    winner_of,
)


DIFFICULTIES: Tuple[str, ...] = ("easy", "hard")
CENTER = 4
WIN_SCORE = 10

# Transposition table: (board, depth, maximizing, own, opponent) -> score
_TT: Dict[Tuple[Board, int, bool, Player, Player], int] = {}


# ---- search ----


def minimax(
    board: Sequence[Cell],
    depth: int,
    maximizing: bool,
    own: Player,
    opponent: Player,
) -> int:
    """Score ``board`` from ``own``'s point of view.

    Wins score ``10 - depth`` so quicker wins are preferred, losses score
    ``depth - 10`` so later losses are preferred, and draws score 0.
    """
    return _minimax(tuple(board), depth, maximizing, own, opponent)


def _minimax(
    board: Board, depth: int, maximizing: bool, own: Player, opponent: Player
) -> int:
    key = (board, depth, maximizing, own, opponent)
    hit = _TT.get(key)
    if hit is not None:
        return hit

    winner, _ = winner_of(board)
    if winner == own:
        value = WIN_SCORE - depth
    elif winner == opponent:
        value = depth - WIN_SCORE
    elif is_full(board):
        value = 0
    elif maximizing:
        value = max(
            _minimax(_place(board, i, own), depth + 1, False, own, opponent)
            for i in available_moves(board)
        )
    else:
        value = min(
            _minimax(_place(board, i, opponent), depth + 1, True, own, opponent)
            for i in available_moves(board)
        )

    _TT[key] = value
    return value


def best_move(board: Sequence[Cell], player: Player) -> Optional[int]:
    """Optimal cell for ``player``, or ``None`` when the board is full.

    Ties go to the lowest index.
    """
    cells = tuple(board)
    moves = available_moves(cells)
    if not moves:
        return None
    if len(moves) == BOARD_SIZE:
        return CENTER

    opponent = other_player(player)
    best_score: Union[int, float] = -math.inf
    move: Optional[int] = None
    for i in moves:
        score = _minimax(_place(cells, i, player), 0, False, player, opponent)
        if score > best_score:
            best_score, move = score, i
    return move


def random_move(
    board: Sequence[Cell], rng: Optional[random.Random] = None
) -> Optional[int]:
    moves = available_moves(board)
    if not moves:
        return None
    chooser = rng if rng is not None else random
    return chooser.choice(moves)


def clear_cache() -> None:
    _TT.clear()


def cache_size() -> int:
    return len(_TT)


def _place(board: Board, index: int, player: Player) -> Board:
    return board[:index] + (player,) + board[index + 1 :]


# ---- players ----


@dataclass
class MinimaxAI:
    """CPU player for the hard tier. Never loses."""

    player: Player

    def choose(self, board: Sequence[Cell]) -> int:
        _ensure_playable(board)
        move = best_move(board, self.player)
        if move is None:
            raise RuntimeError("No valid moves available")
        return move


@dataclass
class RandomAI:
    """CPU player for the easy tier: any empty cell, uniformly."""

    player: Player
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, board: Sequence[Cell]) -> int:
        _ensure_playable(board)
        move = random_move(board, self.rng)
        if move is None:
            raise RuntimeError("No valid moves available")
        return move


AIPlayer = Union[MinimaxAI, RandomAI]


def make_ai(
    difficulty: str, player: Player, rng: Optional[random.Random] = None
) -> AIPlayer:
    if difficulty == "hard":
        return MinimaxAI(player=player)
    if difficulty == "easy":
        return RandomAI(player=player, rng=rng if rng is not None else random.Random())
    raise ValueError(
        f"Unsupported difficulty {difficulty!r}. "
        f"Choose one of {', '.join(DIFFICULTIES)}."
    )


def _ensure_playable(board: Sequence[Cell]) -> None:
    if evaluate(board).is_over:
        raise ValueError("Game already finished")
