"""OXO package exposing tic-tac-toe rules, the minimax CPU, and a match controller."""

from .ai import MinimaxAI, RandomAI, best_move, minimax, random_move
from .game import (
    InvalidIndexError,
    OccupiedCellError,
    Outcome,
    apply_move,
    create_board,
    evaluate,
    is_draw,
)
from .match import Match, MatchConfig

__all__ = [
    "InvalidIndexError",
    "Match",
    "MatchConfig",
    "MinimaxAI",
    "OccupiedCellError",
    "Outcome",
    "RandomAI",
    "apply_move",
    "best_move",
    "create_board",
    "evaluate",
    "is_draw",
    "minimax",
    "random_move",
]
