"""Board model and terminal-state rules for 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"
Cell = str  # a Player or EMPTY
Board = Tuple[Cell, ...]
Line = Tuple[int, int, int]

EMPTY: Cell = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")
BOARD_SIZE = 9

# Rows, then columns, then diagonals. Evaluation reports the first match.
WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidIndexError(ValueError):
    """Raised when a move targets an index outside 0..8."""


class OccupiedCellError(ValueError):
    """Raised when a move targets a cell that already holds a marker."""


@dataclass(frozen=True)
class Outcome:
    """Classification of a board: ongoing, won (with witness line) or drawn."""

    winner: Optional[Player] = None
    line: Optional[Line] = None
    is_draw: bool = False

    @property
    def is_over(self) -> bool:
        return self.winner is not None or self.is_draw


# ---------- Board model ----------


def create_board() -> Board:
    return (EMPTY,) * BOARD_SIZE


def apply_move(board: Sequence[Cell], index: int, player: Player) -> Board:
    """Return a new board with ``player`` placed at ``index``.

    The input board is left untouched.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidIndexError("Cell index must be in 0..8")
    if not 0 <= index < BOARD_SIZE:
        raise InvalidIndexError("Cell index must be in 0..8")
    if board[index] != EMPTY:
        raise OccupiedCellError("Cell already occupied")
    cells = list(board)
    cells[index] = player
    return tuple(cells)


def available_moves(board: Sequence[Cell]) -> List[int]:
    """Empty cell indices in ascending order."""
    return [i for i, c in enumerate(board) if c == EMPTY]


def is_full(board: Sequence[Cell]) -> bool:
    return all(c != EMPTY for c in board)


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


def side_to_move(board: Sequence[Cell]) -> Player:
    """Infer whose turn it is, assuming X moved first."""
    x_cnt = sum(1 for c in board if c == "X")
    o_cnt = sum(1 for c in board if c == "O")
    return "X" if x_cnt == o_cnt else "O"


# ---------- Rules ----------


def winner_of(board: Sequence[Cell]) -> Tuple[Optional[Player], Optional[Line]]:
    for line in WINNING_LINES:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return v, line
    return None, None


def evaluate(board: Sequence[Cell]) -> Outcome:
    """Classify ``board``. A win is reported ahead of a full board."""
    winner, line = winner_of(board)
    if winner is not None:
        return Outcome(winner=winner, line=line, is_draw=False)
    if is_full(board):
        return Outcome(is_draw=True)
    return Outcome()


def is_draw(board: Sequence[Cell]) -> bool:
    return is_full(board) and winner_of(board)[0] is None
