"""Tests for the minimax and random CPU players."""

import random

import pytest

from oxo.ai import (
    MinimaxAI,
    RandomAI,
    best_move,
    cache_size,
    clear_cache,
    make_ai,
    minimax,
    random_move,
)
from oxo.game import (
    EMPTY,
    apply_move,
    available_moves,
    create_board,
    evaluate,
    other_player,
    side_to_move,
)


def board_of(text):
    return tuple(EMPTY if ch == "." else ch for ch in text)


def reachable_positions():
    """Every non-terminal position reachable from the empty board, X first."""
    seen = set()
    stack = [create_board()]
    while stack:
        board = stack.pop()
        if board in seen or evaluate(board).is_over:
            continue
        seen.add(board)
        player = side_to_move(board)
        for i in available_moves(board):
            stack.append(apply_move(board, i, player))
    return seen


def never_loses(board, to_move, engine):
    outcome = evaluate(board)
    if outcome.is_over:
        return outcome.winner != other_player(engine)
    if to_move == engine:
        move = best_move(board, engine)
        return never_loses(apply_move(board, move, engine), other_player(engine), engine)
    return all(
        never_loses(apply_move(board, i, to_move), engine, engine)
        for i in available_moves(board)
    )


def test_ai_blocks_immediate_threat():
    board = board_of("XX..O....")
    assert best_move(board, "O") == 2


def test_ai_takes_immediate_win():
    board = board_of("OO.XX....")
    assert best_move(board, "O") == 2


@pytest.mark.parametrize("player", ["X", "O"])
def test_empty_board_opens_in_center(player):
    assert best_move(create_board(), player) == 4


def test_corner_opening_is_answered_in_center():
    assert best_move(board_of("X........"), "O") == 4


def test_prefers_faster_win():
    # 8 wins now; 3 forks and wins two plies later.
    board = board_of("XOO.X....")
    assert minimax(apply_move(board, 3, "X"), 0, False, "X", "O") == 8
    assert best_move(board, "X") == 8


def test_best_move_on_full_board_is_none():
    assert best_move(board_of("XOXXOOOXX"), "X") is None


def test_best_move_does_not_mutate_input():
    board = ["X", "X", EMPTY, EMPTY, "O", EMPTY, EMPTY, EMPTY, EMPTY]
    snapshot = list(board)
    best_move(board, "O")
    assert board == snapshot


def test_best_move_always_returns_an_empty_cell():
    for board in reachable_positions():
        move = best_move(board, side_to_move(board))
        assert move in available_moves(board)


@pytest.mark.parametrize("engine", ["X", "O"])
def test_never_loses_against_any_opponent(engine):
    assert never_loses(create_board(), "X", engine)


def test_self_play_is_a_draw():
    board = create_board()
    player = "X"
    while not evaluate(board).is_over:
        board = apply_move(board, best_move(board, player), player)
        player = other_player(player)
    assert evaluate(board).is_draw


def test_minimax_terminal_scores():
    won = board_of("XXXOO....")
    assert minimax(won, 3, True, "X", "O") == 7
    assert minimax(won, 2, False, "O", "X") == -8
    assert minimax(board_of("XOXXOOOXX"), 5, True, "X", "O") == 0


def test_minimax_sees_forced_win():
    # O to move can only delay; X completes a line next ply.
    board = board_of("XX.XOO.O.")
    assert minimax(board, 0, False, "X", "O") > 0


def test_cache_can_be_cleared():
    best_move(board_of("X...O...."), "X")
    assert cache_size() > 0
    clear_cache()
    assert cache_size() == 0
    assert best_move(board_of("XX..O...."), "O") == 2


def test_random_move_only_picks_empty_cells():
    board = board_of("XOX.O.X..")
    rng = random.Random(7)
    picks = {random_move(board, rng) for _ in range(200)}
    assert picks == set(available_moves(board))


def test_random_move_is_reproducible_with_seed():
    board = create_board()
    first = [random_move(board, random.Random(3)) for _ in range(5)]
    second = [random_move(board, random.Random(3)) for _ in range(5)]
    assert first == second


def test_random_move_on_full_board_is_none():
    assert random_move(board_of("XOXXOOOXX")) is None


def test_players_choose_legal_moves():
    board = board_of("XX..O....")
    assert MinimaxAI(player="O").choose(board) == 2
    assert RandomAI(player="O", rng=random.Random(1)).choose(board) in available_moves(board)


@pytest.mark.parametrize("ai", [MinimaxAI(player="O"), RandomAI(player="O")])
def test_players_refuse_finished_games(ai):
    with pytest.raises(ValueError):
        ai.choose(board_of("XXXOO...."))
    with pytest.raises(ValueError):
        ai.choose(board_of("XOXXOOOXX"))


def test_make_ai_tiers():
    assert isinstance(make_ai("hard", "O"), MinimaxAI)
    easy = make_ai("easy", "X", random.Random(0))
    assert isinstance(easy, RandomAI)
    assert easy.player == "X"
    with pytest.raises(ValueError, match="Unsupported difficulty"):
        make_ai("medium", "O")


def test_players_raise_when_search_finds_nothing(monkeypatch):
    board = board_of("XX..O....")
    monkeypatch.setattr("oxo.ai.best_move", lambda board, player: None)
    monkeypatch.setattr("oxo.ai.random_move", lambda board, rng=None: None)
    with pytest.raises(RuntimeError, match="No valid moves available"):
        MinimaxAI(player="O").choose(board)
    with pytest.raises(RuntimeError, match="No valid moves available"):
        RandomAI(player="O").choose(board)
