from typing import List

import pytest
try:
    from hypothesis import given, settings, strategies as st  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - test infra
    pytest.skip("Hypothesis not installed", allow_module_level=True)

from galo.board import (
    Board,
    IllegalMove,
    Mark,
    Status,
    apply_move,
    current_turn,
    empty_board,
    is_full,
    is_valid_state,
    legal_moves,
    outcome,
    winner,
)
from galo.bot import Difficulty, choose_move

cells = st.sampled_from([None, Mark.X, Mark.O])


def _play_order(order: List[int]) -> List[Board]:
    """Play cells in the given order for alternating marks until the game ends."""
    boards = [empty_board()]
    b = boards[0]
    for idx in order:
        if outcome(b).is_terminal:
            break
        b = apply_move(b, idx // 3, idx % 3, current_turn(b))
        boards.append(b)
    return boards


@given(st.permutations(list(range(9))))
def test_reachable_boards_keep_parity_and_single_outcome(order: List[int]):
    for b in _play_order(order):
        x, o = b.count(Mark.X), b.count(Mark.O)
        assert x - o in (0, 1)
        assert current_turn(b) is (Mark.X if x == o else Mark.O)
        assert is_valid_state(b)
        res = outcome(b)
        if res.status is Status.WON:
            assert res.winner is winner(b)
        if res.status is Status.DRAW:
            assert winner(b) is None and is_full(b)


@given(st.permutations(list(range(9))))
def test_games_always_reach_a_terminal_outcome(order: List[int]):
    final = _play_order(order)[-1]
    assert outcome(final).is_terminal


@given(st.lists(cells, min_size=9, max_size=9), st.integers(min_value=0, max_value=8))
def test_occupied_cell_rejected_without_mutation(raw, idx):
    b = Board(tuple(raw))
    row, col = divmod(idx, 3)
    if b[row, col] is None:
        assert apply_move(b, row, col, Mark.X)[row, col] is Mark.X
        assert b[row, col] is None
    else:
        before = b.cells
        with pytest.raises(IllegalMove):
            apply_move(b, row, col, Mark.O)
        assert b.cells == before


@given(st.lists(cells, min_size=9, max_size=9))
def test_read_only_queries_are_idempotent(raw):
    b = Board(tuple(raw))
    assert winner(b) == winner(b)
    assert is_full(b) == is_full(b)
    assert legal_moves(b) == legal_moves(b)
    assert legal_moves(b) == sorted(legal_moves(b))


@settings(deadline=None)
@given(st.lists(cells, min_size=9, max_size=9), st.sampled_from(list(Difficulty)))
def test_choose_move_is_legal_or_none(raw, difficulty):
    b = Board(tuple(raw))
    move = choose_move(b, difficulty, Mark.O, Mark.X)
    if legal_moves(b):
        assert move in legal_moves(b)
    else:
        assert move is None
