import pytest

from galo.board import (
    DRAW,
    IN_PROGRESS,
    WIN_LINES,
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
    parse_board,
    winner,
    winning_line,
)

X, O = Mark.X, Mark.O


def test_empty_board_has_nine_moves_in_row_major_order():
    b = empty_board()
    assert legal_moves(b) == [(r, c) for r in range(3) for c in range(3)]
    assert winner(b) is None
    assert not is_full(b)
    assert outcome(b) == IN_PROGRESS
    assert current_turn(b) is X


def test_row_win_scenario():
    b = empty_board()
    for (r, c), mark in [((0, 0), X), ((1, 0), O), ((0, 1), X), ((1, 1), O)]:
        b = apply_move(b, r, c, mark)
        assert winner(b) is None
    b = apply_move(b, 0, 2, X)
    assert winner(b) is X
    assert outcome(b).status is Status.WON
    assert outcome(b).winner is X
    assert winning_line(b) == ((0, 0), (0, 1), (0, 2))


def test_draw_scenario():
    b = Board.from_rows([[X, O, X], [X, O, O], [O, X, X]])
    assert winner(b) is None
    assert is_full(b)
    assert outcome(b) == DRAW
    assert outcome(b).is_terminal
    assert legal_moves(b) == []


def test_apply_move_on_occupied_cell_raises_and_keeps_board():
    b = apply_move(empty_board(), 1, 1, X)
    before = b.cells
    with pytest.raises(IllegalMove) as exc:
        apply_move(b, 1, 1, O)
    assert exc.value.occupant is X
    assert (exc.value.row, exc.value.col) == (1, 1)
    assert b.cells == before
    assert b[1, 1] is X


def test_apply_move_returns_new_value():
    b0 = empty_board()
    b1 = apply_move(b0, 0, 0, X)
    assert b0 is not b1
    assert b0[0, 0] is None
    assert b1[0, 0] is X


@pytest.mark.parametrize("row,col", [(-1, 0), (3, 0), (0, 3), (5, 5)])
def test_out_of_range_is_value_error(row, col):
    with pytest.raises(ValueError):
        apply_move(empty_board(), row, col, X)


def test_structurally_invalid_board_rejected():
    with pytest.raises(ValueError):
        Board((None,) * 8)
    with pytest.raises(ValueError):
        Board(("X",) + (None,) * 8)
    with pytest.raises(ValueError):
        Board.from_rows([[None, None], [None, None]])


def test_each_line_is_detected():
    for line in WIN_LINES:
        cells = [None] * 9
        for r, c in line:
            cells[r * 3 + c] = O
        b = Board(tuple(cells))
        assert winner(b) is O
        assert winning_line(b) == line


def test_simultaneous_lines_use_fixed_order():
    # Not reachable in play: row0 for O and row2 for X; row0 comes first.
    b = parse_board("OOO...XXX")
    assert winner(b) is O
    assert not is_valid_state(b)


def test_turn_follows_parity():
    b = empty_board()
    b = apply_move(b, 0, 0, X)
    assert current_turn(b) is O
    assert b.turn is O
    b = apply_move(b, 2, 2, O)
    assert current_turn(b) is X


@pytest.mark.parametrize("text,expected", [
    ("X...O....", "X...O...."),
    ("x-.-o----", "X...O...."),
    ("100020000", "X...O...."),
    ("         ", "........."),
])
def test_parse_and_serialize(text, expected):
    assert parse_board(text).serialize() == expected


@pytest.mark.parametrize("bad", ["", "XO", "XOXOXOXOXO", "ABCDEFGHI"])
def test_parse_rejects_bad_strings(bad):
    with pytest.raises(ValueError):
        parse_board(bad)


def test_valid_state_checks():
    assert is_valid_state(empty_board())
    assert is_valid_state(parse_board("XXXOO...."))
    # O has moved twice in a row
    assert not is_valid_state(parse_board("OO......."))
    # X wins but O moved after
    assert not is_valid_state(parse_board("XXXOOO..."))
    # O wins with X one move ahead
    assert not is_valid_state(parse_board("OOOXX.X.X"))


def test_rows_round_trip_and_str():
    b = parse_board("XO.......")
    assert Board.from_rows(b.rows()) == b
    assert str(b).splitlines()[0] == "X | O |  "
