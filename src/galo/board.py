"""
Board and game-state engine: representation, rules, winner/draw checks, validity.
Teaching notes:
- A board is an immutable value: 9 cells in row-major order, each X, O or None.
- Every transition returns a new Board; simulated and real boards never alias.
- Whose turn it is comes from mark counts alone. X always starts.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

Move = Tuple[int, int]

SIZE = 3

# Fixed enumeration order; the first completed line decides the winner.
WIN_LINES: Tuple[Tuple[Move, Move, Move], ...] = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)

EMPTY_CHARS = ".-0 _"
# Digit form used by solver-style exports: 0=empty, 1=X, 2=O.
DIGIT_MARKS = {"1": "X", "2": "O"}


class Mark(enum.Enum):
    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X

    def __str__(self) -> str:
        return self.value


Cell = Optional[Mark]


class IllegalMove(ValueError):
    """Raised when a mark is placed on a cell that is not empty."""

    def __init__(self, row: int, col: int, occupant: Mark):
        super().__init__(f"Cell ({row}, {col}) is already occupied by {occupant}")
        self.row = row
        self.col = col
        self.occupant = occupant


class Status(enum.Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class GameOutcome:
    status: Status
    winner: Optional[Mark] = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not Status.IN_PROGRESS

    def __str__(self) -> str:
        if self.status is Status.WON:
            return f"won:{self.winner}"
        return self.status.value


IN_PROGRESS = GameOutcome(Status.IN_PROGRESS)
DRAW = GameOutcome(Status.DRAW)


def won(mark: Mark) -> GameOutcome:
    return GameOutcome(Status.WON, mark)


def _check_coords(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise ValueError(f"Invalid position ({row}, {col}). Must be 0-{SIZE - 1}.")


@dataclass(frozen=True)
class Board:
    """A 3x3 board stored as a flat row-major tuple of cells."""

    cells: Tuple[Cell, ...] = (None,) * (SIZE * SIZE)

    def __post_init__(self) -> None:
        cells = tuple(self.cells)
        if len(cells) != SIZE * SIZE:
            raise ValueError(f"Board needs {SIZE * SIZE} cells, got {len(cells)}")
        for c in cells:
            if c is not None and not isinstance(c, Mark):
                raise ValueError(f"Invalid cell value: {c!r}")
        object.__setattr__(self, "cells", cells)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> "Board":
        if len(rows) != SIZE or any(len(r) != SIZE for r in rows):
            raise ValueError("Board rows must form a 3x3 grid")
        return cls(tuple(c for r in rows for c in r))

    def rows(self) -> List[List[Cell]]:
        return [list(self.cells[r * SIZE:(r + 1) * SIZE]) for r in range(SIZE)]

    def __getitem__(self, pos: Move) -> Cell:
        row, col = pos
        _check_coords(row, col)
        return self.cells[row * SIZE + col]

    def count(self, mark: Mark) -> int:
        return self.cells.count(mark)

    @property
    def turn(self) -> Mark:
        return current_turn(self)

    def serialize(self) -> str:
        return "".join("." if c is None else c.value for c in self.cells)

    def __str__(self) -> str:
        lines = []
        for r in self.rows():
            lines.append(" | ".join(" " if c is None else c.value for c in r))
        return "\n---------\n".join(lines)


def empty_board() -> Board:
    return Board()


def parse_board(text: str) -> Board:
    """Parse a 9-character row-major board string, e.g. ``"X.O.X...."``.

    Empty cells may be written as any of ``.-0 _``; marks are case-insensitive,
    and the digit form ``0/1/2`` is accepted as well.
    """
    raw = text.strip("\n")
    if len(raw) != SIZE * SIZE:
        raise ValueError(f"Board string must have 9 characters, got {len(raw)}")
    cells: List[Cell] = []
    for ch in raw:
        if ch in EMPTY_CHARS:
            cells.append(None)
        elif ch in DIGIT_MARKS:
            cells.append(Mark(DIGIT_MARKS[ch]))
        elif ch.upper() in ("X", "O"):
            cells.append(Mark(ch.upper()))
        else:
            raise ValueError(f"Invalid board character: {ch!r}")
    return Board(tuple(cells))


def legal_moves(board: Board) -> List[Move]:
    return [divmod(i, SIZE) for i, c in enumerate(board.cells) if c is None]


def apply_move(board: Board, row: int, col: int, mark: Mark) -> Board:
    _check_coords(row, col)
    idx = row * SIZE + col
    occupant = board.cells[idx]
    if occupant is not None:
        raise IllegalMove(row, col, occupant)
    cells = list(board.cells)
    cells[idx] = mark
    return Board(tuple(cells))


def _line_owner(board: Board, line: Iterable[Move]) -> Optional[Mark]:
    a, b, c = (board.cells[r * SIZE + col] for r, col in line)
    if a is not None and a == b and a == c:
        return a
    return None


def winning_line(board: Board) -> Optional[Tuple[Move, Move, Move]]:
    for line in WIN_LINES:
        if _line_owner(board, line) is not None:
            return line
    return None


def winner(board: Board) -> Optional[Mark]:
    for line in WIN_LINES:
        owner = _line_owner(board, line)
        if owner is not None:
            return owner
    return None


def is_full(board: Board) -> bool:
    return None not in board.cells


def outcome(board: Board) -> GameOutcome:
    w = winner(board)
    if w is not None:
        return won(w)
    if is_full(board):
        return DRAW
    return IN_PROGRESS


def current_turn(board: Board) -> Mark:
    return Mark.X if board.count(Mark.X) == board.count(Mark.O) else Mark.O


def is_valid_state(board: Board) -> bool:
    x_count, o_count = board.count(Mark.X), board.count(Mark.O)
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    owners = {_line_owner(board, line) for line in WIN_LINES} - {None}
    if len(owners) > 1:
        return False
    if Mark.X in owners and x_count != o_count + 1:
        return False
    if Mark.O in owners and x_count != o_count:
        return False
    return True
