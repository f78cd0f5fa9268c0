"""
Match controller: sequences one game the way a front end drives the engine.

Tracks the mode (two humans, or a human against the bot), player names, move
history and a generation counter. The board is the only game state; whose turn
it is always comes from the board itself.

A bot move may be computed away from the controller (for example in a worker
thread while the UI shows "Bot is thinking..."). ``request_bot_move`` hands out
the board together with the current generation, and ``apply_bot_move`` drops
the result if the match was reset or moved on in the meantime.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .board import Board, GameOutcome, Mark, Move, apply_move, empty_board, outcome, winning_line
from .bot import Difficulty, choose_move


class Mode(enum.Enum):
    SINGLE = "single"
    MULTI = "multi"


DEFAULT_NAMES = {
    Mode.MULTI: ("Player 1", "Player 2"),
    Mode.SINGLE: ("Player", "Bot"),
}


class MatchError(Exception):
    """Base class for match sequencing errors."""


class MatchOver(MatchError):
    pass


class NotYourTurn(MatchError):
    pass


@dataclass(frozen=True)
class PlayedMove:
    mark: Mark
    row: int
    col: int
    ply: int


@dataclass(frozen=True)
class BotRequest:
    board: Board
    generation: int
    bot_mark: Mark
    difficulty: Difficulty


@dataclass
class Match:
    mode: Mode = Mode.SINGLE
    difficulty: Difficulty = Difficulty.MEDIUM
    human_mark: Mark = Mark.X
    names: Optional[Sequence[str]] = None

    board: Board = field(default_factory=empty_board, init=False)
    history: List[PlayedMove] = field(default_factory=list, init=False)
    generation: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.mode = Mode(self.mode)
        self.difficulty = Difficulty.parse(self.difficulty)
        if not isinstance(self.human_mark, Mark):
            self.human_mark = Mark(str(self.human_mark).strip().upper())
        defaults = DEFAULT_NAMES[self.mode]
        given = list(self.names or [])
        given += [""] * (2 - len(given))
        # names[0] belongs to X in two-player mode and to the human in single-player mode
        self.names = tuple((n or "").strip() or d for n, d in zip(given[:2], defaults))

    @property
    def bot_mark(self) -> Optional[Mark]:
        if self.mode is Mode.SINGLE:
            return self.human_mark.opponent()
        return None

    @property
    def turn(self) -> Mark:
        return self.board.turn

    @property
    def outcome(self) -> GameOutcome:
        return outcome(self.board)

    @property
    def winning_line(self) -> Optional[Tuple[Move, Move, Move]]:
        return winning_line(self.board)

    def name_of(self, mark: Mark) -> str:
        assert self.names is not None
        if self.mode is Mode.SINGLE:
            return self.names[0] if mark is self.human_mark else self.names[1]
        return self.names[0] if mark is Mark.X else self.names[1]

    def is_bot_turn(self) -> bool:
        return (
            self.mode is Mode.SINGLE
            and not self.outcome.is_terminal
            and self.turn is self.bot_mark
        )

    def _place(self, row: int, col: int) -> GameOutcome:
        mark = self.turn
        self.board = apply_move(self.board, row, col, mark)
        self.history.append(PlayedMove(mark, row, col, len(self.history)))
        result = self.outcome
        logging.debug("%s played (%d, %d) -> %s", mark, row, col, result)
        return result

    def play(self, row: int, col: int) -> GameOutcome:
        """Apply a human move for the side to move."""
        if self.outcome.is_terminal:
            raise MatchOver(f"Game is already over ({self.outcome})")
        if self.is_bot_turn():
            raise NotYourTurn(f"It is the bot's turn ({self.bot_mark})")
        return self._place(row, col)

    def request_bot_move(self) -> BotRequest:
        if not self.is_bot_turn():
            raise NotYourTurn("It is not the bot's turn")
        assert self.bot_mark is not None
        return BotRequest(self.board, self.generation, self.bot_mark, self.difficulty)

    def apply_bot_move(self, request: BotRequest, move: Optional[Move]) -> bool:
        """Apply a move computed for ``request``; returns False if it is stale."""
        if request.generation != self.generation or request.board != self.board:
            logging.info("Discarding stale bot move %s (generation %d, now %d)",
                         move, request.generation, self.generation)
            return False
        if move is None:
            return False
        self._place(*move)
        return True

    def bot_move(self) -> Optional[Move]:
        """Compute and apply the bot's move in one step."""
        request = self.request_bot_move()
        move = choose_move(request.board, request.difficulty, request.bot_mark, self.human_mark)
        self.apply_bot_move(request, move)
        return move

    def reset(self) -> None:
        self.board = empty_board()
        self.history = []
        self.generation += 1

    def replay(self, moves: Sequence[Tuple[int, int]]) -> GameOutcome:
        """Play a sequence of moves for whichever side is to move."""
        for row, col in moves:
            if self.outcome.is_terminal:
                raise MatchOver(f"Game is already over ({self.outcome})")
            self._place(row, col)
        return self.outcome

    def status_text(self) -> str:
        result = self.outcome
        if result.winner is not None:
            return f"{self.name_of(result.winner)} won!"
        if result.is_terminal:
            return "Draw!"
        return f"{self.name_of(self.turn)} to move ({self.turn})"
