"""
Bot decision engine: three difficulty tiers behind one entry point.
Teaching notes:
- Easy plays the first free cell, Medium follows a fixed rule list
  (win > block > center > corner > edge), Hard runs a full minimax search.
- Minimax scores are from the bot's perspective: +10 - depth for a bot win,
  -10 + depth for a human win, 0 for a draw. Quick wins and slow losses are
  preferred.
- Ties at the root keep the earliest move in row-major order.
"""
from __future__ import annotations

import enum
import logging
from functools import lru_cache
from typing import Dict, Optional

from .board import Board, Mark, Move, apply_move, legal_moves, outcome, winner
from .tactics import immediate_winning_moves

WIN_SCORE = 10

CENTER: Move = (1, 1)
CORNERS = ((0, 0), (0, 2), (2, 0), (2, 2))
EDGES = ((0, 1), (1, 0), (1, 2), (2, 1))


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty: {value!r} (expected one of {choices})") from None


class Strategy:
    """Picks a move for ``bot_mark`` on a board that still has free cells."""

    name = "base"

    def choose(self, board: Board, bot_mark: Mark, human_mark: Mark) -> Move:
        raise NotImplementedError


class EasyStrategy(Strategy):
    name = "easy"

    def choose(self, board: Board, bot_mark: Mark, human_mark: Mark) -> Move:
        return legal_moves(board)[0]


class MediumStrategy(Strategy):
    name = "medium"

    def choose(self, board: Board, bot_mark: Mark, human_mark: Mark) -> Move:
        wins = immediate_winning_moves(board, bot_mark)
        if wins:
            return wins[0]
        blocks = immediate_winning_moves(board, human_mark)
        if blocks:
            return blocks[0]
        if board[CENTER] is None:
            return CENTER
        for pos in CORNERS + EDGES:
            if board[pos] is None:
                return pos
        return legal_moves(board)[0]


@lru_cache(maxsize=None)
def _minimax(board: Board, depth: int, bot_turn: bool, bot_mark: Mark, human_mark: Mark) -> int:
    w = winner(board)
    if w is bot_mark:
        return WIN_SCORE - depth
    if w is human_mark:
        return -WIN_SCORE + depth
    moves = legal_moves(board)
    if not moves:
        return 0
    if bot_turn:
        best = -WIN_SCORE - 1
        for row, col in moves:
            val = _minimax(apply_move(board, row, col, bot_mark), depth + 1, False, bot_mark, human_mark)
            if val > best:
                best = val
        return best
    best = WIN_SCORE + 1
    for row, col in moves:
        val = _minimax(apply_move(board, row, col, human_mark), depth + 1, True, bot_mark, human_mark)
        if val < best:
            best = val
    return best


def score_moves(board: Board, bot_mark: Mark, human_mark: Mark) -> Dict[Move, int]:
    """Minimax value of every legal move for the bot, in row-major order."""
    scores: Dict[Move, int] = {}
    for row, col in legal_moves(board):
        child = apply_move(board, row, col, bot_mark)
        scores[(row, col)] = _minimax(child, 0, False, bot_mark, human_mark)
    return scores


def clear_cache() -> None:
    _minimax.cache_clear()


class HardStrategy(Strategy):
    name = "hard"

    def choose(self, board: Board, bot_mark: Mark, human_mark: Mark) -> Move:
        scores = score_moves(board, bot_mark, human_mark)
        best_move = legal_moves(board)[0]
        best_val = scores[best_move]
        for move, val in scores.items():
            if val > best_val:
                best_move, best_val = move, val
        logging.debug("hard: best=%s score=%d cache=%s", best_move, best_val, _minimax.cache_info())
        return best_move


STRATEGIES: Dict[Difficulty, Strategy] = {
    Difficulty.EASY: EasyStrategy(),
    Difficulty.MEDIUM: MediumStrategy(),
    Difficulty.HARD: HardStrategy(),
}


def choose_move(
    board: Board,
    difficulty: "Difficulty | str",
    bot_mark: Mark,
    human_mark: Optional[Mark] = None,
) -> Optional[Move]:
    """Return the bot's move as ``(row, col)``, or None when the board is full."""
    if human_mark is None:
        human_mark = bot_mark.opponent()
    if bot_mark is human_mark:
        raise ValueError("bot_mark and human_mark must differ")
    strategy = STRATEGIES[Difficulty.parse(difficulty)]
    if not legal_moves(board):
        return None
    if outcome(board).is_terminal:
        logging.debug("choose_move called on a finished game (%s)", outcome(board))
    return strategy.choose(board, bot_mark, human_mark)
