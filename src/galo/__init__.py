"""galo package.

Tic-tac-toe game-state engine, bot strategies (easy, medium, hard), a match
controller, an arena for strategy comparisons, and a simple CLI.

Convenience imports are exposed for common workflows.
"""

from .board import (
    Board,
    GameOutcome,
    IllegalMove,
    Mark,
    Status,
    apply_move,
    current_turn,
    empty_board,
    is_full,
    legal_moves,
    outcome,
    parse_board,
    winner,
)
from .bot import Difficulty, choose_move
from .match import Match, Mode

__all__ = [
    "Board",
    "GameOutcome",
    "IllegalMove",
    "Mark",
    "Status",
    "apply_move",
    "current_turn",
    "empty_board",
    "is_full",
    "legal_moves",
    "outcome",
    "parse_board",
    "winner",
    "Difficulty",
    "choose_move",
    "Match",
    "Mode",
]
