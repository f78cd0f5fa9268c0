"""
Tactics and simple motifs: immediate wins/blocks, forks, safety checks.
Teaching notes:
- Every candidate is tried on a scratch board returned by apply_move; the
  board passed in is never touched.
"""
from typing import List

from .board import Board, Mark, Move, apply_move, legal_moves, winner


def immediate_winning_moves(board: Board, mark: Mark) -> List[Move]:
    wins: List[Move] = []
    for row, col in legal_moves(board):
        if winner(apply_move(board, row, col, mark)) is mark:
            wins.append((row, col))
    return wins


def fork_moves(board: Board, mark: Mark) -> List[Move]:
    forks: List[Move] = []
    for row, col in legal_moves(board):
        child = apply_move(board, row, col, mark)
        if winner(child) is None and len(immediate_winning_moves(child, mark)) >= 2:
            forks.append((row, col))
    return forks


def gives_opponent_immediate_win(board: Board, mark: Mark, move: Move) -> bool:
    row, col = move
    if board[row, col] is not None:
        return False
    child = apply_move(board, row, col, mark)
    return len(immediate_winning_moves(child, mark.opponent())) > 0
