from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Optional

from .arena import PLAYERS, ArenaArgs, audit_hard, export_results, run_arena
from .board import (
    Board,
    Mark,
    current_turn,
    is_full,
    is_valid_state,
    legal_moves,
    outcome,
    parse_board,
    winner,
    winning_line,
)
from .bot import Difficulty, choose_move, score_moves
from .paths import default_difficulty, results_dir
from .tactics import fork_moves, gives_opponent_immediate_win, immediate_winning_moves
from .tracking import maybe_mlflow_run

BOARD_HELP = "Board string, 9 cells row-major, e.g. X...O.... (. for empty, X/O marks)"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="galo", description="Tic-tac-toe engine and bot CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for random arena players")

    p_out = sub.add_parser("outcome", help="Show winner, status and side to move for a board")
    p_out.add_argument("--board", required=True, help=BOARD_HELP)

    p_mv = sub.add_parser("move", help="Ask the bot for a move")
    p_mv.add_argument("--board", help=BOARD_HELP + " (omit with --stdin)")
    p_mv.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=None,
        help="Bot difficulty (default: $GALO_DIFFICULTY or medium)",
    )
    p_mv.add_argument(
        "--bot-mark",
        choices=["X", "O"],
        default=None,
        help="Mark the bot plays (default: side to move)",
    )
    p_mv.add_argument("--scores", action="store_true", help="Also print minimax scores per move")
    p_mv.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_tac = sub.add_parser("tactics", help="List immediate wins, blocks, forks and unsafe moves for side-to-move")
    p_tac.add_argument("--board", required=True, help=BOARD_HELP)

    p_ar = sub.add_parser("arena", help="Play bot strategies against each other")
    p_ar.add_argument("--games", type=int, default=10, help="Games per pairing (default: 10)")
    p_ar.add_argument(
        "--players",
        type=str,
        default=",".join(PLAYERS),
        help=f'Comma-separated players from {", ".join(PLAYERS)}',
    )
    p_ar.add_argument(
        "--no-swap", dest="swap_sides", action="store_false", help="Do not alternate who plays X"
    )
    p_ar.add_argument("--out", type=Path, default=None, help="Output directory (default: $GALO_RESULTS_DIR or results)")
    p_ar.add_argument(
        "--format",
        choices=["csv", "parquet", "both"],
        default="csv",
        help="Export format: csv (default), parquet, both",
    )
    p_ar.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_ar.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )

    p_aud = sub.add_parser("audit", help="Check the hard bot against every opponent line")
    p_aud.add_argument("--bot-mark", choices=["X", "O"], default="O", help="Mark the bot plays (default: O)")

    return p


def _read_board(raw: Optional[str]) -> Optional[Board]:
    try:
        board = parse_board(raw or "")
    except ValueError as e:
        logging.error("Invalid board string: %s", e)
        return None
    if not is_valid_state(board):
        logging.error("Board is not a valid reachable state.")
        return None
    return board


def _fmt_moves(moves) -> str:
    return " ".join(f"{r},{c}" for r, c in moves)


def _cmd_move(ns: argparse.Namespace) -> int:
    try:
        difficulty = Difficulty.parse(ns.difficulty or default_difficulty())
    except ValueError as e:
        logging.error("%s", e)
        return 2
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "difficulty", "bot_mark", "row", "col"])
        for line in sys.stdin:
            raw = line.strip()
            if not raw:
                continue
            try:
                board = parse_board(raw)
            except ValueError as e:
                logging.debug("skipping %r: %s", raw, e)
                continue
            if not is_valid_state(board):
                logging.debug("skipping %r: not a reachable state", raw)
                continue
            bot = Mark(ns.bot_mark) if ns.bot_mark else current_turn(board)
            move = choose_move(board, difficulty, bot, bot.opponent())
            row, col = move if move is not None else ("", "")
            w.writerow([board.serialize(), difficulty.value, bot.value, row, col])
        return 0

    board = _read_board(ns.board)
    if board is None:
        return 2
    bot = Mark(ns.bot_mark) if ns.bot_mark else current_turn(board)
    move = choose_move(board, difficulty, bot, bot.opponent())
    logging.info("difficulty=%s bot=%s move=%s", difficulty.value, bot, move)
    if ns.scores:
        scores = score_moves(board, bot, bot.opponent())
        logging.info("scores=%s", {f"{r},{c}": v for (r, c), v in scores.items()})
    return 0


def _cmd_arena(ns: argparse.Namespace, argv: Optional[list[str]]) -> int:
    players = [x.strip() for x in ns.players.split(",") if x.strip()]
    bad = [x for x in players if x.lower() not in PLAYERS]
    if bad or not players:
        logging.error("Unknown players: %s (expected from %s)", bad or players, ", ".join(PLAYERS))
        return 2
    if ns.games < 1:
        logging.error("--games must be >= 1")
        return 2
    args = ArenaArgs(
        players=players,
        games=ns.games,
        seed=ns.seed if ns.seed is not None else 42,
        swap_sides=ns.swap_sides,
        out=ns.out or results_dir(),
        format=ns.format,
        cli_argv=list(argv) if argv is not None else None,
    )
    with maybe_mlflow_run(ns.tracking == "mlflow", run_name="arena", log_dir=ns.log_dir):
        result = run_arena(args)
        try:
            out = export_results(result)
        except RuntimeError as e:
            logging.error("%s", e)
            return 2
    for row in result.summary_rows():
        logging.info(
            "player=%s side=%s games=%d wins=%d draws=%d losses=%d",
            row["player"], row["side"], row["games"], row["wins"], row["draws"], row["losses"],
        )
    logging.info("Exported arena results to: %s", out)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import PackageNotFoundError, version as _ver

            print(_ver("galo"))
        except PackageNotFoundError:
            print("unknown")
        return 0

    if ns.cmd == "outcome":
        board = _read_board(ns.board)
        if board is None:
            return 2
        result = outcome(board)
        logging.info(
            "winner=%s status=%s full=%s turn=%s line=%s",
            winner(board), result.status.value, is_full(board), current_turn(board),
            _fmt_moves(winning_line(board) or ()),
        )
        return 0

    if ns.cmd == "move":
        if not ns.stdin and not ns.board:
            logging.error("Provide --board or --stdin")
            return 2
        return _cmd_move(ns)

    if ns.cmd == "tactics":
        board = _read_board(ns.board)
        if board is None:
            return 2
        p = current_turn(board)
        logging.info(
            "to_move=%s wins=%s blocks=%s forks=%s unsafe=%s",
            p,
            _fmt_moves(immediate_winning_moves(board, p)),
            _fmt_moves(immediate_winning_moves(board, p.opponent())),
            _fmt_moves(fork_moves(board, p)),
            _fmt_moves(m for m in legal_moves(board) if gives_opponent_immediate_win(board, p, m)),
        )
        return 0

    if ns.cmd == "arena":
        return _cmd_arena(ns, argv)

    if ns.cmd == "audit":
        res = audit_hard(Mark(ns.bot_mark))
        if res.losses:
            logging.error("hard bot lost %d lines, first: %s", res.losses, _fmt_moves(res.losing_lines[0]))
            return 1
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
