"""
Arena: bot-vs-bot games, an exhaustive audit of the Hard bot, and result export.

Players are named by difficulty ("easy", "medium", "hard") or "random", which
picks uniformly among legal moves with a seeded numpy Generator. Results are
written as CSV by default; Parquet needs pandas and pyarrow. A manifest.json
records arguments, row counts, versions and checksums for reproducibility.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import itertools
import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .board import Board, Mark, Move, Status, apply_move, empty_board, legal_moves, outcome
from .bot import Difficulty, choose_move
from .paths import git_metadata, results_dir
from .tracking import log_artifact, log_metrics, log_params

RANDOM = "random"
PLAYERS = tuple(d.value for d in Difficulty) + (RANDOM,)

ARENA_VERSION = "1.0.0"


def _check_player(name: str) -> str:
    key = name.strip().lower()
    if key not in PLAYERS:
        raise ValueError(f"Unknown player: {name!r} (expected one of {', '.join(PLAYERS)})")
    return key


def pick_move(player: str, board: Board, mark: Mark, rng: Optional[np.random.Generator] = None) -> Move:
    if player == RANDOM:
        if rng is None:
            rng = np.random.default_rng()
        moves = legal_moves(board)
        return moves[int(rng.integers(len(moves)))]
    move = choose_move(board, player, mark, mark.opponent())
    assert move is not None
    return move


@dataclass
class GameRecord:
    x_player: str
    o_player: str
    moves: List[Move]
    final: Board

    @property
    def winner(self) -> Optional[Mark]:
        return outcome(self.final).winner

    @property
    def result(self) -> str:
        w = self.winner
        return "draw" if w is None else w.value

    def player_result(self, mark: Mark) -> str:
        w = self.winner
        if w is None:
            return "draw"
        return "win" if w is mark else "loss"


def play_game(x_player: str, o_player: str, rng: Optional[np.random.Generator] = None) -> GameRecord:
    players = {Mark.X: _check_player(x_player), Mark.O: _check_player(o_player)}
    board = empty_board()
    moves: List[Move] = []
    while not outcome(board).is_terminal:
        mark = board.turn
        row, col = pick_move(players[mark], board, mark, rng)
        board = apply_move(board, row, col, mark)
        moves.append((row, col))
    return GameRecord(players[Mark.X], players[Mark.O], moves, board)


@dataclass
class ArenaArgs:
    players: List[str] = field(default_factory=lambda: list(PLAYERS))
    games: int = 10
    seed: int = 42
    swap_sides: bool = True
    out: Optional[Path] = None
    format: str = "csv"  # one of: "csv", "parquet", "both"
    cli_argv: Optional[List[str]] = None


@dataclass
class ArenaResult:
    args: ArenaArgs
    games: List[GameRecord]

    def game_rows(self) -> List[Dict[str, Any]]:
        rows = []
        for i, g in enumerate(self.games):
            rows.append({
                "game_id": i,
                "x_player": g.x_player,
                "o_player": g.o_player,
                "moves": " ".join(f"{r}{c}" for r, c in g.moves),
                "plies": len(g.moves),
                "final_board": g.final.serialize(),
                "result": g.result,
            })
        return rows

    def summary_rows(self) -> List[Dict[str, Any]]:
        tally: Dict[Tuple[str, str], Counter] = {}
        for g in self.games:
            for mark, player in ((Mark.X, g.x_player), (Mark.O, g.o_player)):
                tally.setdefault((player, mark.value), Counter())[g.player_result(mark)] += 1
        rows = []
        for (player, side), c in sorted(tally.items()):
            n = sum(c.values())
            rows.append({
                "player": player,
                "side": side,
                "games": n,
                "wins": c["win"],
                "draws": c["draw"],
                "losses": c["loss"],
                "win_rate": round(c["win"] / n, 4) if n else 0.0,
            })
        return rows


def run_arena(args: ArenaArgs) -> ArenaResult:
    players = [_check_player(p) for p in args.players]
    if args.games < 1:
        raise ValueError("games must be >= 1")
    rng = np.random.default_rng(args.seed)
    records: List[GameRecord] = []
    for a, b in itertools.combinations_with_replacement(players, 2):
        for i in range(args.games):
            x, o = (b, a) if args.swap_sides and i % 2 else (a, b)
            records.append(play_game(x, o, rng))
        logging.debug("pairing %s vs %s done (%d games)", a, b, args.games)
    logging.info("Played %d games across %d players", len(records), len(players))
    return ArenaResult(args, records)


@dataclass
class AuditResult:
    bot_mark: Mark
    games: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    losing_lines: List[List[Move]] = field(default_factory=list)


def audit_hard(bot_mark: Mark = Mark.O) -> AuditResult:
    """Play the Hard bot against every legal opponent sequence from the empty board."""
    res = AuditResult(bot_mark)

    def walk(board: Board, line: List[Move]) -> None:
        result = outcome(board)
        if result.is_terminal:
            res.games += 1
            if result.status is Status.DRAW:
                res.draws += 1
            elif result.winner is bot_mark:
                res.wins += 1
            else:
                res.losses += 1
                res.losing_lines.append(list(line))
            return
        mark = board.turn
        if mark is bot_mark:
            move = choose_move(board, Difficulty.HARD, bot_mark, bot_mark.opponent())
            assert move is not None
            walk(apply_move(board, move[0], move[1], mark), line + [move])
            return
        for row, col in legal_moves(board):
            walk(apply_move(board, row, col, mark), line + [(row, col)])

    walk(empty_board(), [])
    logging.info("audit bot=%s games=%d wins=%d draws=%d losses=%d",
                 bot_mark, res.games, res.wins, res.draws, res.losses)
    return res


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    fieldnames = list(rows[0].keys()) if rows else []
    with path.open("w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def _package_versions() -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for pkg in ["numpy", "pandas", "pyarrow"]:
        if importlib.util.find_spec(pkg) is None:
            continue
        mod = __import__(pkg)
        ver = getattr(mod, "__version__", None)
        if ver:
            versions[pkg] = ver
    return versions


def export_results(result: ArenaResult, out: Optional[Path] = None, fmt: Optional[str] = None) -> Path:
    out = Path(out or result.args.out or results_dir())
    fmt = (fmt or result.args.format or "csv").lower()
    if fmt not in {"csv", "parquet", "both"}:
        raise ValueError(f"Unknown export format: {fmt}")

    have_parquet = (
        importlib.util.find_spec("pandas") is not None
        and importlib.util.find_spec("pyarrow") is not None
    )
    msg = (
        "Parquet dependencies not available (install pandas and pyarrow). "
        "Use pip install .[parquet] to enable parquet support."
    )
    if fmt == "parquet" and not have_parquet:
        # Fail before anything is written.
        raise RuntimeError(msg)

    out.mkdir(parents=True, exist_ok=True)
    rows_games = result.game_rows()
    rows_summary = result.summary_rows()
    files: Dict[str, Optional[Path]] = {
        "games_csv": None,
        "summary_csv": None,
        "games_parquet": None,
        "summary_parquet": None,
    }

    if fmt in {"csv", "both"}:
        files["games_csv"] = out / "games.csv"
        files["summary_csv"] = out / "summary.csv"
        _write_csv(files["games_csv"], rows_games)
        _write_csv(files["summary_csv"], rows_summary)
        logging.info("Wrote CSVs: %s (%d rows), %s (%d rows)",
                     files["games_csv"], len(rows_games), files["summary_csv"], len(rows_summary))

    if fmt in {"parquet", "both"}:
        if have_parquet:
            import pandas as pd  # type: ignore

            files["games_parquet"] = out / "games.parquet"
            files["summary_parquet"] = out / "summary.parquet"
            pd.DataFrame(rows_games).to_parquet(files["games_parquet"])
            pd.DataFrame(rows_summary).to_parquet(files["summary_parquet"])
            logging.info("Wrote Parquet files to %s", out)
        else:
            logging.warning("%s Proceeding with CSV only; manifest will record parquet_written=false.", msg)

    args = result.args
    manifest = {
        "arena_version": ARENA_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "players": args.players,
            "games": args.games,
            "seed": args.seed,
            "swap_sides": args.swap_sides,
            "format": fmt,
        },
        **git_metadata(),
        "python": {
            "python_version": sys.version.split(" ")[0],
            "packages": _package_versions(),
        },
        "cli_argv": args.cli_argv,
        "row_counts": {"games": len(rows_games), "summary": len(rows_summary)},
        "results": dict(Counter(r["result"] for r in rows_games)),
        "files": {k: str(v) if v is not None else None for k, v in files.items()},
        "checksums": {k: _sha256_file(v) for k, v in files.items() if v is not None},
        "parquet_written": files["games_parquet"] is not None,
    }
    (out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json to %s", out)

    log_params({
        "players": ",".join(args.players),
        "games": args.games,
        "seed": args.seed,
        "swap_sides": args.swap_sides,
        "format": fmt,
    })
    for row in rows_summary:
        log_metrics({f"{row['player']}_{row['side']}_win_rate": float(row["win_rate"])})
    log_artifact(out / "manifest.json")
    for p in files.values():
        if p is not None:
            log_artifact(p)
    return out
