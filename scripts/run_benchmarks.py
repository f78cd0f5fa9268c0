#!/usr/bin/env python3
from __future__ import annotations

import argparse
import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from galo.board import Mark, empty_board
from galo.bot import Difficulty, choose_move, clear_cache
from galo.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 10
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def time_opening(difficulty: Difficulty, cold: bool) -> float:
    if cold:
        clear_cache()
    t0 = time.perf_counter()
    choose_move(empty_board(), difficulty, Mark.X, Mark.O)
    return time.perf_counter() - t0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Time bot move selection from the empty board")
    p.add_argument("--repeats", type=int, default=Config.repeats)
    p.add_argument("--tracking", choices=["none", "mlflow"], default=Config.tracking)
    p.add_argument("--log-dir", type=Path, default=Config.log_dir)
    ns = p.parse_args(argv)
    cfg = Config(repeats=ns.repeats, tracking=ns.tracking, log_dir=ns.log_dir)

    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"repeats": cfg.repeats})
        metrics = {}
        for difficulty in Difficulty:
            for cold in (True, False):
                times = [time_opening(difficulty, cold) for _ in range(cfg.repeats)]
                m, h = ci95(times)
                label = f"{difficulty.value}_{'cold' if cold else 'warm'}"
                metrics[f"{label}_mean_s"] = m
                metrics[f"{label}_ci95_half_s"] = h
                print(f"{label}: mean={m:.6f}s ± {h:.6f}s (95% CI, N={cfg.repeats})")
        log_metrics(metrics)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
