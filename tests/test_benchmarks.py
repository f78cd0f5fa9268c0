import pytest

pytest.importorskip("pytest_benchmark")

from galo.board import Mark, empty_board
from galo.bot import Difficulty, choose_move, clear_cache


def test_benchmark_hard_opening_cold_cache(benchmark):
    def _search():
        clear_cache()
        return choose_move(empty_board(), Difficulty.HARD, Mark.X, Mark.O)

    assert benchmark(_search) == (0, 0)


@pytest.mark.parametrize("difficulty", [Difficulty.EASY, Difficulty.MEDIUM])
def test_benchmark_cheap_strategies(benchmark, difficulty):
    assert benchmark(choose_move, empty_board(), difficulty, Mark.O, Mark.X) in {(0, 0), (1, 1)}
