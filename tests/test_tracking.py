from pathlib import Path

from galo.tracking import log_artifact, log_metrics, log_params, maybe_mlflow_run


def test_tracking_disabled_is_noop(tmp_path: Path):
    with maybe_mlflow_run(False, run_name="arena", log_dir=tmp_path) as active:
        assert active is False
        log_params({"games": 1})
        log_metrics({"hard_X_win_rate": 0.5})
        log_artifact(tmp_path / "missing.json")
    assert not (tmp_path / "mlruns").exists()
