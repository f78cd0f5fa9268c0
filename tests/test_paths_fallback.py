from pathlib import Path

import pytest

from galo.paths import default_difficulty, repo_root, results_dir


def test_repo_root_prefers_cwd_when_no_git_and_no_env(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("GALO_REPO_ROOT", raising=False)
    monkeypatch.delenv("GALO_RESULTS_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    import galo.paths as P

    monkeypatch.setattr(P, "_find_git_root", lambda start: None)

    assert repo_root() == tmp_path
    assert results_dir() == tmp_path / "results"


def test_environment_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("GALO_REPO_ROOT", str(tmp_path / "root"))
    assert repo_root() == tmp_path / "root"
    assert results_dir() == tmp_path / "root" / "results"
    monkeypatch.setenv("GALO_RESULTS_DIR", str(tmp_path / "elsewhere"))
    assert results_dir() == tmp_path / "elsewhere"


def test_default_difficulty(monkeypatch):
    monkeypatch.delenv("GALO_DIFFICULTY", raising=False)
    assert default_difficulty() == "medium"
    monkeypatch.setenv("GALO_DIFFICULTY", " HARD ")
    assert default_difficulty() == "hard"


def test_git_metadata_outside_a_checkout(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("GALO_REPO_ROOT", str(tmp_path))
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    from galo.paths import git_metadata

    assert git_metadata() == {"git_commit": None, "git_is_dirty": None}


@pytest.mark.parametrize("status, dirty", [("", False), (" M src/galo/bot.py", True)])
def test_git_metadata_from_git_output(monkeypatch, status, dirty):
    import galo.paths as P

    outputs = {"rev-parse": "abc123", "status": status}
    monkeypatch.setattr(P, "_git", lambda *args: outputs[args[0]])
    assert P.git_metadata() == {"git_commit": "abc123", "git_is_dirty": dirty}
