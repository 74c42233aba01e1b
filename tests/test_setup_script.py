"""Tests del script de setup (sin ejecutar git/pip/vercel reales)."""
import re
import subprocess
from types import SimpleNamespace

import pytest

from scripts import setup_backend


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(cmd, cwd=None):
        recorded.append(list(cmd))
        return SimpleNamespace(returncode=0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    return recorded


def test_generate_api_key_is_64_hex():
    key = setup_backend.generate_api_key()
    assert re.fullmatch(r"[0-9a-f]{64}", key)
    assert key != setup_backend.generate_api_key()


def test_init_writes_files_and_installs(tmp_path, calls):
    assert setup_backend.main(["--init"], root=tmp_path) == 0

    env = (tmp_path / ".env.example").read_text(encoding="utf-8")
    assert "GROQ_API_KEY=your_groq_api_key_here" in env
    assert re.search(r"^NEURO_OS_API_KEY=[0-9a-f]{64}$", env, re.M)
    assert ".env\n" in (tmp_path / ".gitignore").read_text(encoding="utf-8")

    assert calls[0] == ["git", "init"]
    assert calls[1][-3:] == ["install", "-e", "."]


def test_init_skips_git_when_repo_exists(tmp_path, calls):
    (tmp_path / ".git").mkdir()
    setup_backend.main(["--init"], root=tmp_path)
    assert ["git", "init"] not in calls


def test_deploy_warns_without_env(tmp_path, calls, caplog):
    caplog.set_level("WARNING", logger="nakurity.setup")
    setup_backend.main(["--deploy"], root=tmp_path)
    assert calls == [["vercel", "--prod"]]
    assert "GROQ_API_KEY" in caplog.text


def test_build_runs_python_build(tmp_path, calls):
    setup_backend.main(["--build"], root=tmp_path)
    assert calls[0][1:] == ["-m", "build", "--outdir", "dist"]


def test_failed_command_exits_with_its_code(tmp_path, monkeypatch):
    monkeypatch.setattr(subprocess, "run", lambda cmd, cwd=None: SimpleNamespace(returncode=3))
    with pytest.raises(SystemExit) as exc:
        setup_backend.main(["--deploy"], root=tmp_path)
    assert exc.value.code == 3


def test_no_flags_is_a_noop(tmp_path, calls):
    assert setup_backend.main([], root=tmp_path) == 0
    assert calls == []
    assert not (tmp_path / ".env.example").exists()
