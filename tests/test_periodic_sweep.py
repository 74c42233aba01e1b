"""Tests del barrido periódico de sesiones y ventanas de rate limit."""
import time

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app

TIMEOUT = 300_000


def _wait_for(condition, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.fixture
def sweeping_app(tmp_path, clock):
    cfg = Settings(
        _env_file=None,
        groq_api_key=None,
        neuro_os_api_key=None,
        schedule_file=tmp_path / "videoSchedule.json",
        session_sweep_interval_seconds=0.01,
    )
    return create_app(cfg, clock=clock)


def test_sweep_task_is_off_by_default(app):
    with TestClient(app):
        assert app.state.sweep_task is None


def test_background_sweep_removes_expired_sessions_and_windows(sweeping_app, clock):
    store = sweeping_app.state.session_store
    limiter = sweeping_app.state.vision_rate_limiter

    with TestClient(sweeping_app) as client:
        task = sweeping_app.state.sweep_task
        assert task is not None and not task.done()

        assert client.get("/api/session/claim").status_code == 200
        limiter.check("1.2.3.4")
        assert len(store) == 1

        clock.advance(TIMEOUT + 1)
        assert _wait_for(lambda: len(store) == 0 and len(limiter) == 0)

    assert task.done()


def test_background_sweep_survives_errors(sweeping_app, clock, monkeypatch, caplog):
    caplog.set_level("ERROR", logger="nakurity.startup")
    store = sweeping_app.state.session_store
    real_sweep = store.sweep
    calls = {"n": 0}

    def flaky_sweep():
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("boom")
        return real_sweep()

    monkeypatch.setattr(store, "sweep", flaky_sweep)
    store.claim("fp")
    clock.advance(TIMEOUT + 1)

    with TestClient(sweeping_app):
        assert _wait_for(lambda: len(store) == 0)
        task = sweeping_app.state.sweep_task
        assert not task.done()

    assert calls["n"] >= 2
    assert "Periodic sweep failed" in caplog.text
