"""Fixtures compartidas: reloj falso, settings aislados y app de prueba."""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.api.deps import get_vision_client

START_MS = 1_700_000_000_000


class FakeClock:
    """Reloj en epoch ms que solo avanza cuando el test lo pide."""

    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeCompletions:
    def __init__(self, content="A login page", model="llama-test", error=None):
        self.content = content
        self.model = model
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))],
            model=self.model,
            usage=SimpleNamespace(model_dump=lambda: {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}),
        )


class FakeVisionClient:
    def __init__(self, **kwargs):
        self.completions = FakeCompletions(**kwargs)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        groq_api_key=None,
        neuro_os_api_key=None,
        schedule_file=tmp_path / "ncom" / "videoSchedule.json",
        max_sessions=100,
    )


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def app(settings, clock, vision_client):
    application = create_app(settings, clock=clock)
    application.dependency_overrides[get_vision_client] = lambda: vision_client
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def use_vision_client(app):
    """Reemplaza el cliente de visión por uno falso configurado en el test."""

    def _use(**kwargs) -> FakeVisionClient:
        fake = FakeVisionClient(**kwargs)
        app.dependency_overrides[get_vision_client] = lambda: fake
        return fake

    return _use
