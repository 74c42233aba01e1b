"""Entrada principal de la app FastAPI (configura middlewares, excepciones, stores y routers)."""
import asyncio
import contextlib
import logging
from fastapi import FastAPI

from app.api.router import api_router
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.core.rate_limit import FixedWindowRateLimiter
from app.core.time import Clock, now_ms
from app.infrastructure.ai.groq_client import build_vision_client
from app.services.schedule_service import ScheduleService
from app.services.session_store import SessionStore

_log = logging.getLogger("nakurity.startup")


async def _periodic_sweep(app: FastAPI, interval: float) -> None:
    store: SessionStore = app.state.session_store
    limiter: FixedWindowRateLimiter = app.state.vision_rate_limiter
    while True:
        await asyncio.sleep(interval)
        try:
            removed = store.sweep()
            stale = limiter.cleanup_stale()
        except Exception:
            # Un fallo puntual no detiene el barrido; se reintenta en el próximo ciclo
            _log.exception("Periodic sweep failed")
            continue
        if removed or stale:
            _log.info("Periodic sweep removed %s sessions, %s rate windows", removed, stale)


def create_app(cfg: Settings | None = None, clock: Clock = now_ms) -> FastAPI:
    """Construye la app y sus stores del proceso (sin persistencia entre reinicios)."""
    cfg = cfg or default_settings
    app = FastAPI(title=cfg.app_name)

    app.state.settings = cfg
    app.state.session_store = SessionStore(
        timeout_ms=cfg.session_timeout_ms,
        max_sessions=cfg.max_sessions,
        clock=clock,
    )
    app.state.vision_rate_limiter = FixedWindowRateLimiter(
        limit=cfg.vision_rate_limit,
        window_ms=cfg.vision_rate_window_ms,
        clock=clock,
    )
    app.state.schedule_service = ScheduleService(cfg.schedule_file, clock=clock)
    app.state.vision_client = build_vision_client(cfg)
    app.state.sweep_task = None

    add_middlewares(app, cfg)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup():
        if not cfg.vision_configured:
            _log.warning("GROQ_API_KEY no configurada; /vision responderá 500")
        if cfg.session_sweep_interval_seconds > 0:
            app.state.sweep_task = asyncio.create_task(
                _periodic_sweep(app, cfg.session_sweep_interval_seconds)
            )

    @app.on_event("shutdown")
    async def on_shutdown():
        task = app.state.sweep_task
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=cfg.api_prefix_normalized)
    return app


setup_logging(default_settings.log_level)
app = create_app()
