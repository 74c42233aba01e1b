"""
Endpoints de sesiones efímeras (claim / heartbeat / release).

Cada petición barre primero las sesiones vencidas (dependencia del router).
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_fingerprint, get_session_store, get_settings, require_session_key, sweep_sessions
from app.api.schemas.session import ClaimOut, HeartbeatOut, ReleaseOut
from app.core.config import Settings
from app.core.time import iso_from_ms
from app.services.session_store import SessionStore

router = APIRouter(prefix="/api/session", tags=["Session"], dependencies=[Depends(sweep_sessions)])


@router.get(
    "/claim",
    response_model=ClaimOut,
    response_model_exclude_none=True,
    summary="Reclamar sesión",
    description="Crea una sesión para el fingerprint del cliente o reutiliza la que ya tiene viva.",
)
def claim(
    store: SessionStore = Depends(get_session_store),
    fingerprint: str = Depends(get_fingerprint),
    cfg: Settings = Depends(get_settings),
) -> ClaimOut:
    result = store.claim(fingerprint)
    return ClaimOut(
        sessionKey=result.session.key,
        expiresAt=iso_from_ms(result.session.expires_at),
        heartbeatInterval=cfg.heartbeat_interval_ms,
        message="Existing session reused" if result.reused else "Session created successfully",
    )


@router.post("/heartbeat", response_model=HeartbeatOut, summary="Mantener sesión viva")
def heartbeat(
    session_key: str = Depends(require_session_key),
    store: SessionStore = Depends(get_session_store),
    fingerprint: str = Depends(get_fingerprint),
) -> HeartbeatOut:
    expires_at = store.heartbeat(session_key, fingerprint)
    return HeartbeatOut(expiresAt=iso_from_ms(expires_at))


@router.post("/release", response_model=ReleaseOut, summary="Liberar sesión")
def release(
    session_key: str = Depends(require_session_key),
    store: SessionStore = Depends(get_session_store),
    fingerprint: str = Depends(get_fingerprint),
) -> ReleaseOut:
    store.release(session_key, fingerprint)
    return ReleaseOut()
