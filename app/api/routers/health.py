"""Health y debug (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, Depends, status
import requests

from app.api.deps import get_session_store, get_settings
from app.api.schemas.health import PingOut, HealthOut, DebugStatusOut
from app.core.config import Settings
from app.services.session_store import SessionStore


router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/ping", response_model=PingOut, summary="Ping básico")
def ping() -> PingOut:
    return PingOut(message="pong")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(ok=True)


@router.get("/_debug/status", status_code=status.HTTP_200_OK, response_model=DebugStatusOut, summary="Estado de sesiones y del modelo de visión")
def debug_status(
    probe: bool = False,
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
) -> DebugStatusOut:
    out = {
        "app_name": cfg.app_name,
        "api_prefix": cfg.api_prefix,
        "sessions_total": len(store),
        "sessions_active": store.active_count,
        "max_sessions": store.max_sessions,
        "vision_configured": cfg.vision_configured,
        "vision_model": cfg.vision_model_default,
    }

    # Sonda opcional al proveedor (lista de modelos)
    if probe and cfg.vision_configured:
        try:
            r = requests.get(
                f"{cfg.groq_base_url}/models",
                headers={"Authorization": f"Bearer {cfg.groq_api_key}"},
                timeout=3,
            )
            r.raise_for_status()
            out["vision_reachable"] = True
        except requests.RequestException as e:
            out["vision_reachable"] = False
            out["vision_error"] = str(e)

    return DebugStatusOut(**out)
