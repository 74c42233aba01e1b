"""
Dependencias reutilizables para routers (FastAPI Depends).

- Acceso a las stores del proceso (creadas en `create_app` y guardadas en `app.state`).
- Headers de credenciales (X-Session-Key, X-API-Key).
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
import hmac
import json
from typing import Any, Optional
from fastapi import Header, Request

from app.core.config import Settings
from app.core.exceptions import MissingCredential, Unauthorized
from app.core.rate_limit import FixedWindowRateLimiter
from app.services.fingerprint import fingerprint_from_request
from app.services.schedule_service import ScheduleService
from app.services.session_store import SessionStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_vision_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.vision_rate_limiter


def get_schedule_service(request: Request) -> ScheduleService:
    return request.app.state.schedule_service


def get_vision_client(request: Request) -> Any:
    return request.app.state.vision_client


def get_fingerprint(request: Request) -> str:
    return fingerprint_from_request(request)


def sweep_sessions(request: Request) -> None:
    """Barrido oportunista de sesiones vencidas al inicio de cada petición."""
    get_session_store(request).sweep()


def require_session_key(x_session_key: Optional[str] = Header(default=None)) -> str:
    if not x_session_key:
        raise MissingCredential()
    return x_session_key


def require_api_key(request: Request, x_api_key: Optional[str] = Header(default=None)) -> None:
    """Valida la clave compartida solo si NEURO_OS_API_KEY está configurada."""
    expected = get_settings(request).neuro_os_api_key
    if not expected:
        return
    if not x_api_key or not hmac.compare_digest(x_api_key, expected):
        raise Unauthorized(message="Invalid or missing API key")


INVALID_JSON = object()


async def get_json_body(request: Request) -> Any:
    """Body JSON sin validar; `INVALID_JSON` si no se puede decodificar.

    No lanza errores: la validación del body va después de sesión y rate limit.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return INVALID_JSON
