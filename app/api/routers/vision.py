"""
Proxy de visión protegido por sesión + rate limit.

Orden: API key (opcional) -> sesión -> rate limit -> validación del body -> modelo.
El body se lee sin validar y se parsea recién después del rate limit.
"""
import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError

from app.api.deps import (
    INVALID_JSON,
    get_fingerprint,
    get_json_body,
    get_session_store,
    get_settings,
    get_vision_client,
    get_vision_rate_limiter,
    require_api_key,
    sweep_sessions,
)
from app.api.schemas.vision import VisionOut, VisionRequest
from app.core.config import Settings
from app.core.exceptions import MalformedInput, RateLimited, Unauthorized
from app.core.logging import short
from app.core.rate_limit import FixedWindowRateLimiter
from app.services.fingerprint import client_identifier
from app.services.session_store import SessionStore
from app.services.vision_service import analyze_image

router = APIRouter(tags=["Vision"])
_log = logging.getLogger("nakurity.vision")


def _parse_payload(body: Any) -> VisionRequest:
    if body is None:
        return VisionRequest()
    if body is INVALID_JSON or not isinstance(body, dict):
        raise MalformedInput("Request body must be a JSON object")
    try:
        return VisionRequest.model_validate(body)
    except ValidationError as e:
        raise MalformedInput("Invalid request body", details=[err["msg"] for err in e.errors()]) from e


@router.post(
    "/vision",
    response_model=VisionOut,
    summary="Analizar screenshot",
    description="Valida sesión y rate limit, y reenvía la imagen al modelo de visión.",
    dependencies=[Depends(sweep_sessions), Depends(require_api_key)],
)
def vision(
    request: Request,
    body: Any = Depends(get_json_body),
    x_session_key: Optional[str] = Header(default=None),
    store: SessionStore = Depends(get_session_store),
    limiter: FixedWindowRateLimiter = Depends(get_vision_rate_limiter),
    fingerprint: str = Depends(get_fingerprint),
    client: Any = Depends(get_vision_client),
    cfg: Settings = Depends(get_settings),
) -> VisionOut:
    if not x_session_key:
        raise Unauthorized(message="Missing session key")
    check = store.validate(x_session_key, fingerprint)
    if not check.valid:
        _log.info("Rejected vision call for %s: %s", short(x_session_key), check.status.value)
        raise Unauthorized(message=check.reason or "Invalid session key")

    if not limiter.check(client_identifier(request)):
        raise RateLimited(f"Rate limit exceeded - max {limiter.limit} requests per minute")

    payload = _parse_payload(body)
    if not payload.image:
        raise MalformedInput("Missing required field: image (base64 or URL)")

    result = analyze_image(client, payload.image, cfg, prompt=payload.prompt, model=payload.model)
    return VisionOut(**result)
