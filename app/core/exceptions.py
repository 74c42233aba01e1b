"""
Errores de dominio y handlers globales para respuestas de error consistentes.

Todas las respuestas de error tienen la forma `{"error": "...", ...extra}`.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(Exception):
    """Error base con status HTTP y cuerpo JSON.

    `extra` se agrega tal cual al cuerpo (p. ej. `message`, `details`).
    """
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, error: str | None = None, **extra: Any) -> None:
        self.error = error or self.error
        self.extra = extra
        super().__init__(self.error)

    def body(self) -> Dict[str, Any]:
        return {"error": self.error, **self.extra}


class CapacityExceeded(ApiError):
    status_code = 429
    error = "Session limit reached"


class SessionNotFound(ApiError):
    status_code = 404
    error = "Session not found or expired"


class FingerprintMismatch(ApiError):
    status_code = 403
    error = "Session fingerprint mismatch"


class MissingCredential(ApiError):
    status_code = 400
    error = "Missing X-Session-Key header"


class Unauthorized(ApiError):
    status_code = 401
    error = "Unauthorized"


class RateLimited(ApiError):
    status_code = 429
    error = "Rate limit exceeded"


class MalformedInput(ApiError):
    status_code = 400
    error = "Malformed input"


class UpstreamFailure(ApiError):
    status_code = 500
    error = "Vision analysis failed"


class UpstreamTimeout(ApiError):
    status_code = 504
    error = "Vision analysis timed out"


class PersistenceFailure(ApiError):
    status_code = 500
    error = "Schedule storage failure"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _with_request_id(request: Request, body: Dict[str, Any]) -> Dict[str, Any]:
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("nakurity.errors")

    @app.exception_handler(ApiError)
    async def _api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=_with_request_id(request, exc.body()))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        body: Dict[str, Any] = {"error": exc.detail or "HTTP error"}
        return JSONResponse(
            status_code=exc.status_code,
            content=_with_request_id(request, body),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body: Dict[str, Any] = {"error": "Validation error", "errors": jsonable_encoder(exc.errors())}
        return JSONResponse(status_code=422, content=_with_request_id(request, body))

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        body: Dict[str, Any] = {"error": "Internal server error"}
        return JSONResponse(status_code=500, content=_with_request_id(request, body))
