"""Fingerprint del cliente (IP reenviada / peer + User-Agent) como sha256 hex.

Es una identidad débil: dos clientes detrás del mismo proxy con el mismo
navegador comparten fingerprint. Si faltan headers se usan cadenas vacías.
"""
import hashlib

from starlette.requests import Request


def generate_fingerprint(forwarded_for: str | None, user_agent: str | None, remote_addr: str | None = None) -> str:
    ip = forwarded_for or remote_addr or ""
    ua = user_agent or ""
    return hashlib.sha256((ip + ua).encode("utf-8")).hexdigest()


def _remote_addr(request: Request) -> str | None:
    client = request.client
    return client.host if client else None


def fingerprint_from_request(request: Request) -> str:
    return generate_fingerprint(
        request.headers.get("x-forwarded-for"),
        request.headers.get("user-agent"),
        _remote_addr(request),
    )


def client_identifier(request: Request) -> str:
    """Identificador para rate limit: IP reenviada, peer o 'unknown'."""
    return request.headers.get("x-forwarded-for") or _remote_addr(request) or "unknown"
