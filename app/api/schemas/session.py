"""Schemas para endpoints de sesión (claim / heartbeat / release).

Los nombres de campo van en camelCase porque así los consume el cliente JS.
"""
from typing import Optional
from pydantic import BaseModel


class ClaimOut(BaseModel):
    success: bool = True
    sessionKey: str
    expiresAt: str
    heartbeatInterval: int
    message: Optional[str] = None


class HeartbeatOut(BaseModel):
    success: bool = True
    expiresAt: str


class ReleaseOut(BaseModel):
    success: bool = True
    message: str = "Session released"
