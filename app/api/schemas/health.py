"""Schemas para endpoints de health/debug."""
from typing import Optional
from pydantic import BaseModel


class PingOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool


class DebugStatusOut(BaseModel):
    app_name: str
    api_prefix: str
    sessions_total: int
    sessions_active: int
    max_sessions: int
    vision_configured: bool
    vision_model: str
    vision_reachable: Optional[bool] = None
    vision_error: Optional[str] = None
