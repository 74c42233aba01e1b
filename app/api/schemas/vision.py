"""Schemas para el proxy de visión."""
from typing import Any, Dict, Optional
from pydantic import BaseModel


class VisionRequest(BaseModel):
    """`image` es opcional aquí: su ausencia se valida después de sesión y rate limit."""

    image: Optional[str] = None
    prompt: Optional[str] = None
    model: Optional[str] = None


class VisionOut(BaseModel):
    success: bool
    analysis: str
    model: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    timestamp: str
