# app/infrastructure/ai/groq_client.py
"""Cliente del modelo de visión (Groq, vía su endpoint compatible con OpenAI)."""
from typing import Optional
from openai import OpenAI
from app.core.config import Settings


def build_vision_client(cfg: Settings) -> Optional[OpenAI]:
    """
    Devuelve un cliente si hay GROQ_API_KEY en settings (None si no).
    Sin reintentos internos: los errores se devuelven tal cual al caller.
    """
    if not cfg.groq_api_key:
        return None
    return OpenAI(
        api_key=cfg.groq_api_key,
        base_url=cfg.groq_base_url,
        timeout=cfg.vision_timeout_seconds,
        max_retries=0,
    )
