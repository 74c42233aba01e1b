"""Análisis de screenshots con el modelo de visión (proxy delgado).

Construye el prompt y el mensaje multimodal, llama a `chat.completions` y
traduce los errores del proveedor a errores de la API.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import openai

from app.core.config import Settings
from app.core.exceptions import UpstreamFailure, UpstreamTimeout
from app.core.time import iso_now

_log = logging.getLogger("nakurity.vision")


def image_url(image: str) -> str:
    """Acepta data URL o base64 pelado (se asume PNG)."""
    return image if image.startswith("data:") else f"data:image/png;base64,{image}"


def _usage_dict(usage: Any) -> Optional[Dict[str, Any]]:
    if usage is None:
        return None
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    return dict(usage)


def analyze_image(
    client: Any,
    image: str,
    cfg: Settings,
    *,
    prompt: str | None = None,
    model: str | None = None,
) -> Dict[str, Any]:
    """
    Llama al modelo y devuelve `{success, analysis, model, usage, timestamp}`.

    Errores:
      - timeout -> UpstreamTimeout (504, reintentable por el cliente)
      - API key inválida -> UpstreamFailure("Invalid Groq API key")
      - cualquier otro -> UpstreamFailure con `details`
    """
    if client is None:
        raise UpstreamFailure("Vision model not configured")

    try:
        completion = client.chat.completions.create(
            model=model or cfg.vision_model_default,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt or cfg.vision_default_prompt},
                        {"type": "image_url", "image_url": {"url": image_url(image)}},
                    ],
                }
            ],
            temperature=cfg.vision_temperature,
            max_tokens=cfg.vision_max_tokens,
            top_p=1,
            stream=False,
        )
    except openai.APITimeoutError as e:
        _log.warning("Vision API timeout: %s", e)
        raise UpstreamTimeout(message="Upstream model did not answer in time. Retry later.", retryable=True) from e
    except openai.AuthenticationError as e:
        _log.error("Vision API rejected the API key")
        raise UpstreamFailure("Invalid Groq API key") from e
    except openai.OpenAIError as e:
        _log.error("Vision API error: %s", e)
        raise UpstreamFailure(details=str(e)) from e

    choices = getattr(completion, "choices", None) or []
    analysis = (choices[0].message.content if choices else None) or "No analysis generated"
    return {
        "success": True,
        "analysis": analysis,
        "model": completion.model,
        "usage": _usage_dict(getattr(completion, "usage", None)),
        "timestamp": iso_now(),
    }
