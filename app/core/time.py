"""
Utilidades de tiempo: epoch en milisegundos y formato ISO-8601 (UTC, sufijo Z).

Las stores reciben un `clock` inyectable para poder simular el paso del tiempo.
"""
from __future__ import annotations

from datetime import datetime, timezone
from time import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Epoch actual en milisegundos."""
    return int(time() * 1000)


def iso_from_ms(ms: int) -> str:
    """Convierte epoch ms a ISO-8601 con milisegundos, p. ej. 2025-01-01T00:00:00.000Z."""
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_now() -> str:
    return iso_from_ms(now_ms())
