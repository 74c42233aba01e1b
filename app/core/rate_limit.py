"""
Rate limit muy simple en memoria: ventana fija por identificador (p. ej. IP).

Uso típico:
- Proxy de visión: limiter.check(client_ip) con limit=10 y window_ms=60000

Es una ventana fija (no deslizante): en el borde entre dos ventanas se pueden
admitir hasta 2×limit peticiones seguidas. Es el comportamiento esperado.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Dict

from app.core.time import Clock, now_ms


@dataclass
class RateWindow:
    count: int
    reset_at: int


class FixedWindowRateLimiter:
    """Contador por identificador que se reinicia cuando `now > reset_at`."""

    def __init__(self, limit: int = 10, window_ms: int = 60_000, clock: Clock = now_ms) -> None:
        self.limit = limit
        self.window_ms = window_ms
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.RLock()

    def check(self, identifier: str) -> bool:
        """Devuelve True si se permite la petición y la registra.

        Si la ventana está llena devuelve False sin incrementar el contador.
        """
        now = self._clock()
        with self._lock:
            w = self._windows.get(identifier)
            if w is None or now > w.reset_at:
                w = RateWindow(count=0, reset_at=now + self.window_ms)
                self._windows[identifier] = w
            if w.count >= self.limit:
                return False
            w.count += 1
            return True

    def window(self, identifier: str) -> RateWindow | None:
        """Copia de la ventana actual (o None si no existe)."""
        with self._lock:
            w = self._windows.get(identifier)
            return replace(w) if w else None

    def cleanup_stale(self) -> int:
        """Elimina ventanas ya vencidas. Devuelve cuántas se borraron."""
        now = self._clock()
        with self._lock:
            stale = [k for k, w in self._windows.items() if now > w.reset_at]
            for k in stale:
                del self._windows[k]
            return len(stale)

    def reset(self) -> None:
        """Limpia todas las ventanas (útil en tests o reinicios)."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)
