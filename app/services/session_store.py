"""Store en memoria de sesiones efímeras ligadas a un fingerprint.

Ciclo de vida de una sesión:
- `claim`: crea (o reutiliza si ya hay una viva con el mismo fingerprint).
- `heartbeat`: extiende `expires_at = now + timeout`.
- `release`: elimina la sesión (solo desde el mismo fingerprint).
- Expiración perezosa (al acceder) y barrido oportunista con `sweep`.

Una sesión está lógicamente borrada en cuanto `now > expires_at`.
Las llaves nunca se reutilizan (256 bits aleatorios de `secrets`).

Los endpoints síncronos de FastAPI corren en un pool de hilos, así que cada
secuencia leer-y-modificar se hace bajo `self._lock`.
"""
from __future__ import annotations

import enum
import logging
import secrets
import threading
from dataclasses import dataclass, replace
from typing import Dict, Optional

from app.core.exceptions import CapacityExceeded, FingerprintMismatch, SessionNotFound
from app.core.logging import short
from app.core.time import Clock, now_ms

SESSION_TIMEOUT_MS = 5 * 60 * 1000
MAX_SESSIONS = 100

_log = logging.getLogger("nakurity.session")


def generate_session_key() -> str:
    return secrets.token_hex(32)


@dataclass
class Session:
    key: str
    fingerprint: str
    created_at: int
    last_heartbeat: int
    expires_at: int
    claimed: bool = True

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at


class SessionStatus(str, enum.Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    FINGERPRINT_MISMATCH = "fingerprint_mismatch"


@dataclass(frozen=True)
class ClaimResult:
    session: Session
    reused: bool


@dataclass(frozen=True)
class ValidationResult:
    status: SessionStatus
    reason: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.status is SessionStatus.VALID


class SessionStore:
    """Tabla de sesiones del proceso, con capacidad fija."""

    def __init__(
        self,
        timeout_ms: int = SESSION_TIMEOUT_MS,
        max_sessions: int = MAX_SESSIONS,
        clock: Clock = now_ms,
    ) -> None:
        self.timeout_ms = timeout_ms
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def active_count(self) -> int:
        """Sesiones no expiradas (sin borrar las vencidas)."""
        now = self._clock()
        with self._lock:
            return sum(1 for s in self._sessions.values() if not s.is_expired(now))

    def get(self, key: str) -> Session | None:
        with self._lock:
            s = self._sessions.get(key)
            return replace(s) if s else None

    def _find_live(self, fingerprint: str, now: int) -> Session | None:
        for s in self._sessions.values():
            if s.fingerprint == fingerprint and not s.is_expired(now):
                return s
        return None

    def claim(self, fingerprint: str) -> ClaimResult:
        """Reutiliza la sesión viva del fingerprint o crea una nueva.

        La capacidad cuenta todas las entradas de la tabla, incluidas las
        vencidas que aún no se barrieron.
        """
        now = self._clock()
        with self._lock:
            existing = self._find_live(fingerprint, now)
            if existing is not None:
                _log.info("Reusing session for fingerprint %s", short(fingerprint))
                return ClaimResult(session=replace(existing), reused=True)

            if len(self._sessions) >= self.max_sessions:
                _log.warning("Session limit reached (%s)", self.max_sessions)
                raise CapacityExceeded(message="Too many active sessions. Try again later.")

            key = generate_session_key()
            session = Session(
                key=key,
                fingerprint=fingerprint,
                created_at=now,
                last_heartbeat=now,
                expires_at=now + self.timeout_ms,
            )
            self._sessions[key] = session
            _log.info("Created session %s (%s active)", short(key), len(self._sessions))
            return ClaimResult(session=replace(session), reused=False)

    def _get_checked(self, key: str, fingerprint: str, now: int) -> Session:
        s = self._sessions.get(key)
        if s is None:
            raise SessionNotFound()
        if s.is_expired(now):
            del self._sessions[key]
            raise SessionNotFound()
        if s.fingerprint != fingerprint:
            _log.info("Fingerprint mismatch for %s", short(key))
            raise FingerprintMismatch()
        return s

    def heartbeat(self, key: str, fingerprint: str) -> int:
        """Extiende la sesión y devuelve el nuevo `expires_at` (epoch ms)."""
        now = self._clock()
        with self._lock:
            s = self._get_checked(key, fingerprint, now)
            s.last_heartbeat = now
            s.expires_at = now + self.timeout_ms
            return s.expires_at

    def release(self, key: str, fingerprint: str) -> None:
        now = self._clock()
        with self._lock:
            try:
                self._get_checked(key, fingerprint, now)
            except FingerprintMismatch:
                raise FingerprintMismatch("Cannot release session from different machine") from None
            del self._sessions[key]
            _log.info("Released session %s (%s active)", short(key), len(self._sessions))

    def validate(self, key: str, fingerprint: str) -> ValidationResult:
        """Chequeo de solo lectura (salvo purgar la sesión si ya venció)."""
        now = self._clock()
        with self._lock:
            s = self._sessions.get(key)
            if s is None:
                return ValidationResult(SessionStatus.NOT_FOUND, "Session not found or expired")
            if s.is_expired(now):
                del self._sessions[key]
                return ValidationResult(SessionStatus.EXPIRED, "Session expired")
            if s.fingerprint != fingerprint:
                return ValidationResult(SessionStatus.FINGERPRINT_MISMATCH, "Session fingerprint mismatch")
            return ValidationResult(SessionStatus.VALID)

    def sweep(self) -> int:
        """Borra todas las sesiones vencidas. Devuelve cuántas se eliminaron."""
        now = self._clock()
        with self._lock:
            expired = [k for k, s in self._sessions.items() if s.is_expired(now)]
            for k in expired:
                del self._sessions[k]
        if expired:
            _log.debug("Swept %s expired sessions", len(expired))
        return len(expired)
