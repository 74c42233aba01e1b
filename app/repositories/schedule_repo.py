"""Repo del schedule de videos (archivo JSON en disco).

Forma persistida: `{"schedule": [...], "nextRefresh": <epoch ms>}`.
Los archivos viejos con un arreglo suelto se migran a esa forma al leerlos.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from app.core.exceptions import PersistenceFailure

_log = logging.getLogger("nakurity.schedule")

ScheduleDocument = Dict[str, Any]


class ScheduleRepository:
    def __init__(self, path: Path | str, next_refresh: Callable[[], int]) -> None:
        """`next_refresh` calcula el próximo refresh cuando falta en el archivo."""
        self.path = Path(path)
        self._next_refresh = next_refresh

    def exists(self) -> bool:
        return self.path.is_file()

    def _write(self, payload: ScheduleDocument) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            _log.error("Failed to write schedule %s: %s", self.path, e)
            raise PersistenceFailure("Failed to write schedule", details=str(e)) from e

    def load(self) -> Optional[ScheduleDocument]:
        """Lee el documento; None si el archivo no existe.

        Lanza PersistenceFailure si no se puede leer o la forma es inesperada.
        """
        if not self.exists():
            return None
        try:
            parsed = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _log.error("Failed to read schedule %s: %s", self.path, e)
            raise PersistenceFailure("Failed to read schedule", details=str(e)) from e

        # Formato viejo: arreglo suelto -> se envuelve y se persiste
        if isinstance(parsed, list):
            wrapped = {"schedule": parsed, "nextRefresh": self._next_refresh()}
            self._write(wrapped)
            _log.info("Migrated legacy schedule file %s (%s items)", self.path, len(parsed))
            return wrapped

        if isinstance(parsed, dict) and isinstance(parsed.get("schedule"), list):
            nr = parsed.get("nextRefresh")
            # bool es subclase de int; no cuenta como timestamp
            if not nr or isinstance(nr, bool) or not isinstance(nr, (int, float)):
                parsed["nextRefresh"] = self._next_refresh()
                self._write(parsed)
            return parsed

        _log.error("Schedule file %s has an unexpected shape", self.path)
        raise PersistenceFailure("Schedule file has an unexpected shape")

    def save(self, schedule: List[Any], next_refresh: int) -> ScheduleDocument:
        payload = {"schedule": schedule, "nextRefresh": next_refresh}
        self._write(payload)
        return payload
