"""Schedule rotativo de videos.

- GET: si `now >= nextRefresh` se baraja (Fisher–Yates) y se fija un nuevo
  `nextRefresh` aleatorio entre 1h, 5h y 24h.
- POST: reemplaza el schedule completo y fija un nuevo `nextRefresh`.
"""
from __future__ import annotations

import logging
import random
import threading
from pathlib import Path
from typing import Any, Dict, List

from app.core.exceptions import MalformedInput
from app.core.time import Clock, now_ms
from app.repositories.schedule_repo import ScheduleDocument, ScheduleRepository

HOUR_MS = 3_600_000
REFRESH_INTERVALS_MS = (HOUR_MS, 5 * HOUR_MS, 24 * HOUR_MS)

_log = logging.getLogger("nakurity.schedule")


def shuffle(items: List[Any], rng: random.Random) -> List[Any]:
    """Fisher–Yates in-place; devuelve la misma lista."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def _copy_item(item: Any) -> Any:
    return dict(item) if isinstance(item, dict) else item


class ScheduleService:
    def __init__(self, path: Path | str, clock: Clock = now_ms, rng: random.Random | None = None) -> None:
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self.repo = ScheduleRepository(path, next_refresh=lambda: self.next_refresh_from(self._clock()))

    def pick_interval(self) -> int:
        return self._rng.choice(REFRESH_INTERVALS_MS)

    def next_refresh_from(self, now: int) -> int:
        return now + self.pick_interval()

    def current(self) -> ScheduleDocument:
        """Devuelve el schedule vigente, rotándolo si ya venció."""
        now = self._clock()
        with self._lock:
            data = self.repo.load()
            if data is None:
                # Sin archivo: schedule vacío por defecto
                _log.info("No schedule on disk, seeding default at %s", self.repo.path)
                return self.repo.save([], self.next_refresh_from(now))

            if now >= data["nextRefresh"]:
                rotated = shuffle([_copy_item(v) for v in data["schedule"]], self._rng)
                data = self.repo.save(rotated, self.next_refresh_from(now))
                _log.info("Rotated schedule (%s items), next refresh %s", len(rotated), data["nextRefresh"])
            return data

    def replace(self, items: Any) -> Dict[str, Any]:
        if not isinstance(items, list):
            raise MalformedInput("Schedule must be an array")
        with self._lock:
            doc = self.repo.save(items, self.next_refresh_from(self._clock()))
        _log.info("Schedule replaced (%s items)", len(items))
        return {"success": True, "schedule": doc["schedule"], "nextRefresh": doc["nextRefresh"]}
