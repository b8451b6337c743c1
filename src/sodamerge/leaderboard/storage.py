from __future__ import annotations

import json
import logging
import os
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List

from sodamerge.leaderboard.validation import ScoreSubmission, to_int

logger = logging.getLogger(__name__)


def sort_key(entry: Dict[str, Any]):
    """Score descending, then fewer moves, then earlier submission."""
    return (-_number(entry.get("score")), _number(entry.get("moves")), _number(entry.get("createdAt")))


def _number(value: Any) -> int:
    # Hand-edited or legacy records may carry nulls or strings.
    parsed = to_int(value)
    return 0 if parsed is None else parsed


def ranked(entries: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    ordered = sorted(entries, key=sort_key)[:limit]
    return [
        {
            "rank": position,
            "username": entry.get("username"),
            "score": entry.get("score"),
            "moves": entry.get("moves"),
            "maxTile": entry.get("maxTile"),
            "createdAt": entry.get("createdAt"),
        }
        for position, entry in enumerate(ordered, start=1)
    ]


class LeaderboardStore:
    """Flat JSON file of submissions, trimmed to the most recent ``max_entries``.

    Writes go through a temp file and ``os.replace`` while holding a lock, so a
    reader never sees a half-written file.
    """

    def __init__(
        self,
        path: Path,
        max_entries: int = 5000,
        *,
        clock: Callable[[], float] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._path = Path(path)
        self._max_entries = max(1, int(max_entries))
        self._clock = clock or time.time
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def ensure(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            self._write_atomic([])

    def read_entries(self) -> List[Dict[str, Any]]:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError:
            logger.warning("Leaderboard file %s is corrupt; treating it as empty", self._path)
            return []
        if not isinstance(payload, list):
            return []
        return [entry for entry in payload if isinstance(entry, dict)]

    def top(self, limit: int) -> List[Dict[str, Any]]:
        return ranked(self.read_entries(), limit)

    def add(self, submission: ScoreSubmission) -> Dict[str, Any]:
        entry = {
            "id": self._id_factory(),
            "username": submission.username,
            "score": submission.score,
            "moves": submission.moves,
            "maxTile": submission.max_tile,
            "createdAt": int(self._clock() * 1000),
        }
        with self._lock:
            entries = self.read_entries()
            entries.append(entry)
            self._write_atomic(entries[-self._max_entries:])
        return entry

    def _write_atomic(self, entries: List[Dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(entries, handle)
        os.replace(tmp, self._path)
