from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "bestScore"
BEST_SCORE_ENV = "SODA_MERGE_BEST_SCORE_FILE"


class BestScoreStore:
    """Persists the best finished-session score in a small JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else self._default_path()
        self._best = 0

    @staticmethod
    def _default_path() -> Path:
        override = os.environ.get(BEST_SCORE_ENV)
        if override:
            return Path(override).expanduser()
        # Falls back to data/ beside src/ when run from a checkout.
        return Path(__file__).resolve().parents[3] / "data" / "best_score.json"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def best(self) -> int:
        return self._best

    def load(self) -> int:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            self._best = 0
            return self._best
        except json.JSONDecodeError:
            logger.warning("Best score file %s is corrupt; starting from 0", self._path)
            self._best = 0
            return self._best
        try:
            self._best = max(0, int(payload.get(BEST_SCORE_KEY, 0)))
        except (AttributeError, TypeError, ValueError):
            self._best = 0
        return self._best

    def record(self, score: int) -> bool:
        """Store ``score`` if it beats the current best. Returns True when it did."""
        if score <= self._best:
            return False
        self._best = int(score)
        self.save()
        return True

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump({BEST_SCORE_KEY: self._best}, handle)
