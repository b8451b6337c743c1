"""Sanitising of score submissions posted to the leaderboard."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9 _.-]+$")
USERNAME_MIN = 3
USERNAME_MAX = 16
MAX_SCORE = 10_000_000
MAX_MOVES = 100_000
MAX_TILE = 20


class ValidationError(ValueError):
    """Raised with the user-facing message for a rejected submission."""


@dataclass(frozen=True, slots=True)
class ScoreSubmission:
    username: str
    score: int
    moves: int
    max_tile: int | None = None


def sanitize_username(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = " ".join(value.split())
    if not USERNAME_MIN <= len(cleaned) <= USERNAME_MAX:
        return None
    if not USERNAME_PATTERN.match(cleaned):
        return None
    return cleaned


def to_int(value: Any) -> int | None:
    """Floor numbers and numeric strings to int; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.floor(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return math.floor(parsed) if math.isfinite(parsed) else None
    return None


def _in_range(value: int | None, upper: int) -> bool:
    return value is not None and 0 <= value <= upper


def validate_submission(payload: Any) -> ScoreSubmission:
    if not isinstance(payload, dict):
        payload = {}
    username = sanitize_username(payload.get("username"))
    score = to_int(payload.get("score"))
    moves = to_int(payload.get("moves"))
    max_tile = to_int(payload["maxTile"]) if "maxTile" in payload else None

    if username is None:
        raise ValidationError("Invalid username (3-16 chars).")
    if not _in_range(score, MAX_SCORE):
        raise ValidationError("Invalid score.")
    if not _in_range(moves, MAX_MOVES):
        raise ValidationError("Invalid move count.")
    if "maxTile" in payload and not _in_range(max_tile, MAX_TILE):
        raise ValidationError("Invalid maxTile.")
    return ScoreSubmission(username=username, score=score, moves=moves, max_tile=max_tile)
