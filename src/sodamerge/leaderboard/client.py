from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import requests


class LeaderboardError(Exception):
    """Any failure talking to the leaderboard service."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class LeaderboardValidationError(LeaderboardError):
    """The service rejected the submission (HTTP 400)."""


class LeaderboardRateLimited(LeaderboardError):
    """Too many writes from this address (HTTP 429)."""


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    rank: int
    username: str
    score: int
    moves: int
    max_tile: int | None
    created_at: int

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> LeaderboardEntry:
        return cls(
            rank=int(payload["rank"]),
            username=str(payload["username"]),
            score=int(payload["score"]),
            moves=int(payload["moves"]),
            max_tile=payload.get("maxTile"),
            created_at=int(payload.get("createdAt", 0)),
        )


class LeaderboardClient:
    """Thin requests wrapper over the leaderboard HTTP API. No retries."""

    def __init__(self, base_url: str, *, session: requests.Session | None = None, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def health(self) -> bool:
        try:
            response = self._request("GET", "/health")
        except LeaderboardError:
            return False
        return bool(self._json(response).get("ok"))

    def fetch_leaderboard(self, limit: int = 20) -> List[LeaderboardEntry]:
        response = self._request("GET", "/api/leaderboard", params={"limit": limit})
        return [LeaderboardEntry.from_json(item) for item in self._json(response).get("entries", [])]

    def submit_score(self, username: str, *, score: int, moves: int, max_tile: int | None = None) -> None:
        payload: Dict[str, Any] = {"username": username, "score": score, "moves": moves}
        if max_tile is not None:
            payload["maxTile"] = max_tile
        self._request("POST", "/api/leaderboard", json=payload)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, self.base_url + path, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise LeaderboardError(f"Leaderboard request failed: {exc}") from exc
        status = response.status_code
        if status == 400:
            raise LeaderboardValidationError(self._error_message(response), status=status)
        if status == 429:
            raise LeaderboardRateLimited(self._error_message(response), status=status)
        if status >= 400:
            raise LeaderboardError(self._error_message(response), status=status)
        return response

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise LeaderboardError("Leaderboard returned invalid JSON", status=response.status_code) from exc
        if not isinstance(payload, dict):
            raise LeaderboardError("Leaderboard returned an unexpected payload", status=response.status_code)
        return payload

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return f"HTTP {response.status_code}"
