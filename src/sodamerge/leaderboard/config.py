from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8787
DEFAULT_DATA_FILE = Path("data") / "leaderboard.json"


@dataclass(slots=True)
class LeaderboardConfig:
    """Settings for the leaderboard service; limits mirror the public contract."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    allowed_origin: str = "*"
    data_file: Path = DEFAULT_DATA_FILE
    max_entries: int = 5000
    default_limit: int = 20
    max_limit: int = 100
    rate_limit_window: float = 60.0
    rate_limit_max: int = 15
    max_body_bytes: int = 16_384

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LeaderboardConfig:
        env = os.environ if environ is None else environ
        port = DEFAULT_PORT
        raw_port = env.get("PORT")
        if raw_port:
            try:
                port = int(raw_port)
            except ValueError:
                logger.warning("Ignoring invalid PORT %r; using %d", raw_port, DEFAULT_PORT)
        return cls(
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            allowed_origin=env.get("ALLOWED_ORIGIN") or "*",
            data_file=Path(env.get("LEADERBOARD_DATA_FILE") or DEFAULT_DATA_FILE),
        )
