from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, List

from sodamerge.events.bus import EVENT_MOVE_APPLIED, EventBus


class MoveLogSystem:
    """Debug recorder for accepted moves: direction plus boards before and after."""

    def __init__(self, event_bus: EventBus, *, clock: Callable[[], float] | None = None) -> None:
        self.event_bus = event_bus
        self._clock = clock or time.time
        self._entries: List[Dict[str, Any]] = []
        self._running = False
        self.event_bus.subscribe(EVENT_MOVE_APPLIED, self._on_move_applied)

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def entries(self) -> List[Dict[str, Any]]:
        return [dict(entry) for entry in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def dump(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(self._entries, handle, indent=2)
        return path

    def _on_move_applied(self, sender, **payload) -> None:
        if not self._running:
            return
        direction = payload.get("direction")
        self._entries.append(
            {
                "time": int(self._clock() * 1000),
                "direction": getattr(direction, "value", direction),
                "before": list(payload.get("before", ())),
                "after": list(payload.get("after", ())),
            }
        )
