"""Coordinates new games, the win / game-over modals, best score and score submission."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from esper import World

from sodamerge.components.game_state import GameMode
from sodamerge.events.bus import (
    EVENT_BEST_SCORE_CHANGED,
    EVENT_CONTINUE_REQUEST,
    EVENT_GAME_OVER,
    EVENT_GAME_WON,
    EVENT_NEW_GAME_REQUEST,
    EVENT_SCORE_SUBMITTED,
    EventBus,
)
from sodamerge.systems.animation import AnimationSystem
from sodamerge.systems.board import BoardSystem
from sodamerge.utils.best_score import BestScoreStore
from sodamerge.utils.game_state import get_game_mode, set_game_mode

if TYPE_CHECKING:
    from sodamerge.leaderboard.client import LeaderboardClient

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Central coordinator for session lifecycle and modal state."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        board_system: BoardSystem,
        animation_system: AnimationSystem,
        *,
        best_score_store: BestScoreStore | None = None,
        leaderboard_client: LeaderboardClient | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.animation_system = animation_system
        self.best_score_store = best_score_store
        self.leaderboard_client = leaderboard_client
        self._submitted = False
        if self.best_score_store is not None:
            self.best_score_store.load()

        self.event_bus.subscribe(EVENT_NEW_GAME_REQUEST, self._on_new_game_request)
        self.event_bus.subscribe(EVENT_CONTINUE_REQUEST, self._on_continue_request)
        self.event_bus.subscribe(EVENT_GAME_WON, self._on_game_won)
        self.event_bus.subscribe(EVENT_GAME_OVER, self._on_game_over)

    @property
    def mode(self) -> GameMode:
        return get_game_mode(self.world) or GameMode.PLAYING

    @property
    def best_score(self) -> int:
        if self.best_score_store is None:
            return self.board_system.score
        return max(self.best_score_store.best, self.board_system.score)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_new_game_request(self, sender, **payload) -> None:
        self.new_game()

    def _on_continue_request(self, sender, **payload) -> None:
        self.continue_game()

    def _on_game_won(self, sender, **payload) -> None:
        if self.board_system.win_modal_shown:
            return
        self.board_system.mark_win_modal_shown()
        self.animation_system.clear_queue()
        set_game_mode(self.world, self.event_bus, GameMode.WON)
        self._record_best(payload.get("score", self.board_system.score))

    def _on_game_over(self, sender, **payload) -> None:
        self.animation_system.clear_queue()
        set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
        self._record_best(payload.get("score", self.board_system.score))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def new_game(self) -> None:
        # Timers go first so nothing stale touches the fresh board.
        self.animation_system.interrupt()
        self.board_system.reset()
        self.animation_system.snap_to_board()
        self._submitted = False
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info("New game started")

    def continue_game(self) -> bool:
        if self.mode != GameMode.WON:
            return False
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        return True

    def submit_score(self, username: str) -> None:
        """Post the current session to the leaderboard; client errors propagate."""
        if self.leaderboard_client is None:
            raise RuntimeError("No leaderboard client configured")
        max_tile = self.board_system.max_tile
        self.leaderboard_client.submit_score(
            username,
            score=self.board_system.score,
            moves=self.board_system.move_count,
            max_tile=max_tile,
        )
        self._submitted = True
        self.event_bus.emit(
            EVENT_SCORE_SUBMITTED,
            username=username,
            score=self.board_system.score,
            moves=self.board_system.move_count,
            max_tile=max_tile,
        )

    @property
    def submitted(self) -> bool:
        return self._submitted

    def _record_best(self, score: int) -> None:
        if self.best_score_store is None:
            return
        if self.best_score_store.record(score):
            self.event_bus.emit(EVENT_BEST_SCORE_CHANGED, best_score=self.best_score_store.best)
