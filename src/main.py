"""Entry point for the Soda Merge sliding puzzle.

Sets up ECS world, event bus, systems, and Arcade window.
"""
import logging
import os
from pathlib import Path

from arcade import Window, run, set_background_color
from sodamerge.world import create_world
from sodamerge.constants import GRID_ROWS, GRID_COLS, WINDOW_HEIGHT, WINDOW_WIDTH
from sodamerge.events.bus import EVENT_TICK, EVENT_MOUSE_PRESS, EventBus
from sodamerge.leaderboard.client import LeaderboardClient
from sodamerge.systems.animation import AnimationSystem
from sodamerge.systems.board import BoardSystem
from sodamerge.systems.game_flow_system import GameFlowSystem
from sodamerge.systems.input import InputSystem
from sodamerge.systems.move_log_system import MoveLogSystem
from sodamerge.systems.render import RenderSystem
from sodamerge.utils.best_score import BestScoreStore

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = (250, 248, 239)


class SodaMergeWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, "Soda Merge", resizable=True)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus)

        # Board and animation systems
        self.board_system = BoardSystem(self.world, self.event_bus, rows=GRID_ROWS, cols=GRID_COLS)
        self.animation_system = AnimationSystem(self.world, self.event_bus, self.board_system, window=self)

        # Session flow
        leaderboard_url = os.environ.get("SODA_MERGE_LEADERBOARD_URL")
        self.game_flow_system = GameFlowSystem(
            self.world,
            self.event_bus,
            self.board_system,
            self.animation_system,
            best_score_store=BestScoreStore(),
            leaderboard_client=LeaderboardClient(leaderboard_url) if leaderboard_url else None,
        )

        # Interface systems
        self.render_system = RenderSystem(
            self.world, self.event_bus, self, self.board_system, game_flow=self.game_flow_system
        )
        self.render_system.notify_resize(self.width, self.height)
        self.input_system = InputSystem(self.event_bus, self, self.world, self.animation_system)

        # Optional move recorder, dumped on close.
        self.move_log_system = MoveLogSystem(self.event_bus)
        self._move_log_path = os.environ.get("SODA_MERGE_MOVE_LOG")
        if self._move_log_path:
            self.move_log_system.start()

        set_background_color(BACKGROUND_COLOR)

    def on_resize(self, width: int, height: int):
        # Propagate resize to render system for recalculating layout
        self.render_system.notify_resize(width, height)
        return super().on_resize(width, height)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button, modifiers=modifiers)

    def on_key_press(self, symbol: int, modifiers: int):
        return self.input_system.handle_key(symbol, modifiers)

    def on_close(self):
        if self._move_log_path:
            path = self.move_log_system.dump(Path(self._move_log_path))
            logger.info("Wrote %d logged moves to %s", len(self.move_log_system.entries()), path)
        super().on_close()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    SodaMergeWindow()
    run()


if __name__ == "__main__":
    main()
