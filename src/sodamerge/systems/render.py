from __future__ import annotations

from typing import Any

from esper import World

from sodamerge.components.game_state import GameMode
from sodamerge.constants import HEADER_HEIGHT
from sodamerge.events.bus import EVENT_TICK, EventBus
from sodamerge.rendering.board_renderer import DARK_TEXT, LIGHT_TEXT, BoardRenderer
from sodamerge.rendering.context import RenderContext, build_render_context
from sodamerge.systems import board_ops
from sodamerge.ui.layout import compute_board_geometry
from sodamerge.utils.game_state import get_game_mode

BUTTON_WIDTH = 140
BUTTON_HEIGHT = 40
BUTTON_COLOR = (143, 122, 102)
HEADER_BOX_COLOR = (187, 173, 160)
OVERLAY_COLOR = (238, 228, 218, 190)


class RenderSystem:
    """Draws header, board and modals; caches layout for input hit tests.

    Layout is computed without arcade so tests and the animation system can ask
    for it headlessly.
    """

    def __init__(self, world: World, event_bus: EventBus, window, board_system, game_flow=None):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.board_system = board_system
        self.game_flow = game_flow
        self.use_easing = True
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self._geometry: tuple[int, int, float, float] | None = None
        self._last_window_size: tuple[int, int] | None = None
        self._render_ctx: RenderContext | None = None
        self._button_cache: list[dict[str, Any]] = []
        self._last_tile_layout: dict[int, dict[str, Any]] = {}
        self._time = 0.0
        self._board_renderer = BoardRenderer(self)

    def notify_resize(self, width: int, height: int):
        self._last_window_size = (width, height)
        self._geometry = compute_board_geometry(width, height, self.board_system.rows, self.board_system.cols)
        self._layout_buttons(self._current_mode())

    def tile_stride(self) -> float | None:
        """Distance between neighbouring cell centres, None until the board has been laid out."""
        if self._geometry is None:
            return None
        tile_size, gap, _, _ = self._geometry
        return float(tile_size + gap)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        try:
            self._time += float(dt)
        except (TypeError, ValueError):
            self._time += 1/60

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        if self._geometry is None or (self.window.width, self.window.height) != self._last_window_size:
            self.notify_resize(self.window.width, self.window.height)
        tile_size, gap, board_left, board_bottom = self._geometry
        mode = self._current_mode()
        ctx = build_render_context(
            world=self.world,
            window_width=self.window.width,
            window_height=self.window.height,
            rows=self.board_system.rows,
            cols=self.board_system.cols,
            tile_size=tile_size,
            gap=gap,
            board_left=board_left,
            board_bottom=board_bottom,
            score=self.board_system.score,
            moves=self.board_system.move_count,
            best_score=self._best_score(),
            mode=mode,
        )
        self._render_ctx = ctx
        self._layout_buttons(mode)
        flavors = board_ops.get_flavors(self.world)
        self._board_renderer.render(arcade, ctx, flavors, headless=headless)
        if headless:
            return
        self._render_header(arcade, ctx)
        if mode != GameMode.PLAYING:
            self._render_modal(arcade, ctx)
        for entry in self._button_cache:
            self._render_button(arcade, entry)

    def get_button_at_point(self, x: float, y: float) -> str | None:
        for entry in self._button_cache:
            if entry["left"] <= x <= entry["right"] and entry["bottom"] <= y <= entry["top"]:
                return entry["name"]
        return None

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _layout_buttons(self, mode: GameMode) -> None:
        width, height = self.window.width, self.window.height
        buttons: list[dict[str, Any]] = []
        # Header button is always available.
        left = width - BUTTON_WIDTH - 20
        top = height - 20
        buttons.append(self._button("new_game", "New Game", left, top))
        if mode != GameMode.PLAYING:
            center_x = width / 2
            modal_top = height / 2 - 20
            if mode == GameMode.WON:
                buttons.append(self._button("continue", "Keep Going", center_x - BUTTON_WIDTH - 10, modal_top))
                buttons.append(self._button("new_game", "New Game", center_x + 10, modal_top))
            else:
                buttons.append(self._button("new_game", "Try Again", center_x - BUTTON_WIDTH / 2, modal_top))
        self._button_cache = buttons

    @staticmethod
    def _button(name: str, label: str, left: float, top: float) -> dict[str, Any]:
        return {
            "name": name,
            "label": label,
            "left": left,
            "right": left + BUTTON_WIDTH,
            "bottom": top - BUTTON_HEIGHT,
            "top": top,
        }

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _render_header(self, arcade, ctx: RenderContext) -> None:
        top = ctx.window_height
        arcade.draw_text("Soda Merge", 20, top - 60, DARK_TEXT, 32, bold=True)
        boxes = (("SCORE", ctx.score), ("BEST", ctx.best_score), ("MOVES", ctx.moves))
        box_width = 110
        bottom = top - HEADER_HEIGHT + 20
        for i, (label, value) in enumerate(boxes):
            left = 20 + i * (box_width + 10)
            arcade.draw_lrbt_rectangle_filled(left, left + box_width, bottom, bottom + 50, HEADER_BOX_COLOR)
            arcade.draw_text(label, left + box_width / 2, bottom + 36, LIGHT_TEXT, 10,
                             anchor_x="center", anchor_y="center")
            arcade.draw_text(f"{value:,}", left + box_width / 2, bottom + 16, LIGHT_TEXT, 16,
                             anchor_x="center", anchor_y="center", bold=True)

    def _render_modal(self, arcade, ctx: RenderContext) -> None:
        arcade.draw_lrbt_rectangle_filled(ctx.board_left, ctx.board_right, ctx.board_bottom, ctx.board_top, OVERLAY_COLOR)
        if ctx.mode == GameMode.WON:
            flavors = board_ops.get_flavors(self.world)
            title = "You Won!"
            message = f"You reached {flavors.win_flavor}! Final Score: {ctx.score:,}"
        else:
            title = "Game Over"
            message = f"Final Score: {ctx.score:,}"
        cx = ctx.window_width / 2
        cy = ctx.window_height / 2
        arcade.draw_text(title, cx, cy + 80, DARK_TEXT, 36, anchor_x="center", anchor_y="center", bold=True)
        arcade.draw_text(message, cx, cy + 35, DARK_TEXT, 14, anchor_x="center", anchor_y="center")

    def _render_button(self, arcade, entry: dict[str, Any]) -> None:
        arcade.draw_lrbt_rectangle_filled(entry["left"], entry["right"], entry["bottom"], entry["top"], BUTTON_COLOR)
        arcade.draw_text(
            entry["label"],
            (entry["left"] + entry["right"]) / 2,
            (entry["bottom"] + entry["top"]) / 2,
            LIGHT_TEXT,
            14,
            anchor_x="center",
            anchor_y="center",
            bold=True,
        )

    def _current_mode(self) -> GameMode:
        return get_game_mode(self.world) or GameMode.PLAYING

    def _best_score(self) -> int:
        if self.game_flow is not None:
            return self.game_flow.best_score
        return self.board_system.score
