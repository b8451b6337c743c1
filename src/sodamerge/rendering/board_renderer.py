from __future__ import annotations

import math
from typing import TYPE_CHECKING

from sodamerge.components.tile_visual import TilePhase
from sodamerge.utils.move_plan import ease_in_out

if TYPE_CHECKING:
    from sodamerge.components.flavors import Flavors
    from sodamerge.rendering.context import RenderContext
    from sodamerge.systems.render import RenderSystem

BOARD_COLOR = (187, 173, 160)
EMPTY_CELL_COLOR = (205, 193, 180)
DARK_TEXT = (119, 110, 101)
LIGHT_TEXT = (249, 246, 242)
MERGE_POP = 0.12
SPAWN_START_SCALE = 0.2


class BoardRenderer:
    def __init__(self, render_system: RenderSystem, padding: int = 2):
        self._rs = render_system
        self._padding = padding

    def render(self, arcade, ctx: RenderContext, flavors: Flavors, headless: bool) -> None:
        rs = self._rs
        rs._last_tile_layout = {}
        draws: list[tuple[float, float, float, int]] = []

        for visual in ctx.visuals:
            if visual.kind is None or not visual.visible:
                continue
            center = ctx.cell_centers.get(visual.index)
            if center is None:
                continue
            p = visual.progress
            if rs.use_easing:
                p = ease_in_out(p)
            dx, dy = visual.current_offset(p)
            # Offsets grow downward; arcade y grows upward.
            draw_x = center[0] + dx
            draw_y = center[1] - dy
            scale = 1.0
            if visual.phase == TilePhase.MERGING:
                scale = 1.0 + MERGE_POP * math.sin(math.pi * visual.progress)
            elif visual.phase == TilePhase.SPAWNING:
                scale = SPAWN_START_SCALE + (1.0 - SPAWN_START_SCALE) * p
            size = max(ctx.tile_size - self._padding, 4) * scale
            rs._last_tile_layout[visual.index] = {
                "kind": visual.kind,
                "center": (draw_x, draw_y),
                "size": size,
            }
            draws.append((draw_x, draw_y, size, visual.kind))

        for ghost in ctx.ghosts:
            center = ctx.cell_centers.get(ghost.dst)
            if center is None:
                continue
            p = ease_in_out(ghost.progress) if rs.use_easing else ghost.progress
            dx, dy = ghost.current_offset(p)
            draws.append((center[0] + dx, center[1] - dy, max(ctx.tile_size - self._padding, 4), ghost.kind))

        if headless:
            return

        arcade.draw_lrbt_rectangle_filled(
            ctx.board_left, ctx.board_right, ctx.board_bottom, ctx.board_top, BOARD_COLOR
        )
        half = ctx.tile_size / 2
        for cx, cy in ctx.cell_centers.values():
            arcade.draw_lrbt_rectangle_filled(cx - half, cx + half, cy - half, cy + half, EMPTY_CELL_COLOR)

        for draw_x, draw_y, size, kind in draws:
            self._draw_tile(arcade, flavors, draw_x, draw_y, size, kind)

    def _draw_tile(self, arcade, flavors: Flavors, x: float, y: float, size: float, kind: int) -> None:
        half = size / 2
        arcade.draw_lrbt_rectangle_filled(x - half, x + half, y - half, y + half, flavors.color_for(kind))
        label = flavors.name_for(kind) or str(kind)
        text_color = DARK_TEXT if kind < 2 else LIGHT_TEXT
        font_size = max(8, int(size / 9))
        arcade.draw_text(
            label,
            x,
            y,
            text_color,
            font_size,
            width=int(size),
            align="center",
            anchor_x="center",
            anchor_y="center",
            multiline=True,
            bold=True,
        )
