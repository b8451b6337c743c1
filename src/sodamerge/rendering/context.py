from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from esper import World

from sodamerge.components.board_position import BoardPosition
from sodamerge.components.game_state import GameMode
from sodamerge.components.merge_ghost import MergeGhost
from sodamerge.components.tile_visual import TileVisual


@dataclass(slots=True)
class RenderContext:
    """Frame-scoped rendering data shared across renderer subcomponents."""

    world: World
    window_width: int
    window_height: int
    rows: int
    cols: int
    tile_size: int
    gap: int
    board_left: float
    board_bottom: float
    board_width: float
    board_height: float
    # index -> (cx, cy) in window coordinates, row 0 at the top.
    cell_centers: Dict[int, Tuple[float, float]]
    visuals: List[TileVisual] = field(default_factory=list)
    ghosts: List[MergeGhost] = field(default_factory=list)
    score: int = 0
    moves: int = 0
    best_score: int = 0
    mode: GameMode = GameMode.PLAYING

    @property
    def stride(self) -> int:
        return self.tile_size + self.gap

    @property
    def board_top(self) -> float:
        return self.board_bottom + self.board_height

    @property
    def board_right(self) -> float:
        return self.board_left + self.board_width


def build_render_context(
    world: World,
    window_width: int,
    window_height: int,
    rows: int,
    cols: int,
    tile_size: int,
    gap: int,
    board_left: float,
    board_bottom: float,
    *,
    score: int = 0,
    moves: int = 0,
    best_score: int = 0,
    mode: GameMode = GameMode.PLAYING,
) -> RenderContext:
    """Populate a RenderContext for the current frame."""

    board_width = cols * tile_size + (cols + 1) * gap
    board_height = rows * tile_size + (rows + 1) * gap
    stride = tile_size + gap

    centers: Dict[int, Tuple[float, float]] = {}
    visuals: List[TileVisual] = []
    for _, (pos, visual) in world.get_components(BoardPosition, TileVisual):
        cx = board_left + gap + pos.col * stride + tile_size / 2
        cy = board_bottom + gap + (rows - 1 - pos.row) * stride + tile_size / 2
        centers[visual.index] = (cx, cy)
        visuals.append(visual)
    visuals.sort(key=lambda v: v.index)
    ghosts = [ghost for _, ghost in world.get_component(MergeGhost)]

    return RenderContext(
        world=world,
        window_width=window_width,
        window_height=window_height,
        rows=rows,
        cols=cols,
        tile_size=tile_size,
        gap=gap,
        board_left=board_left,
        board_bottom=board_bottom,
        board_width=board_width,
        board_height=board_height,
        cell_centers=centers,
        visuals=visuals,
        ghosts=ghosts,
        score=score,
        moves=moves,
        best_score=best_score,
        mode=mode,
    )
