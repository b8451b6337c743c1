from esper import World
from sodamerge.components.board_position import BoardPosition
from sodamerge.components.merge_ghost import MergeGhost
from sodamerge.components.phase_timer import PhaseTimer, Timeline
from sodamerge.components.tile_visual import TileVisual
from sodamerge.utils.move_plan import GhostPlan
from typing import List, Optional, Sequence, Tuple

class AnimationFactory:
    def __init__(self, world: World):
        self.world = world

    def create_tile_visuals(self, cells: Sequence[Optional[int]], cols: int = 4) -> List[int]:
        ents = []
        for index, kind in enumerate(cells):
            row, col = divmod(index, cols)
            ent = self.world.create_entity()
            self.world.add_component(ent, BoardPosition(row=row, col=col))
            self.world.add_component(ent, TileVisual(index=index, kind=kind))
            ents.append(ent)
        return ents

    def create_ghost(self, plan: GhostPlan, start_offset: Tuple[float, float]) -> int:
        ent = self.world.create_entity()
        self.world.add_component(ent, MergeGhost(src=plan.src, dst=plan.dst, kind=plan.kind, start_offset=start_offset))
        return ent

    def create_phase_timer(self, timeline: Timeline) -> int:
        ent = self.world.create_entity()
        self.world.add_component(ent, PhaseTimer(timeline=timeline))
        return ent
