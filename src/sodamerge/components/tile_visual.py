from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class TilePhase(Enum):
    IDLE = auto()
    SLIDING = auto()
    MERGING = auto()
    SPAWNING = auto()


@dataclass(slots=True)
class TileVisual:
    """Displayed state of one board cell.

    ``start_offset`` is the pixel offset (dx right, dy down) from the cell to
    the tile's visual origin; it shrinks to zero as ``progress`` reaches 1.
    """
    index: int
    kind: Optional[int] = None
    phase: TilePhase = TilePhase.IDLE
    origin: Optional[int] = None
    start_offset: Tuple[float, float] = (0.0, 0.0)
    progress: float = 0.0
    visible: bool = True

    def reset(self, kind: Optional[int]) -> None:
        self.kind = kind
        self.phase = TilePhase.IDLE
        self.origin = None
        self.start_offset = (0.0, 0.0)
        self.progress = 0.0
        self.visible = True

    def current_offset(self, eased: float | None = None) -> Tuple[float, float]:
        if self.phase != TilePhase.SLIDING:
            return (0.0, 0.0)
        p = self.progress if eased is None else eased
        remaining = 1.0 - p
        return (self.start_offset[0] * remaining, self.start_offset[1] * remaining)
