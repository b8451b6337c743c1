from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class MergeGhost:
    """Transient stand-in for a tile converging on a merge target."""
    src: int
    dst: int
    kind: int
    start_offset: Tuple[float, float] = (0.0, 0.0)
    progress: float = 0.0

    def current_offset(self, eased: float | None = None) -> Tuple[float, float]:
        p = self.progress if eased is None else eased
        remaining = 1.0 - p
        return (self.start_offset[0] * remaining, self.start_offset[1] * remaining)
