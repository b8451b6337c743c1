from dataclasses import dataclass, field
from typing import List, Optional, Tuple

FALLBACK_COLOR: Tuple[int, int, int] = (60, 58, 50)

@dataclass(slots=True)
class Flavors:
    """Ordered flavor progression; a tile kind is an index into ``names``."""
    names: List[str]
    colors: List[Tuple[int, int, int]] = field(default_factory=list)
    win_rank: int = 10

    def __post_init__(self) -> None:
        if self.win_rank >= len(self.names):
            raise ValueError("win rank must fall inside the flavor table")

    def name_for(self, kind: Optional[int]) -> Optional[str]:
        if kind is None or not 0 <= kind < len(self.names):
            return None
        return self.names[kind]

    def color_for(self, kind: Optional[int]) -> Tuple[int, int, int]:
        if kind is None or not 0 <= kind < len(self.colors):
            return FALLBACK_COLOR
        return self.colors[kind]

    @property
    def win_flavor(self) -> str:
        return self.names[self.win_rank]
