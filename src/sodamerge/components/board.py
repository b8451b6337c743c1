from dataclasses import dataclass, field
from typing import List, Optional, Tuple

@dataclass(slots=True)
class Board:
    """Row-major grid of tile kinds; ``None`` marks an empty cell."""
    rows: int = 4
    cols: int = 4
    cells: List[Optional[int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [None] * (self.rows * self.cols)

    def snapshot(self) -> Tuple[Optional[int], ...]:
        return tuple(self.cells)

    def clear(self) -> None:
        self.cells = [None] * (self.rows * self.cols)
