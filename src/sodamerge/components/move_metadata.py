from dataclasses import dataclass, field
from typing import List, Optional, Tuple

@dataclass(frozen=True, slots=True)
class TileMove:
    src: int
    dst: int


@dataclass(frozen=True, slots=True)
class TileMerge:
    sources: Tuple[int, int]
    dst: int


@dataclass(slots=True)
class MoveMetadata:
    """Moves and merges performed by a single accepted move."""
    moves: List[TileMove] = field(default_factory=list)
    merges: List[TileMerge] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.moves and not self.merges

    def clear(self) -> None:
        self.moves = []
        self.merges = []

    def copy(self) -> "MoveMetadata":
        return MoveMetadata(moves=list(self.moves), merges=list(self.merges))

    def validate(self, cell_count: int) -> None:
        """Raise ValueError when a record points outside the board or is malformed."""
        for move in self.moves:
            if not isinstance(move, TileMove):
                raise ValueError(f"unexpected move record {move!r}")
            for idx in (move.src, move.dst):
                if not 0 <= idx < cell_count:
                    raise ValueError(f"move index {idx} outside board")
        for merge in self.merges:
            if not isinstance(merge, TileMerge) or len(merge.sources) != 2:
                raise ValueError(f"unexpected merge record {merge!r}")
            for idx in (*merge.sources, merge.dst):
                if not 0 <= idx < cell_count:
                    raise ValueError(f"merge index {idx} outside board")


@dataclass(slots=True)
class MoveRecord:
    """Engine-side snapshots of the most recent accepted move.

    ``after_move`` is the board after collapsing and merging but before the
    new tile spawned. Cleared by the animation system once consumed.
    """
    direction: Optional[str] = None
    before: Tuple[Optional[int], ...] = ()
    after_move: Tuple[Optional[int], ...] = ()
    metadata: MoveMetadata = field(default_factory=MoveMetadata)
    spawned_index: Optional[int] = None

    def clear(self) -> None:
        self.direction = None
        self.metadata = MoveMetadata()
        self.spawned_index = None
