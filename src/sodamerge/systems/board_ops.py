from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from esper import World

from sodamerge.components.direction import Direction
from sodamerge.components.flavor_registry import FlavorRegistry
from sodamerge.components.flavors import Flavors
from sodamerge.components.move_metadata import MoveMetadata, TileMerge, TileMove

Cells = Sequence[Optional[int]]


@dataclass(slots=True)
class LineCollapse:
    values: List[Optional[int]]
    moves: List[TileMove] = field(default_factory=list)
    merges: List[TileMerge] = field(default_factory=list)
    score: int = 0


@dataclass(slots=True)
class MoveOutcome:
    cells: List[Optional[int]]
    metadata: MoveMetadata
    score_delta: int
    changed: bool


def get_flavors(world: World) -> Flavors:
    for entity, _ in world.get_component(FlavorRegistry):
        return world.component_for_entity(entity, Flavors)
    raise RuntimeError("Flavor definitions not found")


def line_indices(direction: Direction, rows: int = 4, cols: int = 4) -> List[List[int]]:
    """Board indices of every line, each ordered from the edge tiles move toward."""
    if direction == Direction.LEFT:
        return [[row * cols + col for col in range(cols)] for row in range(rows)]
    if direction == Direction.RIGHT:
        return [[row * cols + col for col in reversed(range(cols))] for row in range(rows)]
    if direction == Direction.UP:
        return [[row * cols + col for row in range(rows)] for col in range(cols)]
    if direction == Direction.DOWN:
        return [[row * cols + col for row in reversed(range(rows))] for col in range(cols)]
    raise ValueError(f"unknown direction {direction!r}")


def collapse_line(cells: Cells, indices: Sequence[int]) -> LineCollapse:
    """Compact one line toward its first index, merging adjacent equal kinds once.

    Only neighbours in reading order merge, a merged tile never merges again in
    the same pass, and each merge scores ``2 ** new_kind``.
    """
    entries = [(cells[idx], idx) for idx in indices if cells[idx] is not None]
    result = LineCollapse(values=[None] * len(indices))
    read = 0
    write = 0
    while read < len(entries):
        kind, origin = entries[read]
        target = indices[write]
        nxt = entries[read + 1] if read + 1 < len(entries) else None
        if nxt is not None and nxt[0] == kind:
            merged = kind + 1
            result.values[write] = merged
            result.score += 2 ** merged
            if origin != target:
                result.moves.append(TileMove(src=origin, dst=target))
            if nxt[1] != target:
                result.moves.append(TileMove(src=nxt[1], dst=target))
            result.merges.append(TileMerge(sources=(origin, nxt[1]), dst=target))
            read += 2
        else:
            result.values[write] = kind
            if origin != target:
                result.moves.append(TileMove(src=origin, dst=target))
            read += 1
        write += 1
    return result


def apply_move(cells: Cells, direction: Direction, rows: int = 4, cols: int = 4) -> MoveOutcome:
    """Collapse every line for ``direction``; the input cells are left untouched."""
    updated = list(cells)
    metadata = MoveMetadata()
    score_delta = 0
    for indices in line_indices(direction, rows, cols):
        line = collapse_line(updated, indices)
        for idx, value in zip(indices, line.values):
            updated[idx] = value
        metadata.moves.extend(line.moves)
        metadata.merges.extend(line.merges)
        score_delta += line.score
    changed = any(a != b for a, b in zip(cells, updated))
    return MoveOutcome(cells=updated, metadata=metadata, score_delta=score_delta, changed=changed)


def empty_indices(cells: Cells) -> List[int]:
    return [idx for idx, kind in enumerate(cells) if kind is None]


def has_adjacent_pair(cells: Cells, rows: int = 4, cols: int = 4) -> bool:
    for row in range(rows):
        for col in range(cols):
            idx = row * cols + col
            current = cells[idx]
            if current is None:
                continue
            if col < cols - 1 and cells[idx + 1] == current:
                return True
            if row < rows - 1 and cells[idx + cols] == current:
                return True
    return False


def can_move(cells: Cells, rows: int = 4, cols: int = 4) -> bool:
    if any(kind is None for kind in cells):
        return True
    return has_adjacent_pair(cells, rows, cols)


def contains_rank(cells: Cells, rank: int) -> bool:
    return any(kind == rank for kind in cells)


def max_rank(cells: Cells) -> Optional[int]:
    kinds = [kind for kind in cells if kind is not None]
    return max(kinds) if kinds else None


def choose_spawn(cells: Cells, rng: random.Random, rare_chance: float) -> Optional[Tuple[int, int]]:
    """Pick (index, kind) for a new tile, or None when the board is full."""
    empty = empty_indices(cells)
    if not empty:
        return None
    index = rng.choice(empty)
    kind = 1 if rng.random() < rare_chance else 0
    return index, kind
