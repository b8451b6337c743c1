from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from sodamerge.components.move_metadata import MoveMetadata
from sodamerge.components.phase_timer import Timeline
from sodamerge.constants import (
    CONTACT_DURATION,
    MERGE_DURATION,
    MERGE_SPAWN_FRACTION,
    SPAWN_DURATION,
    SPAWN_LAG,
    WATCHDOG_TIMEOUT,
)


@dataclass(slots=True)
class SequenceTiming:
    contact: float = CONTACT_DURATION
    merge: float = MERGE_DURATION
    spawn: float = SPAWN_DURATION
    spawn_lag: float = SPAWN_LAG
    merge_spawn_fraction: float = MERGE_SPAWN_FRACTION
    watchdog: float = WATCHDOG_TIMEOUT


@dataclass(frozen=True, slots=True)
class GhostPlan:
    src: int
    dst: int
    kind: int


def compute_origins(board_after: Sequence[Optional[int]], metadata: MoveMetadata) -> Dict[int, int]:
    """Map every occupied destination to the cell its tile visually slides from.

    Unmoved tiles map to themselves; the first move record with a different
    origin wins per destination.
    """
    origins = {idx: idx for idx, kind in enumerate(board_after) if kind is not None}
    for move in metadata.moves:
        if move.dst not in origins:
            continue
        if origins[move.dst] == move.dst and move.src != move.dst:
            origins[move.dst] = move.src
    return origins


def compute_ghosts(
    board_after: Sequence[Optional[int]],
    metadata: MoveMetadata,
    origins: Dict[int, int],
) -> List[GhostPlan]:
    """One ghost per merge contributor that the destination tile itself does not represent."""
    ghosts: List[GhostPlan] = []
    for merge in metadata.merges:
        merged_kind = board_after[merge.dst]
        if merged_kind is None:
            continue
        shown_origin = origins.get(merge.dst, merge.dst)
        for src in merge.sources:
            if src == shown_origin:
                continue
            ghosts.append(GhostPlan(src=src, dst=merge.dst, kind=merged_kind - 1))
    return ghosts


def tile_offset(origin: int, dst: int, stride: float, cols: int = 4) -> Tuple[float, float]:
    """Pixel offset (dx right, dy down) from ``dst`` back to ``origin``."""
    o_row, o_col = divmod(origin, cols)
    t_row, t_col = divmod(dst, cols)
    return ((o_col - t_col) * stride, (o_row - t_row) * stride)


def build_timeline(
    timing: SequenceTiming,
    *,
    has_motion: bool,
    has_merges: bool,
    has_spawn: bool,
) -> Timeline:
    contact_end = timing.contact if (has_motion or has_merges) else 0.0
    merge_start: Optional[float] = None
    merge_end: Optional[float] = None
    if has_merges:
        merge_start = contact_end
        merge_end = contact_end + timing.merge
    spawn_start: Optional[float] = None
    if has_spawn:
        if has_merges:
            spawn_start = contact_end + timing.merge * timing.merge_spawn_fraction
        else:
            spawn_start = contact_end + timing.spawn_lag
    cleanup_at = contact_end
    if merge_end is not None:
        cleanup_at = max(cleanup_at, merge_end)
    if spawn_start is not None:
        cleanup_at = max(cleanup_at, spawn_start + timing.spawn)
    return Timeline(
        contact_end=contact_end,
        merge_start=merge_start,
        merge_end=merge_end,
        spawn_start=spawn_start,
        cleanup_at=cleanup_at,
    )


def window_progress(elapsed: float, start: Optional[float], duration: float) -> float:
    if start is None:
        return 0.0
    if duration <= 0.0:
        return 1.0
    return min(1.0, max(0.0, (elapsed - start) / duration))


def ease_in_out(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -2 * p * p + 4 * p - 1
