from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class AnimationPhase(Enum):
    IDLE = auto()
    SEQUENCING = auto()
    AWAITING_CONTACT = auto()
    AWAITING_MERGE = auto()
    AWAITING_SPAWN = auto()
    CLEANUP = auto()


class SequenceEvent(Enum):
    CONTACT = auto()
    SPAWN = auto()
    CLEANUP = auto()


@dataclass(frozen=True, slots=True)
class Milestone:
    at: float
    event: SequenceEvent


@dataclass(frozen=True, slots=True)
class Timeline:
    """Offsets (seconds from move acceptance) of one move's visual phases."""
    contact_end: float
    merge_start: Optional[float]
    merge_end: Optional[float]
    spawn_start: Optional[float]
    cleanup_at: float

    def milestones(self) -> List[Milestone]:
        entries = [Milestone(self.contact_end, SequenceEvent.CONTACT)]
        if self.spawn_start is not None:
            entries.append(Milestone(self.spawn_start, SequenceEvent.SPAWN))
        entries.append(Milestone(self.cleanup_at, SequenceEvent.CLEANUP))
        # Stable sort keeps CONTACT < SPAWN < CLEANUP on equal offsets.
        return sorted(entries, key=lambda m: m.at)


@dataclass(slots=True)
class PhaseTimer:
    """Single timer driving the in-flight sequence; deleting it cancels every pending phase."""
    timeline: Timeline
    milestones: List[Milestone] = field(default_factory=list)
    elapsed: float = 0.0
    next_index: int = 0

    def __post_init__(self) -> None:
        if not self.milestones:
            self.milestones = self.timeline.milestones()

    def due(self) -> Optional[Milestone]:
        if self.next_index >= len(self.milestones):
            return None
        milestone = self.milestones[self.next_index]
        if milestone.at <= self.elapsed:
            return milestone
        return None
