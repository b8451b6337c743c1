import logging
from collections import deque
from time import monotonic
from typing import Callable, Deque, List, Optional, Set, Tuple

from esper import World

from sodamerge.animation_factory import AnimationFactory
from sodamerge.components.direction import Direction
from sodamerge.components.merge_ghost import MergeGhost
from sodamerge.components.move_metadata import MoveMetadata
from sodamerge.components.phase_timer import AnimationPhase, PhaseTimer, SequenceEvent, Timeline
from sodamerge.components.tile_visual import TilePhase, TileVisual
from sodamerge.constants import DEFAULT_TILE_STRIDE, MAX_QUEUED_DIRECTIONS
from sodamerge.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_INTERRUPTED,
    EVENT_ANIMATION_PHASE,
    EVENT_ANIMATION_START,
    EVENT_TICK,
)
from sodamerge.systems.board import BoardSystem
from sodamerge.utils.move_plan import (
    SequenceTiming,
    build_timeline,
    compute_ghosts,
    compute_origins,
    tile_offset,
    window_progress,
)

logger = logging.getLogger(__name__)


class AnimationSystem:
    """Turns each accepted move into a timed slide -> merge -> spawn -> cleanup sequence.

    Owns the single input lock (any phase other than IDLE) and a short queue of
    directions pressed while a sequence is in flight. Time only advances on
    ``EVENT_TICK``; a wall-clock watchdog forces cleanup if the sequence stalls.

    With ``unlock_at_contact`` (the default) the lock still formally lasts until cleanup, but
    input pending once contact has resolved fast-forwards the merge/spawn tail
    so the queued move starts straight away.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        board_system: BoardSystem,
        *,
        window=None,
        timing: SequenceTiming | None = None,
        clock: Callable[[], float] | None = None,
        unlock_at_contact: bool = True,
        max_queue: int = MAX_QUEUED_DIRECTIONS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.window = window
        self.timing = timing or SequenceTiming()
        self.unlock_at_contact = unlock_at_contact
        self.factory = AnimationFactory(world)
        self._clock = clock or monotonic
        self._max_queue = max(1, int(max_queue))
        self._queue: Deque[Direction] = deque()
        self._phase = AnimationPhase.IDLE
        self._timer_entity: int | None = None
        self._accepted_at: float | None = None
        self._after_board: Tuple[Optional[int], ...] = ()
        self._final_board: Tuple[Optional[int], ...] = ()
        self._merge_targets: Set[int] = set()
        self._spawn_index: int | None = None
        self._visual_entities = self.factory.create_tile_visuals(board_system.board, board_system.cols)
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def phase(self) -> AnimationPhase:
        return self._phase

    @property
    def is_animating(self) -> bool:
        return self._phase != AnimationPhase.IDLE

    @property
    def pending_directions(self) -> Tuple[Direction, ...]:
        return tuple(self._queue)

    @property
    def timeline(self) -> Timeline | None:
        timer = self._active_timer()
        return timer.timeline if timer is not None else None

    def visual(self, index: int) -> TileVisual:
        return self.world.component_for_entity(self._visual_entities[index], TileVisual)

    def visuals(self) -> List[TileVisual]:
        return [self.world.component_for_entity(ent, TileVisual) for ent in self._visual_entities]

    def ghosts(self) -> List[MergeGhost]:
        return [ghost for _, ghost in self.world.get_component(MergeGhost)]

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def request_move(self, direction) -> bool:
        """Start a move now if idle, else queue it. False when the move was not taken."""
        parsed = Direction.parse(direction)
        if parsed is None:
            return False
        self._check_watchdog()
        if self._phase == AnimationPhase.IDLE:
            return self._execute(parsed)
        self._enqueue(parsed)
        if self.unlock_at_contact and self._phase in (AnimationPhase.AWAITING_MERGE, AnimationPhase.AWAITING_SPAWN):
            self._finish_now()
        return True

    def clear_queue(self) -> None:
        self._queue.clear()

    def _enqueue(self, direction: Direction) -> None:
        if self._queue and self._queue[-1] == direction:
            return
        self._queue.append(direction)
        while len(self._queue) > self._max_queue:
            self._queue.popleft()

    def _drain_queue(self) -> None:
        while self._queue and self._phase == AnimationPhase.IDLE:
            direction = self._queue.popleft()
            if self._execute(direction):
                return

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    def _execute(self, direction: Direction) -> bool:
        if not self.board_system.move(direction):
            return False
        self._set_phase(AnimationPhase.SEQUENCING)
        self._accepted_at = self._clock()
        self.event_bus.emit(EVENT_ANIMATION_START, kind='move', direction=direction)
        timeline = self._sequence()
        self._timer_entity = self.factory.create_phase_timer(timeline)
        self._set_phase(AnimationPhase.AWAITING_CONTACT)
        # Zero-length windows resolve in the same tick as acceptance.
        self._advance(0.0)
        return True

    def _sequence(self) -> Timeline:
        final = self.board_system.board
        after = self.board_system.board_after_move
        if len(after) != len(final):
            after = final
        metadata = self._validated_metadata(len(final))
        spawned = self.board_system.spawned_index
        if spawned is not None and (not 0 <= spawned < len(final) or final[spawned] is None):
            spawned = None
        origins = compute_origins(after, metadata)
        merge_targets = {merge.dst for merge in metadata.merges if after[merge.dst] is not None}
        stride = self.measure_stride()
        cols = self.board_system.cols

        self._delete_ghosts()
        sliding = False
        for index, visual in enumerate(self.visuals()):
            if index == spawned:
                # Hidden until the spawn window opens.
                visual.reset(None)
                visual.visible = False
                continue
            kind = after[index]
            if kind is not None and index in merge_targets:
                kind -= 1
            visual.reset(kind)
            if after[index] is None:
                continue
            origin = origins.get(index, index)
            visual.origin = origin
            if origin != index:
                visual.phase = TilePhase.SLIDING
                visual.start_offset = tile_offset(origin, index, stride, cols)
                sliding = True
        ghosts = compute_ghosts(after, metadata, origins)
        for plan in ghosts:
            self.factory.create_ghost(plan, tile_offset(plan.src, plan.dst, stride, cols))

        self._after_board = after
        self._final_board = final
        self._merge_targets = merge_targets
        self._spawn_index = spawned
        return build_timeline(
            self.timing,
            has_motion=sliding or bool(ghosts),
            has_merges=bool(merge_targets),
            has_spawn=spawned is not None,
        )

    def _validated_metadata(self, cell_count: int) -> MoveMetadata:
        metadata = self.board_system.animation_metadata
        try:
            metadata.validate(cell_count)
        except ValueError as exc:
            logger.warning("Dropping malformed move metadata: %s", exc)
            return MoveMetadata()
        return metadata

    def measure_stride(self) -> float:
        """Pixel distance between neighbouring cells, or the default before anything is laid out."""
        render_system = getattr(self.window, 'render_system', None)
        stride = None
        if render_system is not None and hasattr(render_system, 'tile_stride'):
            stride = render_system.tile_stride()
        if stride is None or stride <= 0:
            logger.debug("Board layout not measured yet; using default stride %.1f", DEFAULT_TILE_STRIDE)
            return DEFAULT_TILE_STRIDE
        return float(stride)

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        if self._check_watchdog():
            return
        self._advance(dt)

    def _advance(self, dt: float) -> None:
        ent = self._timer_entity
        timer = self._active_timer()
        if timer is None:
            return
        timer.elapsed += max(0.0, float(dt))
        self._update_progress(timer)
        while self._timer_entity == ent:
            milestone = timer.due()
            if milestone is None:
                break
            timer.next_index += 1
            self._fire(milestone.event)

    def _finish_now(self) -> None:
        """Run every remaining milestone of the current sequence immediately."""
        ent = self._timer_entity
        timer = self._active_timer()
        if timer is None:
            return
        while self._timer_entity == ent and timer.next_index < len(timer.milestones):
            milestone = timer.milestones[timer.next_index]
            timer.next_index += 1
            timer.elapsed = max(timer.elapsed, milestone.at)
            self._fire(milestone.event)

    def _update_progress(self, timer: PhaseTimer) -> None:
        timeline = timer.timeline
        slide = window_progress(timer.elapsed, 0.0, timeline.contact_end)
        for visual in self.visuals():
            if visual.phase == TilePhase.SLIDING:
                visual.progress = slide
            elif visual.phase == TilePhase.MERGING:
                visual.progress = window_progress(timer.elapsed, timeline.merge_start, self.timing.merge)
            elif visual.phase == TilePhase.SPAWNING:
                visual.progress = window_progress(timer.elapsed, timeline.spawn_start, self.timing.spawn)
        for ghost in self.ghosts():
            ghost.progress = slide

    def _fire(self, event: SequenceEvent) -> None:
        if event == SequenceEvent.CONTACT:
            self._on_contact()
        elif event == SequenceEvent.SPAWN:
            self._on_spawn()
        elif event == SequenceEvent.CLEANUP:
            self._cleanup(forced=False)

    def _on_contact(self) -> None:
        for visual in self.visuals():
            if visual.phase == TilePhase.SLIDING:
                visual.phase = TilePhase.IDLE
                visual.progress = 1.0
                visual.start_offset = (0.0, 0.0)
        self._delete_ghosts()
        if self._merge_targets:
            for index in self._merge_targets:
                visual = self.visual(index)
                visual.kind = self._after_board[index]
                visual.phase = TilePhase.MERGING
                visual.progress = 0.0
            self._set_phase(AnimationPhase.AWAITING_MERGE)
        else:
            self._set_phase(AnimationPhase.AWAITING_SPAWN)
        if self.unlock_at_contact and self._queue:
            self._finish_now()

    def _on_spawn(self) -> None:
        if self._spawn_index is not None:
            visual = self.visual(self._spawn_index)
            visual.kind = self._final_board[self._spawn_index]
            visual.visible = True
            visual.phase = TilePhase.SPAWNING
            visual.progress = 0.0
        self._set_phase(AnimationPhase.AWAITING_SPAWN)

    def _cleanup(self, *, forced: bool) -> None:
        self._set_phase(AnimationPhase.CLEANUP)
        self._cancel_timer()
        self._delete_ghosts()
        self.snap_to_board()
        self.board_system.clear_animation_metadata()
        self._reset_sequence_state()
        self._set_phase(AnimationPhase.IDLE)
        self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='move', forced=forced)
        self._drain_queue()

    def _check_watchdog(self) -> bool:
        if self._phase == AnimationPhase.IDLE or self._accepted_at is None:
            return False
        waited = self._clock() - self._accepted_at
        if waited < self.timing.watchdog:
            return False
        logger.warning("Animation watchdog fired after %.3fs in %s; forcing cleanup", waited, self._phase.name)
        self._cleanup(forced=True)
        return True

    # ------------------------------------------------------------------
    # Interruption
    # ------------------------------------------------------------------

    def interrupt(self) -> None:
        """Abandon the in-flight sequence and show the authoritative board immediately."""
        was_animating = self.is_animating
        self._cancel_timer()
        self._delete_ghosts()
        self._queue.clear()
        self.board_system.clear_animation_metadata()
        self._reset_sequence_state()
        self.snap_to_board()
        self._set_phase(AnimationPhase.IDLE)
        self.event_bus.emit(EVENT_ANIMATION_INTERRUPTED, was_animating=was_animating)

    def snap_to_board(self) -> None:
        board = self.board_system.board
        for visual in self.visuals():
            visual.reset(board[visual.index])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _set_phase(self, phase: AnimationPhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        self.event_bus.emit(EVENT_ANIMATION_PHASE, phase=phase)

    def _reset_sequence_state(self) -> None:
        self._accepted_at = None
        self._after_board = ()
        self._final_board = ()
        self._merge_targets = set()
        self._spawn_index = None

    def _active_timer(self) -> PhaseTimer | None:
        if self._timer_entity is None:
            return None
        try:
            return self.world.component_for_entity(self._timer_entity, PhaseTimer)
        except KeyError:
            return None

    def _cancel_timer(self) -> None:
        if self._timer_entity is not None:
            self._delete_entity(self._timer_entity)
        self._timer_entity = None

    def _delete_ghosts(self) -> None:
        for ent in [ent for ent, _ in self.world.get_component(MergeGhost)]:
            self._delete_entity(ent)

    def _delete_entity(self, ent: int) -> None:
        try:
            self.world.delete_entity(ent, immediate=True)
        except KeyError:
            pass
