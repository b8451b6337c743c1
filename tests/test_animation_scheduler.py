import pytest

from sodamerge.components.direction import Direction
from sodamerge.components.merge_ghost import MergeGhost
from sodamerge.components.move_metadata import TileMove
from sodamerge.components.phase_timer import AnimationPhase, PhaseTimer
from sodamerge.components.tile_visual import TilePhase
from sodamerge.constants import DEFAULT_TILE_STRIDE
from sodamerge.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_INTERRUPTED,
    EVENT_ANIMATION_PHASE,
)
from sodamerge.systems.render import RenderSystem
from sodamerge.ui.layout import compute_board_geometry
from tests.helpers import DummyWindow, drive, make_game, rows_to_cells

# Row 0 holds a mergeable pair; the first empty cell after the move is index 1.
PAIR = rows_to_cells([[0, 0, None, None], [None] * 4, [None] * 4, [None] * 4])
SINGLE = rows_to_cells([[None, 0, None, None], [None] * 4, [None] * 4, [None] * 4])


def _phases(game):
    seen = []
    game.bus.subscribe(EVENT_ANIMATION_PHASE, lambda sender, **kw: seen.append(kw["phase"]))
    return seen


def _assert_settled(game):
    assert game.animation.phase == AnimationPhase.IDLE
    assert not list(game.world.get_component(PhaseTimer))
    assert not list(game.world.get_component(MergeGhost))
    board = game.board.board
    for visual in game.animation.visuals():
        assert visual.kind == board[visual.index]
        assert visual.phase == TilePhase.IDLE
        assert visual.visible is True


def test_merge_sequence_runs_contact_merge_spawn_cleanup():
    game = make_game(PAIR, unlock_at_contact=False)
    phases = _phases(game)

    assert game.animation.request_move("left") is True
    assert game.animation.phase == AnimationPhase.AWAITING_CONTACT

    drive(game.bus, 2)  # 0.10s
    assert game.animation.phase == AnimationPhase.AWAITING_CONTACT
    drive(game.bus, 2)  # 0.20s
    assert game.animation.phase == AnimationPhase.AWAITING_MERGE
    drive(game.bus, 1)  # 0.25s
    assert game.animation.phase == AnimationPhase.AWAITING_SPAWN
    drive(game.bus, 3)  # 0.40s
    _assert_settled(game)

    assert phases == [
        AnimationPhase.SEQUENCING,
        AnimationPhase.AWAITING_CONTACT,
        AnimationPhase.AWAITING_MERGE,
        AnimationPhase.AWAITING_SPAWN,
        AnimationPhase.CLEANUP,
        AnimationPhase.IDLE,
    ]


def test_spawn_starts_after_contact_and_inside_merge_tail():
    game = make_game(PAIR)
    game.animation.request_move("left")
    timeline = game.animation.timeline

    assert timeline.contact_end == pytest.approx(0.14)
    assert timeline.spawn_start > timeline.contact_end
    assert timeline.merge_start <= timeline.spawn_start < timeline.merge_end
    assert timeline.cleanup_at >= max(timeline.merge_end, timeline.spawn_start + game.animation.timing.spawn)


def test_slide_without_merge_uses_spawn_lag():
    game = make_game(SINGLE, unlock_at_contact=False)
    phases = _phases(game)
    game.animation.request_move("left")
    timeline = game.animation.timeline

    assert timeline.merge_start is None
    assert timeline.spawn_start == pytest.approx(0.16)
    drive(game.bus, 8)
    _assert_settled(game)
    assert AnimationPhase.AWAITING_MERGE not in phases


def test_sequencing_sets_origins_offsets_and_ghosts():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")

    dest = game.animation.visual(0)
    # The destination shows the pre-merge kind sliding in from cell 1.
    assert dest.kind == 0
    assert dest.phase == TilePhase.SLIDING
    assert dest.origin == 1
    assert dest.start_offset == (DEFAULT_TILE_STRIDE, 0.0)

    ghosts = game.animation.ghosts()
    assert len(ghosts) == 1
    assert ghosts[0].src == 0 and ghosts[0].dst == 0 and ghosts[0].kind == 0

    spawned = game.animation.visual(game.board.spawned_index)
    assert spawned.visible is False
    assert spawned.kind is None


def test_contact_swaps_kind_and_drops_ghosts():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")
    drive(game.bus, 4)  # past contact, before spawn

    dest = game.animation.visual(0)
    assert dest.kind == 1
    assert dest.phase == TilePhase.MERGING
    assert game.animation.ghosts() == []
    assert game.animation.visual(game.board.spawned_index).visible is False

    drive(game.bus, 1)
    spawned = game.animation.visual(1)
    assert spawned.visible is True
    assert spawned.kind == 0
    assert spawned.phase == TilePhase.SPAWNING


def test_slide_progress_advances_with_ticks():
    game = make_game(SINGLE, unlock_at_contact=False)
    game.animation.request_move("left")
    visual = game.animation.visual(0)
    start = visual.current_offset()
    drive(game.bus, 1)
    assert 0.0 < visual.progress < 1.0
    assert abs(visual.current_offset()[0]) < abs(start[0])


def test_cleanup_clears_engine_metadata():
    game = make_game(PAIR)
    completed = []
    game.bus.subscribe(EVENT_ANIMATION_COMPLETE, lambda sender, **kw: completed.append(kw))
    game.animation.request_move("left")
    drive(game.bus, 8)

    assert game.board.animation_metadata.is_empty()
    assert game.board.spawned_index is None
    assert completed == [{"kind": "move", "forced": False}]


def test_rejected_move_does_not_lock():
    game = make_game(SINGLE)
    assert game.animation.request_move("up") is False
    assert game.animation.is_animating is False
    assert game.animation.request_move("sideways") is False


def test_lock_holds_until_cleanup_and_queue_is_bounded():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")

    assert game.animation.request_move("right") is True
    assert game.animation.request_move("right") is True
    assert game.animation.pending_directions == (Direction.RIGHT,)
    game.animation.request_move("up")
    game.animation.request_move("down")
    assert game.animation.pending_directions == (Direction.UP, Direction.DOWN)
    # Nothing reaches the engine while locked.
    assert game.board.move_count == 1

    drive(game.bus, 4)
    assert game.board.move_count == 1
    assert game.animation.is_animating


def test_queue_drains_fifo_skipping_noops():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")
    # After the move row 0 is [1, 0, -, -]: up is a no-op, right is not.
    game.animation.request_move("up")
    game.animation.request_move("right")

    drive(game.bus, 8)

    assert game.board.move_count == 2
    assert game.board.last_direction == "right"
    assert game.animation.pending_directions == ()
    assert game.animation.is_animating


def test_queue_empties_when_every_pending_move_is_noop():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")
    game.animation.request_move("up")
    drive(game.bus, 8)

    assert game.board.move_count == 1
    _assert_settled(game)


def test_unlock_at_contact_fast_forwards_pending_input():
    game = make_game(PAIR)
    game.animation.request_move("left")
    drive(game.bus, 4)
    assert game.animation.phase == AnimationPhase.AWAITING_MERGE

    game.animation.request_move("right")

    assert game.board.move_count == 2
    assert game.board.last_direction == "right"
    assert game.animation.phase == AnimationPhase.AWAITING_CONTACT
    assert game.animation.pending_directions == ()


def test_input_before_contact_waits_for_contact():
    game = make_game(PAIR)
    game.animation.request_move("left")
    game.animation.request_move("right")
    assert game.board.move_count == 1

    drive(game.bus, 4)

    assert game.board.move_count == 2
    assert game.animation.phase == AnimationPhase.AWAITING_CONTACT


def test_watchdog_forces_cleanup_on_tick():
    game = make_game(PAIR, unlock_at_contact=False)
    completed = []
    game.bus.subscribe(EVENT_ANIMATION_COMPLETE, lambda sender, **kw: completed.append(kw))
    game.animation.request_move("left")

    game.clock.advance(0.5)
    drive(game.bus, 1, dt=0.0)
    assert game.animation.is_animating

    game.clock.advance(0.3)
    drive(game.bus, 1, dt=0.0)

    _assert_settled(game)
    assert completed == [{"kind": "move", "forced": True}]
    assert game.board.animation_metadata.is_empty()


def test_watchdog_checked_on_input():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")
    game.clock.advance(1.0)

    assert game.animation.request_move("right") is True

    assert game.board.move_count == 2
    assert game.animation.pending_directions == ()


def test_interrupt_cancels_everything():
    game = make_game(PAIR, unlock_at_contact=False)
    interrupted = []
    game.bus.subscribe(EVENT_ANIMATION_INTERRUPTED, lambda sender, **kw: interrupted.append(kw))
    game.animation.request_move("left")
    game.animation.request_move("right")
    drive(game.bus, 1)

    game.animation.interrupt()

    _assert_settled(game)
    assert game.animation.pending_directions == ()
    assert game.board.animation_metadata.is_empty()
    assert interrupted == [{"was_animating": True}]

    board = game.board.board
    drive(game.bus, 10)
    assert game.board.board == board
    assert game.board.move_count == 1
    _assert_settled(game)


def test_clear_queue_drops_pending_directions():
    game = make_game(PAIR, unlock_at_contact=False)
    game.animation.request_move("left")
    game.animation.request_move("right")
    game.animation.clear_queue()
    drive(game.bus, 8)
    assert game.board.move_count == 1


def test_malformed_metadata_is_dropped(monkeypatch):
    game = make_game(PAIR, unlock_at_contact=False)
    original = game.board.move

    def corrupting_move(direction):
        changed = original(direction)
        record = game.board._record()
        record.metadata.moves.append(TileMove(src=99, dst=0))
        return changed

    monkeypatch.setattr(game.board, "move", corrupting_move)
    assert game.animation.request_move("left") is True
    assert game.animation.ghosts() == []
    assert all(visual.phase != TilePhase.SLIDING for visual in game.animation.visuals())
    drive(game.bus, 8)
    _assert_settled(game)


def test_stride_defaults_without_layout():
    window = DummyWindow()
    game = make_game(PAIR, window=window)
    assert game.animation.measure_stride() == DEFAULT_TILE_STRIDE

    window.render_system = RenderSystem(game.world, game.bus, window, game.board)
    assert game.animation.measure_stride() == DEFAULT_TILE_STRIDE


def test_stride_follows_render_layout():
    window = DummyWindow(600, 780)
    game = make_game(PAIR, window=window, unlock_at_contact=False)
    window.render_system = RenderSystem(game.world, game.bus, window, game.board)
    window.render_system.notify_resize(600, 780)
    tile_size, gap, _, _ = compute_board_geometry(600, 780)

    game.animation.request_move("left")

    assert game.animation.visual(0).start_offset == (float(tile_size + gap), 0.0)
