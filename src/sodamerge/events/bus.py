from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere else alive.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"              # payload: x=float, y=float, button=int
EVENT_NEW_GAME_REQUEST = "new_game_request"        # payload: source=str
EVENT_CONTINUE_REQUEST = "continue_request"        # payload: source=str


# ============================================================================
# BOARD ENGINE
# ============================================================================
EVENT_MOVE_APPLIED = "move_applied"                # payload: direction=Direction, before=tuple, after=tuple, score=int, score_delta=int, merges=int
EVENT_MOVE_REJECTED = "move_rejected"              # payload: direction=Any, reason=str
EVENT_TILE_SPAWNED = "tile_spawned"                # payload: index=int, kind=int
EVENT_BOARD_RESET = "board_reset"                  # payload: board=tuple
EVENT_GAME_WON = "game_won"                        # payload: score=int, moves=int
EVENT_GAME_OVER = "game_over"                      # payload: score=int, moves=int


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, direction=Direction
EVENT_ANIMATION_PHASE = "animation_phase"          # payload: phase=AnimationPhase
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, forced=bool
EVENT_ANIMATION_INTERRUPTED = "animation_interrupted"  # payload: was_animating=bool


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_BEST_SCORE_CHANGED = "best_score_changed"    # payload: best_score=int
EVENT_SCORE_SUBMITTED = "score_submitted"          # payload: username=str, score=int, moves=int, max_tile=int
