from sodamerge.components.direction import Direction
from sodamerge.components.game_state import GameMode
from sodamerge.constants import (
    KEY_A,
    KEY_C,
    KEY_D,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_N,
    KEY_RIGHT,
    KEY_S,
    KEY_UP,
    KEY_W,
    MOUSE_BUTTON_LEFT,
)
from sodamerge.events.bus import (
    EventBus,
    EVENT_CONTINUE_REQUEST,
    EVENT_MOUSE_PRESS,
    EVENT_NEW_GAME_REQUEST,
)
from sodamerge.utils.game_state import get_game_mode

KEY_DIRECTIONS = {
    KEY_UP: Direction.UP,
    KEY_W: Direction.UP,
    KEY_DOWN: Direction.DOWN,
    KEY_S: Direction.DOWN,
    KEY_LEFT: Direction.LEFT,
    KEY_A: Direction.LEFT,
    KEY_RIGHT: Direction.RIGHT,
    KEY_D: Direction.RIGHT,
}
CONTINUE_KEYS = frozenset({KEY_C, KEY_ENTER, KEY_ESCAPE})


class InputSystem:
    """Maps keys and button clicks to moves, new-game and continue requests.

    Directions go straight to the animation system, which owns the lock and the
    queue. While a modal is up only new game (and continue on the win modal)
    get through.
    """

    def __init__(self, event_bus: EventBus, window, world, animation_system):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.animation_system = animation_system
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def handle_key(self, key: int, modifiers: int = 0) -> bool:
        """Returns True when the key belongs to the game so the window marks it handled."""
        direction = KEY_DIRECTIONS.get(key)
        if direction is not None:
            if not self._modal_active():
                self.animation_system.request_move(direction)
            return True
        if key == KEY_N:
            self.event_bus.emit(EVENT_NEW_GAME_REQUEST, source='keyboard')
            return True
        if key in CONTINUE_KEYS:
            if self._mode() == GameMode.WON:
                self.event_bus.emit(EVENT_CONTINUE_REQUEST, source='keyboard')
            return True
        return False

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None:
            return
        self.handle_click(x, y, button)

    def handle_click(self, x: float, y: float, button: int = MOUSE_BUTTON_LEFT) -> bool:
        # Only the left button presses buttons.
        if button != MOUSE_BUTTON_LEFT:
            return False
        render_system = getattr(self.window, 'render_system', None)
        if render_system is None or not hasattr(render_system, 'get_button_at_point'):
            return False
        name = render_system.get_button_at_point(x, y)
        if name == 'new_game':
            self.event_bus.emit(EVENT_NEW_GAME_REQUEST, source='button')
            return True
        if name == 'continue' and self._mode() == GameMode.WON:
            self.event_bus.emit(EVENT_CONTINUE_REQUEST, source='button')
            return True
        return False

    def _mode(self):
        if self.world is None:
            return GameMode.PLAYING
        return get_game_mode(self.world) or GameMode.PLAYING

    def _modal_active(self) -> bool:
        return self._mode() != GameMode.PLAYING
