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
from sodamerge.events.bus import EVENT_CONTINUE_REQUEST, EVENT_MOUSE_PRESS, EVENT_NEW_GAME_REQUEST
from sodamerge.systems.input import InputSystem
from sodamerge.utils.game_state import set_game_mode
from tests.helpers import DummyWindow, make_game


class RecordingScheduler:
    def __init__(self):
        self.requests = []

    def request_move(self, direction):
        self.requests.append(direction)
        return True


class DummyRenderSystem:
    def __init__(self, hits):
        self._hits = hits

    def get_button_at_point(self, x, y):
        return self._hits.get((x, y))


def _setup(hits=None):
    game = make_game()
    window = DummyWindow()
    window.render_system = DummyRenderSystem(hits or {})
    scheduler = RecordingScheduler()
    system = InputSystem(game.bus, window, game.world, scheduler)
    return game, system, scheduler


def _collect(bus, name):
    events = []
    bus.subscribe(name, lambda sender, **kw: events.append(kw))
    return events


def test_arrow_keys_and_wasd_map_to_directions():
    _, system, scheduler = _setup()
    keys = [KEY_UP, KEY_W, KEY_DOWN, KEY_S, KEY_LEFT, KEY_A, KEY_RIGHT, KEY_D]
    for key in keys:
        assert system.handle_key(key) is True
    assert [d.value for d in scheduler.requests] == [
        "up", "up", "down", "down", "left", "left", "right", "right",
    ]


def test_unrecognised_keys_are_not_handled():
    _, system, scheduler = _setup()
    assert system.handle_key(ord("q")) is False
    assert scheduler.requests == []


def test_direction_keys_swallowed_while_modal_is_up():
    game, system, scheduler = _setup()
    set_game_mode(game.world, game.bus, GameMode.GAME_OVER)
    assert system.handle_key(KEY_LEFT) is True
    assert scheduler.requests == []


def test_new_game_always_available():
    game, system, _ = _setup()
    requests = _collect(game.bus, EVENT_NEW_GAME_REQUEST)
    set_game_mode(game.world, game.bus, GameMode.GAME_OVER)
    assert system.handle_key(KEY_N) is True
    assert requests == [{"source": "keyboard"}]


def test_continue_keys_only_act_on_win_modal():
    game, system, _ = _setup()
    requests = _collect(game.bus, EVENT_CONTINUE_REQUEST)
    assert system.handle_key(KEY_C) is True
    assert requests == []
    set_game_mode(game.world, game.bus, GameMode.WON)
    for key in (KEY_C, KEY_ENTER, KEY_ESCAPE):
        system.handle_key(key)
    assert len(requests) == 3


def test_button_clicks_route_through_mouse_event():
    game, system, _ = _setup({(10, 10): "new_game", (20, 20): "continue"})
    new_games = _collect(game.bus, EVENT_NEW_GAME_REQUEST)
    continues = _collect(game.bus, EVENT_CONTINUE_REQUEST)

    game.bus.emit(EVENT_MOUSE_PRESS, x=10, y=10, button=MOUSE_BUTTON_LEFT)
    assert new_games == [{"source": "button"}]

    # Continue is inert unless the win modal is up.
    game.bus.emit(EVENT_MOUSE_PRESS, x=20, y=20, button=MOUSE_BUTTON_LEFT)
    assert continues == []
    set_game_mode(game.world, game.bus, GameMode.WON)
    game.bus.emit(EVENT_MOUSE_PRESS, x=20, y=20, button=MOUSE_BUTTON_LEFT)
    assert continues == [{"source": "button"}]


def test_other_buttons_and_misses_are_ignored():
    _, system, _ = _setup({(10, 10): "new_game"})
    assert system.handle_click(10, 10, button=4) is False
    assert system.handle_click(300, 300) is False


def test_keys_drive_the_real_scheduler():
    game = make_game([0, 0] + [None] * 14)
    window = DummyWindow()
    system = InputSystem(game.bus, window, game.world, game.animation)
    system.handle_key(KEY_LEFT)
    assert game.board.move_count == 1
    assert game.animation.is_animating
