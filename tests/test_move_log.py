import json

from sodamerge.systems.move_log_system import MoveLogSystem
from tests.helpers import make_game, rows_to_cells

PAIR = rows_to_cells([[0, 0, None, None], [None] * 4, [None] * 4, [None] * 4])


def test_nothing_recorded_until_started():
    game = make_game(PAIR)
    log = MoveLogSystem(game.bus, clock=lambda: 12.5)
    game.board.move("left")
    assert log.entries() == []


def test_records_accepted_moves_only(tmp_path):
    game = make_game(PAIR)
    log = MoveLogSystem(game.bus, clock=lambda: 12.5)
    log.start()

    game.board.move("up")  # no change
    game.board.move("left")

    entries = log.entries()
    assert len(entries) == 1
    entry = entries[0]
    assert entry["time"] == 12500
    assert entry["direction"] == "left"
    assert entry["before"][:4] == [0, 0, None, None]
    assert entry["after"][:4] == [1, None, None, None]

    path = log.dump(tmp_path / "logs" / "moves.json")
    with path.open("r", encoding="utf-8") as handle:
        assert json.load(handle) == entries


def test_stop_and_clear():
    game = make_game(PAIR)
    log = MoveLogSystem(game.bus)
    log.start()
    game.board.move("left")
    log.stop()
    game.board.move("right")
    assert len(log.entries()) == 1
    log.clear()
    assert log.entries() == []
