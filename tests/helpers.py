from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Sequence

from sodamerge.components.board import Board
from sodamerge.events.bus import EVENT_TICK, EventBus
from sodamerge.systems.animation import AnimationSystem
from sodamerge.systems.board import BoardSystem
from sodamerge.world import create_world


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FirstEmptyRandom(random.Random):
    """Always spawns the lowest flavor into the first empty cell."""

    def choice(self, seq):
        return seq[0]

    def random(self):
        return 0.99


class DummyWindow:
    def __init__(self, width=600, height=780):
        self.width = width
        self.height = height
        self.render_system: Any | None = None


def rows_to_cells(rows: Sequence[Sequence[int | None]]) -> list[int | None]:
    return [kind for row in rows for kind in row]


def set_cells(board_system: BoardSystem, cells: Sequence[int | None]) -> None:
    board = board_system.world.component_for_entity(board_system.board_entity, Board)
    board.cells = list(cells)


def drive(bus: EventBus, ticks: int, dt: float = 0.05) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


@dataclass
class Game:
    bus: EventBus
    world: Any
    board: BoardSystem
    animation: AnimationSystem
    clock: FakeClock


def make_game(cells=None, *, window=None, unlock_at_contact: bool = True, rng=None) -> Game:
    bus = EventBus()
    world = create_world(bus)
    board = BoardSystem(world, bus, rng=rng or FirstEmptyRandom())
    if cells is not None:
        set_cells(board, cells)
    clock = FakeClock()
    animation = AnimationSystem(
        world, bus, board, window=window, clock=clock, unlock_at_contact=unlock_at_contact
    )
    animation.snap_to_board()
    return Game(bus=bus, world=world, board=board, animation=animation, clock=clock)
