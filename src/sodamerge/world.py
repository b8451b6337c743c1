import random

from esper import World
from .events.bus import EventBus
from sodamerge.components.flavor_registry import FlavorRegistry
from sodamerge.components.flavors import Flavors
from sodamerge.components.game_state import GameState, GameMode
from sodamerge.constants import WIN_RANK

DEFAULT_FLAVORS = [
    ('Cola',              (238, 228, 218)),
    ('Dr. Zevia',         (237, 224, 200)),
    ('Ginger Ale',        (242, 177, 121)),
    ('Black Cherry',      (245, 149, 99)),
    ('Lemon Lime Twist',  (246, 124, 95)),
    ('Orange',            (246, 94, 59)),
    ('Grape',             (237, 207, 114)),
    ('Cream Soda',        (237, 204, 97)),
    ('Cherry Cola',       (237, 200, 80)),
    ('Creamy Root Beer',  (237, 197, 63)),
    ('Ginger Root Beer',  (237, 194, 46)),
    ('Cran-Raspberry',    (180, 70, 110)),
    ('Vanilla Cola',      (150, 110, 80)),
    ('Salted Caramel',    (120, 90, 60)),
    ('Orange Creamsicle', (90, 70, 50)),
]


def create_world(
    event_bus: EventBus,
    initial_mode: GameMode = GameMode.PLAYING,
    *,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Global game state resource (modal visibility).
    state_entity = world.create_entity()
    world.add_component(state_entity, GameState(mode=initial_mode))

    # Single registry entity holding the flavor progression.
    world.create_entity(
        FlavorRegistry(),
        Flavors(
            names=[name for name, _ in DEFAULT_FLAVORS],
            colors=[color for _, color in DEFAULT_FLAVORS],
            win_rank=WIN_RANK,
        ),
    )
    return world
