"""Game state resource describing whether a blocking modal is displayed."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """PLAYING accepts moves; WON and GAME_OVER show a modal over the board."""
    PLAYING = auto()
    WON = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the currently active game mode."""
    mode: GameMode = GameMode.PLAYING
