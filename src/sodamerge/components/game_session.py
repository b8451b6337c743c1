from dataclasses import dataclass

@dataclass(slots=True)
class GameSession:
    """Score and end-of-game flags of the running session.

    ``won`` never halts play; only ``game_over`` is terminal. Both are one-way
    until the board is reset.
    """
    score: int = 0
    moves: int = 0
    game_over: bool = False
    won: bool = False
    win_modal_shown: bool = False
