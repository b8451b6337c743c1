import logging
import random
from typing import Optional, Tuple

from esper import World

from sodamerge.components.board import Board
from sodamerge.components.direction import Direction
from sodamerge.components.game_session import GameSession
from sodamerge.components.move_metadata import MoveMetadata, MoveRecord
from sodamerge.constants import GRID_COLS, GRID_ROWS, INITIAL_TILES, RARE_SPAWN_CHANCE
from sodamerge.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_GAME_OVER,
    EVENT_GAME_WON,
    EVENT_MOVE_APPLIED,
    EVENT_MOVE_REJECTED,
    EVENT_TILE_SPAWNED,
)
from sodamerge.systems import board_ops

logger = logging.getLogger(__name__)


class BoardSystem:
    """Board engine: owns the grid, applies moves, scores merges and detects win/loss.

    Knows nothing about timing or drawing. Readers get tuple snapshots; the only
    mutators are ``move``, ``spawn_tile``, ``reset`` and the metadata/flag
    helpers used by the animation and game flow systems.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        rng: random.Random | None = None,
        rare_spawn_chance: float = RARE_SPAWN_CHANCE,
    ):
        self.world = world
        self.event_bus = event_bus
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self._rare_spawn_chance = rare_spawn_chance
        self._flavors = board_ops.get_flavors(world)
        # Single board entity carrying grid, session and last-move record.
        self.board_entity = self.world.create_entity(
            Board(rows=rows, cols=cols),
            GameSession(),
            MoveRecord(),
        )
        self._init_board()

    def _init_board(self) -> None:
        board = self._board()
        board.clear()
        for _ in range(INITIAL_TILES):
            self.spawn_tile()

    # ------------------------------------------------------------------
    # Component access
    # ------------------------------------------------------------------

    def _board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def _session(self) -> GameSession:
        return self.world.component_for_entity(self.board_entity, GameSession)

    def _record(self) -> MoveRecord:
        return self.world.component_for_entity(self.board_entity, MoveRecord)

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._board().rows

    @property
    def cols(self) -> int:
        return self._board().cols

    @property
    def board(self) -> Tuple[Optional[int], ...]:
        return self._board().snapshot()

    @property
    def board_before_move(self) -> Tuple[Optional[int], ...]:
        return self._record().before

    @property
    def board_after_move(self) -> Tuple[Optional[int], ...]:
        return self._record().after_move

    @property
    def animation_metadata(self) -> MoveMetadata:
        return self._record().metadata.copy()

    @property
    def spawned_index(self) -> Optional[int]:
        return self._record().spawned_index

    @property
    def last_direction(self) -> Optional[str]:
        return self._record().direction

    @property
    def score(self) -> int:
        return self._session().score

    @property
    def move_count(self) -> int:
        return self._session().moves

    @property
    def game_over(self) -> bool:
        return self._session().game_over

    @property
    def won(self) -> bool:
        return self._session().won

    @property
    def win_modal_shown(self) -> bool:
        return self._session().win_modal_shown

    @property
    def max_tile(self) -> Optional[int]:
        return board_ops.max_rank(self._board().cells)

    def flavor_name(self, kind: Optional[int]) -> Optional[str]:
        return self._flavors.name_for(kind)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def move(self, direction) -> bool:
        """Apply a move; returns True only when the board changed."""
        parsed = Direction.parse(direction)
        if parsed is None:
            logger.debug("Ignoring invalid direction %r", direction)
            self.event_bus.emit(EVENT_MOVE_REJECTED, direction=direction, reason="invalid_direction")
            return False
        session = self._session()
        if session.game_over:
            self.event_bus.emit(EVENT_MOVE_REJECTED, direction=parsed, reason="game_over")
            return False
        board = self._board()
        before = board.snapshot()
        outcome = board_ops.apply_move(before, parsed, board.rows, board.cols)
        if not outcome.changed:
            self.event_bus.emit(EVENT_MOVE_REJECTED, direction=parsed, reason="no_change")
            return False

        board.cells = outcome.cells
        session.score += outcome.score_delta
        session.moves += 1
        record = self._record()
        record.direction = parsed.value
        record.before = before
        record.after_move = board.snapshot()
        record.metadata = outcome.metadata
        record.spawned_index = None
        self.event_bus.emit(
            EVENT_MOVE_APPLIED,
            direction=parsed,
            before=before,
            after=record.after_move,
            score=session.score,
            score_delta=outcome.score_delta,
            merges=len(outcome.metadata.merges),
        )
        record.spawned_index = self.spawn_tile()
        self._check_game_status()
        return True

    def spawn_tile(self) -> Optional[int]:
        """Place a new lowest-tier tile on a random empty cell; None when the board is full."""
        board = self._board()
        choice = board_ops.choose_spawn(board.cells, self._rng, self._rare_spawn_chance)
        if choice is None:
            return None
        index, kind = choice
        board.cells[index] = kind
        self.event_bus.emit(EVENT_TILE_SPAWNED, index=index, kind=kind)
        return index

    def reset(self) -> None:
        session = self._session()
        session.score = 0
        session.moves = 0
        session.game_over = False
        session.won = False
        session.win_modal_shown = False
        record = self._record()
        record.clear()
        record.before = ()
        record.after_move = ()
        self._init_board()
        self.event_bus.emit(EVENT_BOARD_RESET, board=self.board)

    def clear_animation_metadata(self) -> None:
        self._record().clear()

    def mark_win_modal_shown(self) -> None:
        self._session().win_modal_shown = True

    def _check_game_status(self) -> None:
        board = self._board()
        session = self._session()
        if not session.won and board_ops.contains_rank(board.cells, self._flavors.win_rank):
            session.won = True
            self.event_bus.emit(EVENT_GAME_WON, score=session.score, moves=session.moves)
        if not session.game_over and not board_ops.can_move(board.cells, board.rows, board.cols):
            session.game_over = True
            self.event_bus.emit(EVENT_GAME_OVER, score=session.score, moves=session.moves)
