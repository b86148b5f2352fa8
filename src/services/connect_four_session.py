"""Human-vs-engine connect four"""

import logging
import random
from concurrent.futures import Executor, Future
from typing import Any, Optional, Self

from src.api.models import ConnectFourSnapshot
from src.connect_four import game as connect_four_game
from src.connect_four.board import DEFAULT_COLS, DEFAULT_ROWS
from src.connect_four.game import ConnectFourState
from src.core.config import DifficultyProfile, EngineConfig
from src.core.logging import configure_logging
from src.core.shared_types import Difficulty, Outcome, Side
from src.search.adapters import ConnectFourAdapter
from src.services.session import GameSession

logger = logging.getLogger(__name__)


class ConnectFourSession(GameSession[ConnectFourState, int]):
    game_name = "connect four"

    def __init__(
        self,
        profile: DifficultyProfile,
        human_side: Side = Side.FIRST,
        executor: Optional[Executor] = None,
        rng: Optional[random.Random] = None,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
    ) -> None:
        # board size must be known before the first reset
        self.rows = rows
        self.cols = cols
        super().__init__(profile, human_side, executor, rng)

    @classmethod
    def from_config(
        cls,
        difficulty: Difficulty,
        config: Optional[EngineConfig] = None,
        **kwargs: Any,
    ) -> Self:
        """Session with the board size and engine strength taken from the configuration"""
        config = config or EngineConfig()
        configure_logging(config.log_level)
        return cls(
            config.connect_four_profile(difficulty),
            rows=config.connect_four.rows,
            cols=config.connect_four.cols,
            **kwargs,
        )

    def attempt_move(self, column: int) -> Optional[Future[bool]]:
        """
        Drop a disc in `column`.

        A full column raises IllegalMoveError and a column off the board OutOfBoundsError; the state is left as it was.
        """
        with self._lock:
            self._assert_human_turn()
            new_state = connect_four_game.apply_move(self.state, column)
            logger.debug("Human drops in column %d", column)
            return self._commit(new_state)

    def snapshot(self) -> ConnectFourSnapshot:
        return ConnectFourSnapshot.from_state(self.state, self.status, self.epoch)

    # --- RULES ---
    def _initial_state(self) -> ConnectFourState:
        return connect_four_game.new_game(self.rows, self.cols)

    def _apply(self, state: ConnectFourState, move: int) -> ConnectFourState:
        return connect_four_game.apply_move(state, move)

    def _classify(self, state: ConnectFourState) -> Outcome:
        return connect_four_game.classify(state)

    def _winner(self, state: ConnectFourState) -> Optional[Side]:
        return connect_four_game.winner(state)

    def _side_to_move(self, state: ConnectFourState) -> Side:
        return state.side_to_move

    def _moves_played(self, state: ConnectFourState) -> int:
        return len(state.history)

    def _engine_move(self, state: ConnectFourState, rng: random.Random) -> int:
        return self.policy.select(
            ConnectFourAdapter(), connect_four_game.to_node(state), rng
        )
