"""Human-vs-engine chess: piece selection and moves coming from the UI, replies computed by the engine."""

import logging
import random
from concurrent.futures import Future
from typing import Any, Optional, Self

from src.api.models import ChessSnapshot
from src.chess import game as chess_game
from src.chess.game import ChessState
from src.chess.moves import Move
from src.chess.pieces import PieceType
from src.core.config import EngineConfig
from src.core.exceptions import IllegalMoveError, OutOfBoundsError
from src.core.logging import configure_logging
from src.core.position import Position
from src.core.shared_types import Difficulty, Outcome, Side
from src.search.adapters import ChessAdapter
from src.services.session import GameSession

logger = logging.getLogger(__name__)


class ChessSession(GameSession[ChessState, Move]):
    game_name = "chess"

    @classmethod
    def from_config(
        cls,
        difficulty: Difficulty,
        config: Optional[EngineConfig] = None,
        **kwargs: Any,
    ) -> Self:
        """Session with the engine strength configured for the given difficulty (and the configured log level)"""
        config = config or EngineConfig()
        configure_logging(config.log_level)
        return cls(config.chess_profile(difficulty), **kwargs)

    # -- UI ACTIONS --
    def select_token(self, position: Position) -> bool:
        """
        Select one of your own pieces (that has at least one legal move).

        Returns whether the selection was made; otherwise nothing changes.
        """
        with self._lock:
            self._assert_human_turn()
            piece = self.state.board.piece(position)
            if piece is None or piece.side != self.human_side:
                return False
            if not chess_game.legal_moves_for(self.state, position):
                return False
            self.state = chess_game.select(self.state, position)
            return True

    def attempt_move(
        self, position: Position, promotion: Optional[PieceType] = None
    ) -> Optional[Future[bool]]:
        """
        Move the selected piece to `position`.
        ----

        A target that is not a legal destination of the selected piece just clears the selection,
        a target off the board raises OutOfBoundsError.
        After an accepted move the engine starts thinking: the returned future (if the session runs on an executor)
        completes once its reply has been delivered.
        """
        with self._lock:
            self._assert_human_turn()
            if not self.state.board.in_bounds(position):
                raise OutOfBoundsError(f"{position} is not on the board.")
            selection = self.state.selection
            if selection is None:
                return None

            try:
                move = chess_game.resolve_move(
                    self.state, selection, position, promotion
                )
            except IllegalMoveError:
                self.state = chess_game.clear_selection(self.state)
                return None

            logger.debug("Human plays %s", move)
            return self._commit(chess_game.apply_move(self.state, move))

    def press(self, position: Position) -> Optional[Future[bool]]:
        """A tap on the board: (re)select your own piece, otherwise try to move the selected piece there"""
        with self._lock:
            if self.select_token(position):
                return None
            return self.attempt_move(position)

    def legal_targets(self) -> list[Position]:
        """Destinations of the selected piece (for highlighting)"""
        selection = self.state.selection
        if selection is None:
            return []
        return [
            move.to_square
            for move in chess_game.legal_moves_for(self.state, selection)
        ]

    def snapshot(self) -> ChessSnapshot:
        return ChessSnapshot.from_state(self.state, self.status, self.epoch)

    # --- RULES ---
    def _initial_state(self) -> ChessState:
        return chess_game.new_game()

    def _apply(self, state: ChessState, move: Move) -> ChessState:
        return chess_game.apply_move(state, move)

    def _classify(self, state: ChessState) -> Outcome:
        return chess_game.classify(state)

    def _winner(self, state: ChessState) -> Optional[Side]:
        return chess_game.winner(state)

    def _side_to_move(self, state: ChessState) -> Side:
        return state.side_to_move

    def _moves_played(self, state: ChessState) -> int:
        return len(state.history)

    def _engine_move(self, state: ChessState, rng: random.Random) -> Move:
        return self.policy.select(ChessAdapter(), chess_game.to_node(state), rng)
