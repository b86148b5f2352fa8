"""
Orchestration of a human-vs-engine game: turn alternation, engine dispatch and stale result handling.

The session exclusively owns the current game state. The engine search runs on an Executor (inline when none is
given) against an immutable snapshot of the state, tagged with the epoch the session was in when the search started.
Every reset increments the epoch, so a search that finishes after a reset is discarded instead of applied.
"""

import logging
import random
import threading
import time
from concurrent.futures import Executor, Future
from typing import Generic, Optional, TypeVar

from src.api.models import GameReport
from src.core.config import DifficultyProfile
from src.core.exceptions import GameStateError
from src.core.shared_types import TERMINAL_OUTCOMES, Outcome, SessionStatus, Side
from src.search.policy import DifficultyPolicy

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT")
MoveT = TypeVar("MoveT")


class GameSession(Generic[StateT, MoveT]):
    """
    Shared state machine of the game sessions
    ----

    awaiting human move --(human move)--> evaluating --(engine move)--> awaiting human move
    Any move that ends the game leads to `terminal`. `reset()` is allowed from every state.

    Subclasses provide the rules: the initial state, how to apply a move, how to classify a state and how to let
    the engine pick a move.
    """

    game_name: str = ""

    def __init__(
        self,
        profile: DifficultyProfile,
        human_side: Side = Side.FIRST,
        executor: Optional[Executor] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.profile = profile
        self.human_side = human_side
        self.engine_side = human_side.opponent
        self.policy = DifficultyPolicy(profile)
        self.epoch = 0
        self.pending: Optional[Future[bool]] = None
        self._executor = executor
        # The caller seeds the random source once per session: no global randomness in the engine.
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.RLock()
        self._status = SessionStatus.AWAITING_HUMAN_MOVE
        self._started_at = time.monotonic()
        self.state: StateT
        # state before the human move that handed the turn to the engine
        self._before_engine_turn: Optional[StateT] = None
        self.reset()

    # --- RULES, PROVIDED BY THE SUBCLASSES ---
    def _initial_state(self) -> StateT:
        raise NotImplementedError

    def _apply(self, state: StateT, move: MoveT) -> StateT:
        raise NotImplementedError

    def _classify(self, state: StateT) -> Outcome:
        raise NotImplementedError

    def _winner(self, state: StateT) -> Optional[Side]:
        raise NotImplementedError

    def _side_to_move(self, state: StateT) -> Side:
        raise NotImplementedError

    def _moves_played(self, state: StateT) -> int:
        raise NotImplementedError

    def _engine_move(self, state: StateT, rng: random.Random) -> MoveT:
        raise NotImplementedError

    # --- STATE MACHINE ---
    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def outcome(self) -> Outcome:
        return self._classify(self.state)

    def reset(self) -> Optional[Future[bool]]:
        """Throw the current game away (including any search in flight) and start over"""
        with self._lock:
            self.epoch += 1
            if self.pending is not None:
                # a search that already started cannot be cancelled: its result gets discarded on delivery
                self.pending.cancel()
                self.pending = None
            self.state = self._initial_state()
            self._started_at = time.monotonic()
            logger.info("New %s game (epoch %d)", self.game_name, self.epoch)
            return self._commit(self.state)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the engine reply in flight (if any) has been delivered"""
        pending = self.pending
        if pending is not None:
            pending.result(timeout=timeout)

    def report(self) -> GameReport:
        """Outcome and derived metrics of a finished game, for the score keeping collaborator"""
        if self._status != SessionStatus.TERMINAL:
            raise GameStateError("The game has not ended yet.")
        return GameReport(
            game=self.game_name,
            outcome=self.outcome,
            winner=self._winner(self.state),
            human_side=self.human_side,
            moves_played=self._moves_played(self.state),
            elapsed_seconds=time.monotonic() - self._started_at,
        )

    def _assert_human_turn(self) -> None:
        """Moves are only accepted while the session waits for the human"""
        if self._status == SessionStatus.TERMINAL:
            raise GameStateError(
                f"The game is over ({self.outcome}). Reset to play again."
            )
        if self._status == SessionStatus.EVALUATING:
            raise GameStateError("The engine is still thinking about its move.")

    def _commit(self, new_state: StateT) -> Optional[Future[bool]]:
        """Replace the state and move the state machine along. Starts the engine search if it is the engine's turn."""
        previous, self.state = self.state, new_state
        outcome = self._classify(new_state)
        if outcome in TERMINAL_OUTCOMES:
            self._status = SessionStatus.TERMINAL
            logger.info(
                "%s game over: %s (winner: %s)",
                self.game_name,
                outcome,
                self._winner(new_state),
            )
            return None

        if self._side_to_move(new_state) == self.engine_side:
            self._status = SessionStatus.EVALUATING
            self._before_engine_turn = previous if previous is not new_state else None
            return self._start_engine_search()

        self._status = SessionStatus.AWAITING_HUMAN_MOVE
        return None

    # --- ENGINE DISPATCH ---
    def _start_engine_search(self) -> Optional[Future[bool]]:
        epoch = self.epoch
        snapshot = self.state
        # one random source per search, drawn from the session's source (searches never share it)
        search_rng = random.Random(self._rng.getrandbits(64))

        if self._executor is None:
            self._search_and_deliver(epoch, snapshot, search_rng)
            return None

        future = self._executor.submit(
            self._search_and_deliver, epoch, snapshot, search_rng
        )
        self.pending = future
        return future

    def _search_and_deliver(
        self, epoch: int, snapshot: StateT, rng: random.Random
    ) -> bool:
        """Runs on the worker. Returns whether the move got applied."""
        try:
            move = self._engine_move(snapshot, rng)
        except Exception:
            logger.exception("%s engine search failed (epoch %d)", self.game_name, epoch)
            self._recover(epoch)
            raise
        return self._deliver(epoch, move)

    def _deliver(self, epoch: int, move: MoveT) -> bool:
        with self._lock:
            if epoch != self.epoch:
                logger.info(
                    "Discarding engine move %s from epoch %d (current epoch %d)",
                    move,
                    epoch,
                    self.epoch,
                )
                return False

            self.pending = None
            self._commit(self._apply(self.state, move))
            return True

    def _recover(self, epoch: int) -> None:
        """After a failed search: take back the human move so the human can play again"""
        with self._lock:
            if epoch != self.epoch:
                return
            self.pending = None
            if self._before_engine_turn is None:
                # the engine was opening the game: only reset() gets the session going again
                return
            self.state = self._before_engine_turn
            self._before_engine_turn = None
            self._status = SessionStatus.AWAITING_HUMAN_MOVE
            logger.warning("%s: human move taken back after the failed search", self.game_name)
