"""Unit tests for src/services/connect_four_session.py"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from src.api.models import ConnectFourSnapshot
from src.core.config import ConnectFourConfig, DifficultyProfile, EngineConfig
from src.core.exceptions import GameStateError, IllegalMoveError, OutOfBoundsError
from src.core.shared_types import Difficulty, Outcome, SessionStatus, Side
from src.services.connect_four_session import ConnectFourSession
from tests.helpers import ManualExecutor

# 42 drops that fill the board without four in a row anywhere
DRAW_SEQUENCE = (
    [0, 1, 2, 3, 4, 5, 6]
    + [1, 0, 3, 2, 5, 4, 0, 6]
    + [2, 1, 4, 3, 6, 5]
    + [0, 1, 2, 3, 4, 5, 6]
    + [0, 1, 2, 3, 4, 5, 6]
    + [0, 1, 2, 3, 4, 5, 6]
)


@pytest.fixture
def session(optimal_profile: DifficultyProfile) -> ConnectFourSession:
    return ConnectFourSession(optimal_profile, rng=random.Random(0))


def test_new_session(session: ConnectFourSession) -> None:
    assert session.status == SessionStatus.AWAITING_HUMAN_MOVE
    assert session.outcome == Outcome.ONGOING
    assert session.state.board.rows == 6
    assert session.state.board.cols == 7


def test_engine_replies_inline(session: ConnectFourSession) -> None:
    assert session.attempt_move(3) is None
    assert session.status == SessionStatus.AWAITING_HUMAN_MOVE
    assert len(session.state.history) == 2
    assert session.state.side_to_move == Side.FIRST


def test_human_wins(session: ConnectFourSession) -> None:
    with patch.object(ConnectFourSession, "_engine_move", side_effect=[0, 1, 2]) as engine:
        for col in (0, 1, 2, 3):
            session.attempt_move(col)

    assert engine.call_count == 3
    assert session.status == SessionStatus.TERMINAL
    assert session.outcome == Outcome.WIN
    with pytest.raises(GameStateError):
        session.attempt_move(4)

    report = session.report()
    assert report.game == "connect four"
    assert report.winner == Side.FIRST
    assert report.human_won
    assert report.moves_played == 7


def test_draw(session: ConnectFourSession) -> None:
    engine_moves = DRAW_SEQUENCE[1::2]
    with patch.object(ConnectFourSession, "_engine_move", side_effect=engine_moves):
        for col in DRAW_SEQUENCE[0::2]:
            session.attempt_move(col)

    assert session.status == SessionStatus.TERMINAL
    report = session.report()
    assert report.outcome == Outcome.DRAW
    assert report.winner is None
    assert not report.human_won
    assert report.moves_played == 42


def test_full_column_is_rejected(session: ConnectFourSession) -> None:
    with patch.object(ConnectFourSession, "_engine_move", side_effect=[0, 0, 0]):
        for _ in range(3):
            session.attempt_move(0)

    with pytest.raises(IllegalMoveError):
        session.attempt_move(0)
    with pytest.raises(OutOfBoundsError):
        session.attempt_move(7)
    assert session.status == SessionStatus.AWAITING_HUMAN_MOVE
    assert len(session.state.history) == 6


def test_engine_opens_when_human_plays_second(optimal_profile: DifficultyProfile) -> None:
    session = ConnectFourSession(optimal_profile, human_side=Side.SECOND, rng=random.Random(0))
    assert len(session.state.history) == 1
    assert session.state.side_to_move == Side.SECOND
    assert session.status == SessionStatus.AWAITING_HUMAN_MOVE


def test_reset_discards_the_search_in_flight(
    optimal_profile: DifficultyProfile, manual_executor: ManualExecutor
) -> None:
    session = ConnectFourSession(optimal_profile, executor=manual_executor)
    future = session.attempt_move(3)
    assert session.status == SessionStatus.EVALUATING
    with pytest.raises(GameStateError):
        session.attempt_move(4)

    session.reset()
    manual_executor.run_pending()
    assert future is not None and future.result() is False
    assert session.state.history == ()
    assert session.epoch == 2


def test_engine_replies_on_a_worker_thread(
    thread_pool: ThreadPoolExecutor,
) -> None:
    profile = DifficultyProfile(skill=1.0, depth=4)
    session = ConnectFourSession(profile, executor=thread_pool, rng=random.Random(0))
    future = session.attempt_move(3)
    assert future is not None
    session.wait(timeout=60)
    assert future.result() is True
    assert len(session.state.history) == 2


def test_from_config() -> None:
    config = EngineConfig(connect_four=ConnectFourConfig(rows=5, cols=8), log_level="warning")
    with patch("src.services.connect_four_session.configure_logging") as configure:
        session = ConnectFourSession.from_config(Difficulty.MEDIUM, config, rng=random.Random(0))
    configure.assert_called_once_with("WARNING")
    assert session.profile.skill == 0.6
    assert (session.state.board.rows, session.state.board.cols) == (5, 8)


def test_snapshot(session: ConnectFourSession) -> None:
    with patch.object(ConnectFourSession, "_engine_move", side_effect=[6]):
        session.attempt_move(0)
    snapshot = session.snapshot()
    assert isinstance(snapshot, ConnectFourSnapshot)
    assert snapshot.board[-1] == "X.....O"
    assert snapshot.available_columns == list(range(7))
    assert snapshot.winner is None
    assert snapshot.status == SessionStatus.AWAITING_HUMAN_MOVE


def test_failed_search_takes_back_the_human_move(
    optimal_profile: DifficultyProfile,
    manual_executor: ManualExecutor,
    caplog: pytest.LogCaptureFixture,
) -> None:
    session = ConnectFourSession(optimal_profile, executor=manual_executor)
    with patch.object(
        ConnectFourSession, "_engine_move", side_effect=RuntimeError("search crashed")
    ):
        future = session.attempt_move(3)
        with caplog.at_level(logging.ERROR):
            manual_executor.run_pending()

    assert future is not None
    assert isinstance(future.exception(), RuntimeError)
    assert any(record.levelno == logging.ERROR for record in caplog.records)
    assert session.status == SessionStatus.AWAITING_HUMAN_MOVE
    assert session.pending is None
    assert session.state.history == ()

    # the human can play on and the engine answers
    retry = session.attempt_move(2)
    manual_executor.run_pending()
    assert retry is not None and retry.result() is True
    assert len(session.state.history) == 2


def test_failed_inline_search_fails_the_call(session: ConnectFourSession) -> None:
    with patch.object(
        ConnectFourSession, "_engine_move", side_effect=RuntimeError("search crashed")
    ):
        with pytest.raises(RuntimeError):
            session.attempt_move(3)

    assert session.status == SessionStatus.AWAITING_HUMAN_MOVE
    assert session.state.history == ()
