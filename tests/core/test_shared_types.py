"""Unit tests for src/core/shared_types.py"""

from src.core.shared_types import TERMINAL_OUTCOMES, Outcome, Side


def test_opponent() -> None:
    assert Side.FIRST.opponent == Side.SECOND
    assert Side.SECOND.opponent == Side.FIRST


def test_terminal_outcomes() -> None:
    assert Outcome.CHECK not in TERMINAL_OUTCOMES
    assert Outcome.ONGOING not in TERMINAL_OUTCOMES
    assert {Outcome.CHECKMATE, Outcome.STALEMATE, Outcome.WIN, Outcome.DRAW} == TERMINAL_OUTCOMES
