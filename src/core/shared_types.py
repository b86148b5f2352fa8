"""
Type definitions used across layers
"""

from enum import StrEnum


class Side(StrEnum):
    """The two players. In chess FIRST plays the white pieces, in connect four the red discs."""

    FIRST = "first"
    SECOND = "second"

    @property
    def opponent(self) -> "Side":
        return Side.SECOND if self == Side.FIRST else Side.FIRST


class Outcome(StrEnum):
    ONGOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    WIN = "win"
    DRAW = "draw"


# Outcomes after which no more moves are accepted
TERMINAL_OUTCOMES: frozenset[Outcome] = frozenset(
    {Outcome.CHECKMATE, Outcome.STALEMATE, Outcome.WIN, Outcome.DRAW}
)


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionStatus(StrEnum):
    AWAITING_HUMAN_MOVE = "awaiting human move"
    EVALUATING = "evaluating"
    TERMINAL = "terminal"
