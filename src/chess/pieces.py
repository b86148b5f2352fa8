"""Defines the types of chess pieces"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Self

from src.core.shared_types import Side

# Chess names for the two sides
WHITE = Side.FIRST
BLACK = Side.SECOND


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


LETTER_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_LETTER: dict[PieceType, str] = {
    value: key for key, value in LETTER_TO_PIECE.items()
}

# Centipawns. Material counts leave the king out (it never gets captured).
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20000,
}

PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)


@dataclass(frozen=True)
class Piece:
    """Immutable: moving a piece places a copy with `has_moved` set on the target square."""

    type: PieceType
    side: Side
    has_moved: bool = False

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    @classmethod
    def from_letter(cls, character: str, has_moved: bool = False) -> Self:
        # upper case: white (first) pieces, lower case: black (second) pieces
        side = WHITE if character.isupper() else BLACK
        piece_type = LETTER_TO_PIECE[character.lower()]
        return cls(piece_type, side, has_moved)

    def to_letter(self) -> str:
        letter = PIECE_TO_LETTER[self.type]
        return letter.upper() if self.side == WHITE else letter

    def moved(self) -> Self:
        return replace(self, has_moved=True)

    def promoted(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type, has_moved=True)
