"""
A cell on a rectangular board

(placed in its own module as both games and the search engine need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Used for the algebraic names of chess squares: 'a8' is the top-left corner of an 8x8 board.
CHESS_RANKS = 8


@dataclass(frozen=True)
class Position:
    """Zero-based. Row 0 is the top of the board, column 0 the left edge."""

    row: int
    col: int

    @classmethod
    def from_algebraic(cls, name: str) -> Position:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        col = ord(name[0]) - ord("a")
        row = CHESS_RANKS - int(name[1:])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{CHESS_RANKS - self.row}"

    def is_within(self, rows: int, cols: int) -> bool:
        return (0 <= self.row < rows) and (0 <= self.col < cols)

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)
