"""Connect four board: discs fall to the lowest empty cell of a column"""

from dataclasses import dataclass
from typing import Optional, Self, Sequence

from src.core.exceptions import IllegalMoveError, OutOfBoundsError
from src.core.position import Position
from src.core.shared_types import Side

DEFAULT_ROWS = 6
DEFAULT_COLS = 7

EMPTY_CELL = "."
SIDE_TO_LETTER: dict[Side, str] = {Side.FIRST: "X", Side.SECOND: "O"}
LETTER_TO_SIDE: dict[str, Side] = {value: key for key, value in SIDE_TO_LETTER.items()}

Cells = tuple[tuple[Optional[Side], ...], ...]


@dataclass(frozen=True)
class Board:
    """Immutable. Row 0 is the top of the board, so a column fills up from the last row."""

    cells: Cells

    @classmethod
    def empty(cls, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> Self:
        return cls(tuple((None,) * cols for _ in range(rows)))

    @classmethod
    def from_diagram(cls, rows: Sequence[str]) -> Self:
        """One string per row, top row first. 'X': first side, 'O': second side, '.': empty"""
        return cls(
            tuple(
                tuple(None if cell == EMPTY_CELL else LETTER_TO_SIDE[cell] for cell in row)
                for row in rows
            )
        )

    def to_diagram(self) -> list[str]:
        return [
            "".join(EMPTY_CELL if owner is None else SIDE_TO_LETTER[owner] for owner in row)
            for row in self.cells
        ]

    def __str__(self) -> str:
        return "\n".join(self.to_diagram())

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0])

    def in_bounds(self, position: Position) -> bool:
        return position.is_within(self.rows, self.cols)

    def owner(self, position: Position) -> Optional[Side]:
        if not self.in_bounds(position):
            raise OutOfBoundsError(f"{position} is not on the board.")
        return self.cells[position.row][position.col]

    def is_column_open(self, col: int) -> bool:
        """A move exists for a column iff its top cell is empty"""
        if not 0 <= col < self.cols:
            raise OutOfBoundsError(f"Column {col} is not on the board.")
        return self.cells[0][col] is None

    def available_columns(self) -> list[int]:
        return [col for col in range(self.cols) if self.is_column_open(col)]

    def landing_row(self, col: int) -> Optional[int]:
        """Lowest empty row of the column (None if the column is full)"""
        if not 0 <= col < self.cols:
            raise OutOfBoundsError(f"Column {col} is not on the board.")
        for row in range(self.rows - 1, -1, -1):
            if self.cells[row][col] is None:
                return row
        return None

    def drop(self, col: int, side: Side) -> tuple[Self, Position]:
        """Drop a disc: returns the new board and the cell the disc landed in"""
        row = self.landing_row(col)
        if row is None:
            raise IllegalMoveError(f"Column {col} is full.")

        new_row = list(self.cells[row])
        new_row[col] = side
        cells = self.cells[:row] + (tuple(new_row),) + self.cells[row + 1 :]
        return type(self)(cells), Position(row, col)

    def is_full(self) -> bool:
        """Columns fill from the bottom, so only the top row needs checking"""
        return all(owner is not None for owner in self.cells[0])
