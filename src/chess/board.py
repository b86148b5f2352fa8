"""The Game board stores the placement of the pieces (in chess: the 'position') and knows how to apply/undo a move"""

from dataclasses import dataclass, field
from typing import Optional, Self, Sequence

from src.chess.moves import BOARD_SIZE, Move, castling_rook_squares, promotion_row
from src.chess.pieces import BLACK, WHITE, Piece, PieceType
from src.core.exceptions import IllegalMoveError, OutOfBoundsError
from src.core.position import Position
from src.core.shared_types import Side

Grid = list[list[Optional[Piece]]]

EMPTY_SQUARE = "."

# Standard starting position, drawn from black's back rank (row 0) down to white's back rank (row 7)
STARTING_DIAGRAM: tuple[str, ...] = (
    "rnbqkbnr",
    "pppppppp",
    "........",
    "........",
    "........",
    "........",
    "PPPPPPPP",
    "RNBQKBNR",
)


@dataclass
class UndoRecord:
    """The squares a move touched and what stood on them before, in the order they were changed."""

    touched: list[tuple[Position, Optional[Piece]]] = field(default_factory=list)


@dataclass
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        return cls([[None] * BOARD_SIZE for _ in range(BOARD_SIZE)])

    @classmethod
    def initial(cls) -> Self:
        return cls.from_diagram(STARTING_DIAGRAM)

    @classmethod
    def from_diagram(cls, rows: Sequence[str]) -> Self:
        """Construct a board from a text diagram.

        One string per row, starting at the top (black's side). Letters denote pieces
        (upper case: white, lower case: black), a '.' denotes an empty square. ex:

        ....k...
        ........
        ........
        ........
        ........
        ........
        ........
        ....K..R

        NOTE: every piece is considered not to have moved yet (matters for castling only).
        """
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError(f"A diagram needs {BOARD_SIZE} rows of {BOARD_SIZE} squares.")

        grid: Grid = [
            [None if character == EMPTY_SQUARE else Piece.from_letter(character) for character in row]
            for row in rows
        ]
        return cls(grid)

    def to_diagram(self) -> list[str]:
        return [
            "".join(EMPTY_SQUARE if piece is None else piece.to_letter() for piece in row)
            for row in self.grid
        ]

    def __str__(self) -> str:
        return "\n".join(self.to_diagram())

    # --- ACCESS ---
    def in_bounds(self, position: Position) -> bool:
        return position.is_within(BOARD_SIZE, BOARD_SIZE)

    def piece(self, position: Position) -> Optional[Piece]:
        if not self.in_bounds(position):
            raise OutOfBoundsError(f"{position} is not on the board.")
        return self.grid[position.row][position.col]

    def place_piece(self, piece: Piece, position: Position) -> None:
        if not self.in_bounds(position):
            raise OutOfBoundsError(f"{position} is not on the board.")
        self.grid[position.row][position.col] = piece

    def remove_piece(self, position: Position) -> Optional[Piece]:
        removed = self.piece(position)
        self.grid[position.row][position.col] = None
        return removed

    def copy(self) -> Self:
        """Pieces are immutable, so copying the rows is enough"""
        return type(self)([list(row) for row in self.grid])

    def locate_side(self, side: Side) -> list[Position]:
        """All squares holding a piece of the given side (row-major order)"""
        return [
            Position(row_idx, col_idx)
            for row_idx, row in enumerate(self.grid)
            for col_idx, piece in enumerate(row)
            if piece is not None and piece.side == side
        ]

    def locate_king(self, side: Side) -> Optional[Position]:
        for row_idx, row in enumerate(self.grid):
            for col_idx, piece in enumerate(row):
                if piece is not None and piece.type == PieceType.KING and piece.side == side:
                    return Position(row_idx, col_idx)
        return None

    # --- MAKING / UNDOING MOVES ---
    def push(self, move: Move) -> UndoRecord:
        """
        Apply the move in place and return what is needed to roll it back.
        ----

        1. en passant: remove the pawn that got passed
        2. castling: the rook jumps over the king
        3. move the piece (marked as moved). A pawn reaching the final row promotes (to a queen unless specified)
        """
        moving_piece = self.piece(move.from_square)
        if moving_piece is None:
            raise IllegalMoveError(f"No piece to move on {move.from_square.to_algebraic()}")

        record = UndoRecord()
        if move.is_en_passant:
            self._set(Position(move.from_square.row, move.to_square.col), None, record)

        if move.is_castling:
            rook_from, rook_to = castling_rook_squares(move)
            rook = self.piece(rook_from)
            assert rook is not None
            self._set(rook_from, None, record)
            self._set(rook_to, rook.moved(), record)

        is_promotion = moving_piece.type == PieceType.PAWN and move.to_square.row == promotion_row(
            moving_piece.side
        )
        landed_piece = (
            moving_piece.promoted(move.promotion or PieceType.QUEEN)
            if is_promotion
            else moving_piece.moved()
        )
        self._set(move.from_square, None, record)
        self._set(move.to_square, landed_piece, record)
        return record

    def pop(self, record: UndoRecord) -> None:
        """Roll back the squares touched by `push`, last change first"""
        for position, previous in reversed(record.touched):
            self.grid[position.row][position.col] = previous

    def apply(self, move: Move) -> Self:
        """Copy-on-write version of `push`: the board itself stays untouched"""
        new_board = self.copy()
        new_board.push(move)
        return new_board

    def _set(self, position: Position, piece: Optional[Piece], record: UndoRecord) -> None:
        record.touched.append((position, self.grid[position.row][position.col]))
        self.grid[position.row][position.col] = piece

    # --- MATERIAL ---
    def count_material(self) -> dict[Side, int]:
        """Tally the points of material each player has on the board (kings excluded)"""
        return {side: self._count_material_player(side) for side in (WHITE, BLACK)}

    def _count_material_player(self, side: Side) -> int:
        return sum(
            piece.value
            for row in self.grid
            for piece in row
            if piece is not None and piece.side == side and piece.type != PieceType.KING
        )
