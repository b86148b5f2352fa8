"""Static evaluation of a chess board, used at the leaves of the search"""

from src.chess.board import Board
from src.chess.pieces import WHITE, Piece, PieceType
from src.chess.rules import is_in_check
from src.core.position import Position
from src.core.shared_types import Side

CHECK_BONUS = 50

# Piece-square tables, written from white's point of view: row 0 is the rank the white pawns promote on.
PAWN_TABLE: list[list[int]] = [
    [0, 0, 0, 0, 0, 0, 0, 0],
    [50, 50, 50, 50, 50, 50, 50, 50],
    [10, 10, 20, 30, 30, 20, 10, 10],
    [5, 5, 10, 25, 25, 10, 5, 5],
    [0, 0, 0, 20, 20, 0, 0, 0],
    [5, -5, -10, 0, 0, -10, -5, 5],
    [5, 10, 10, -20, -20, 10, 10, 5],
    [0, 0, 0, 0, 0, 0, 0, 0],
]

KNIGHT_TABLE: list[list[int]] = [
    [-50, -40, -30, -30, -30, -30, -40, -50],
    [-40, -20, 0, 0, 0, 0, -20, -40],
    [-30, 0, 10, 15, 15, 10, 0, -30],
    [-30, 5, 15, 20, 20, 15, 5, -30],
    [-30, 0, 15, 20, 20, 15, 0, -30],
    [-30, 5, 10, 15, 15, 10, 5, -30],
    [-40, -20, 0, 5, 5, 0, -20, -40],
    [-50, -40, -30, -30, -30, -30, -40, -50],
]

POSITIONAL_TABLES: dict[PieceType, list[list[int]]] = {
    PieceType.PAWN: PAWN_TABLE,
    PieceType.KNIGHT: KNIGHT_TABLE,
}


def positional_bonus(piece: Piece, square: Position) -> int:
    table = POSITIONAL_TABLES.get(piece.type)
    if table is None:
        return 0
    # black reads the table upside down
    table_row = square.row if piece.side == WHITE else len(table) - 1 - square.row
    return table[table_row][square.col]


def evaluate_board(board: Board, side: Side) -> int:
    """
    Score the board from the point of view of `side` (positive: `side` is better).

    Material + piece-square bonuses of your pieces minus those of the opponent,
    and a small bonus for giving check (penalty for being in check).
    """
    material = board.count_material()
    score = material[side] - material[side.opponent]

    for row_idx, row in enumerate(board.grid):
        for col_idx, piece in enumerate(row):
            if piece is None:
                continue
            bonus = positional_bonus(piece, Position(row_idx, col_idx))
            score += bonus if piece.side == side else -bonus

    if is_in_check(board, side.opponent):
        score += CHECK_BONUS
    if is_in_check(board, side):
        score -= CHECK_BONUS
    return score
