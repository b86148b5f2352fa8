"""
Legality filter and terminal states.

A pseudo-legal move is legal when it does not leave the mover's own king in check.
We check this by making the move on the board (with the undo log), asking if the king is attacked, and rolling back.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.moves import (
    ATTACK_RULES,
    Move,
    castling_passing_square,
    pseudo_legal_moves,
)
from src.chess.pieces import PieceType
from src.core.position import Position
from src.core.shared_types import Side


def is_square_attacked(board: Board, square: Position, by_side: Side) -> bool:
    """Can any piece of `by_side` capture on the given square? (En passant is not considered here)"""
    return any(
        is_attacked(square, by_side, board) for is_attacked in ATTACK_RULES.values()
    )


def is_in_check(board: Board, side: Side) -> bool:
    """Locate the king and ask if the opponent attacks it. (A board without that king is never in check)"""
    king_square = board.locate_king(side)
    if king_square is None:
        return False
    return is_square_attacked(board, king_square, side.opponent)


def is_legal(board: Board, move: Move) -> bool:
    """
    Return True if the move does not put (or leave) you in check

    plan:
    1. castling: you cannot castle out of check, nor through an attacked square
    2. make the candidate move on the board
    3. determine if the king is in check on the new board
    4. undo the move
    """
    moving_piece = board.piece(move.from_square)
    if moving_piece is None:
        return False
    side = moving_piece.side

    if move.is_castling:
        if is_in_check(board, side):
            return False
        if is_square_attacked(board, castling_passing_square(move), side.opponent):
            return False

    record = board.push(move)
    try:
        return not is_in_check(board, side)
    finally:
        board.pop(record)


def legal_moves(
    board: Board, square: Position, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """Pseudo-legal moves of the piece on `square`, filtered on legality"""
    return [
        move
        for move in pseudo_legal_moves(board, square, en_passant_target)
        if is_legal(board, move)
    ]


def all_legal_moves(
    board: Board, side: Side, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """Every legal move of every piece of `side` (pieces visited row-major)"""
    moves: list[Move] = []
    for square in board.locate_side(side):
        moves.extend(legal_moves(board, square, en_passant_target))
    return moves


def has_legal_move(
    board: Board, side: Side, en_passant_target: Optional[Position] = None
) -> bool:
    """Same answer as `bool(all_legal_moves(...))`, but stops at the first legal move found"""
    return any(
        is_legal(board, move)
        for square in board.locate_side(side)
        for move in pseudo_legal_moves(board, square, en_passant_target)
    )


# --- CHECKS FOR ENDING THE GAME ---
def is_checkmate(
    board: Board, side: Side, en_passant_target: Optional[Position] = None
) -> bool:
    return is_in_check(board, side) and not has_legal_move(
        board, side, en_passant_target
    )


def is_stalemate(
    board: Board, side: Side, en_passant_target: Optional[Position] = None
) -> bool:
    return not is_in_check(board, side) and not has_legal_move(
        board, side, en_passant_target
    )


def en_passant_target_after(board: Board, move: Move) -> Optional[Position]:
    """
    The possible en passant square for the next turn: the square a pawn skipped with its double step.

    NOTE: call this with the board BEFORE the move is applied.
    """
    moving_piece = board.piece(move.from_square)
    rows_moved = abs(move.to_square.row - move.from_square.row)
    if moving_piece is None or moving_piece.type != PieceType.PAWN or rows_moved != 2:
        return None
    return Position(
        (move.from_square.row + move.to_square.row) // 2, move.from_square.col
    )
