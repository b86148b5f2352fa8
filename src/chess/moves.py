"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the move sets for each piece type.
The set of piece types is closed, so MOVEMENT_RULES and ATTACK_RULES both cover every PieceType.

Legality (not leaving your own king in check) is checked later in rules.py
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.pieces import PIECE_TO_LETTER, WHITE, Piece, PieceType
from src.core.position import Position
from src.core.shared_types import Side


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def in_bounds(self, position: Position) -> bool: ...
    def piece(self, position: Position) -> Optional[Piece]: ...


Vector = tuple[int, int]

BOARD_SIZE = 8

# Directions are listed in a fixed order: the order of the generated moves must be reproducible.
KNIGHT_DELTAS: list[Vector] = [
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
]
DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
STRAIGHTS: list[Vector] = [(-1, 0), (1, 0), (0, -1), (0, 1)]
ALL_DIRECTIONS: list[Vector] = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made, including the flags needed to apply it"""

    from_square: Position
    to_square: Position
    captured: Optional[Piece] = None
    is_en_passant: bool = False
    is_castling: bool = False
    promotion: Optional[PieceType] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_uci(self) -> str:
        """Universal Chess Interface style name, ex. 'e2e4' or 'e7e8q'. Only used for display/logging."""
        promotion = PIECE_TO_LETTER[self.promotion] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{promotion}"

    def __str__(self) -> str:
        return self.to_uci()


# --- PAWN GEOMETRY ---
def pawn_direction(side: Side) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if side == WHITE else 1


def pawn_start_row(side: Side) -> int:
    return BOARD_SIZE - 2 if side == WHITE else 1


def promotion_row(side: Side) -> int:
    return 0 if side == WHITE else BOARD_SIZE - 1


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Position, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board. An opponent's piece can be captured (and stops the ray), your own piece just stops the ray.
    """
    player = board.piece(square)
    assert player is not None

    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while board.in_bounds(target_square):
            target = board.piece(target_square)
            if target is None:
                moves.append(Move(square, target_square))
            else:
                if target.side != player.side:
                    moves.append(Move(square, target_square, captured=target))
                break
            target_square = target_square.offset(d_row, d_col)
    return moves


def single_step_move(
    square: Position, board: Board, deltas: list[Vector]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just move a single step along a direction"""
    player = board.piece(square)
    assert player is not None

    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not board.in_bounds(target_square):
            continue

        target = board.piece(target_square)
        if target is None or target.side != player.side:
            moves.append(Move(square, target_square, captured=target))
    return moves


def candidate_pawn_moves(
    square: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (onto an empty square).
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally
    - takes en passant, if the diagonal square is the en passant target
    - promotes (to a queen unless told otherwise) when reaching the final row
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = pawn_direction(pawn.side)

    moves: list[Move] = []
    one_step = square.offset(direction, 0)
    if board.in_bounds(one_step) and board.piece(one_step) is None:
        moves.append(Move(square, one_step))

        two_steps = square.offset(2 * direction, 0)
        if square.row == pawn_start_row(pawn.side) and board.piece(two_steps) is None:
            moves.append(Move(square, two_steps))

    for d_col in (-1, 1):
        target_square = square.offset(direction, d_col)
        if not board.in_bounds(target_square):
            continue

        target = board.piece(target_square)
        if target is not None and target.side != pawn.side:
            moves.append(Move(square, target_square, captured=target))

        if en_passant_target == target_square:
            # the pawn that gets taken stands next to the moving pawn
            passed_pawn = board.piece(Position(square.row, target_square.col))
            if (
                passed_pawn is None
                or passed_pawn.type != PieceType.PAWN
                or passed_pawn.side == pawn.side
            ):
                continue
            moves.append(
                Move(square, target_square, captured=passed_pawn, is_en_passant=True)
            )

    last_row = promotion_row(pawn.side)
    return [
        Move(
            move.from_square,
            move.to_square,
            captured=move.captured,
            promotion=PieceType.QUEEN,
        )
        if move.to_square.row == last_row
        else move
        for move in moves
    ]


def candidate_knight_moves(
    square: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(
    square: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(
    square: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(
    square: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """The Queen combines the rook moves and the bishop moves"""
    return raycasting_move(square, board, ALL_DIRECTIONS)


def candidate_king_moves(
    square: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move. Whether the king passes through or lands on
    an attacked square is checked by the legality filter.
    """
    return single_step_move(square, board, ALL_DIRECTIONS) + candidate_castling_moves(
        square, board
    )


def candidate_castling_moves(square: Position, board: Board) -> list[Move]:
    """
    Neither the king nor the rook in the corner of the same row have moved, and all squares between them are empty.
    The king moves two squares towards the rook.
    """
    king = board.piece(square)
    assert king is not None
    if king.has_moved:
        return []

    moves: list[Move] = []
    for rook_col in (BOARD_SIZE - 1, 0):
        rook = board.piece(Position(square.row, rook_col))
        if (
            rook is None
            or rook.type != PieceType.ROOK
            or rook.side != king.side
            or rook.has_moved
        ):
            continue

        between = squares_between_on_row(square, Position(square.row, rook_col))
        if any(board.piece(between_square) is not None for between_square in between):
            continue

        step = 1 if rook_col > square.col else -1
        king_to = square.offset(0, 2 * step)
        if not board.in_bounds(king_to):
            continue
        moves.append(Move(square, king_to, is_castling=True))
    return moves


def squares_between_on_row(from_square: Position, to_square: Position) -> list[Position]:
    """
    Find the squares strictly in between the two squares specified that are on the same row

    Needed for checking if you can still castle.
    """
    if from_square.row != to_square.row:
        raise ValueError(
            f"squares_between_on_row requires both squares to lie on the same row. \n from: {from_square}\n to:{to_square}"
        )
    low, high = sorted((from_square.col, to_square.col))
    return [Position(from_square.row, col) for col in range(low + 1, high)]


def castling_rook_squares(move: Move) -> tuple[Position, Position]:
    """Where the rook starts from / ends up when the king castles: it jumps over the king onto the square the king passed."""
    row = move.from_square.row
    if move.to_square.col > move.from_square.col:
        return Position(row, BOARD_SIZE - 1), Position(row, move.to_square.col - 1)
    return Position(row, 0), Position(row, move.to_square.col + 1)


def castling_passing_square(move: Move) -> Position:
    """The square the king crosses while castling"""
    step = 1 if move.to_square.col > move.from_square.col else -1
    return move.from_square.offset(0, step)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board, Optional[Position]], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def pseudo_legal_moves(
    board: Board, square: Position, en_passant_target: Optional[Position] = None
) -> list[Move]:
    """Geometrically possible moves for the piece on the given square (empty list for an empty square)"""
    piece = board.piece(square)
    if piece is None:
        return []
    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(square, board, en_passant_target)


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Position,
    by_side: Side,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified side that
    is allowed to move along the given direction?"_

    Returns TRUE if the first piece encountered along one of the directions is such a piece.
    """
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while board.in_bounds(target_square):
            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found.side == by_side and piece_found.type in by_piece_types:
                    return True
                break
            target_square = target_square.offset(d_row, d_col)
    return False


def single_step_attack(
    square: Position,
    by_side: Side,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """Equivalent of raycasting for pieces that attack a single step away."""
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not board.in_bounds(target_square):
            continue

        piece_found = board.piece(target_square)
        if (
            piece_found is not None
            and piece_found.side == by_side
            and piece_found.type == by_piece_type
        ):
            return True
    return False


def is_attacked_by_pawn(square: Position, by_side: Side, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. A white pawn attacking a square stands one row BELOW it (it moves up the board),
    so the vectors are exactly opposite to the direction the attacking pawn moves in.
    """
    row_offset = -pawn_direction(by_side)
    inverse_pawn_take_deltas: list[Vector] = [(row_offset, -1), (row_offset, 1)]
    return single_step_attack(
        square, by_side, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Position, by_side: Side, board: Board) -> bool:
    return single_step_attack(square, by_side, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(square: Position, by_side: Side, board: Board) -> bool:
    return raycasting_attack(square, by_side, (PieceType.BISHOP,), board, DIAGONALS)


def is_attacked_by_rook(square: Position, by_side: Side, board: Board) -> bool:
    return raycasting_attack(square, by_side, (PieceType.ROOK,), board, STRAIGHTS)


def is_attacked_by_queen(square: Position, by_side: Side, board: Board) -> bool:
    return raycasting_attack(square, by_side, (PieceType.QUEEN,), board, ALL_DIRECTIONS)


def is_attacked_by_king(square: Position, by_side: Side, board: Board) -> bool:
    return single_step_attack(square, by_side, PieceType.KING, board, ALL_DIRECTIONS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Side, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}
