"""
The call contract of the chess engine.

ChessState is created once per game and replaced wholesale by every accepted move: none of the functions below
mutate a state (or its board) that someone else may hold on to.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.pieces import BLACK, PROMOTION_OPTIONS, WHITE, Piece, PieceType
from src.chess.rules import all_legal_moves, en_passant_target_after, is_in_check
from src.core.exceptions import GameStateError, IllegalMoveError, InvalidPromotionError
from src.core.position import Position
from src.core.shared_types import Outcome, Side
from src.search.adapters import ChessAdapter, ChessNode
from src.search.minimax import choose_move


def _no_captures() -> dict[Side, tuple[Piece, ...]]:
    return {WHITE: (), BLACK: ()}


@dataclass(frozen=True)
class ChessState:
    board: Board
    side_to_move: Side
    legal_moves: tuple[Move, ...]
    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    # captured[side]: the pieces OF that side that were taken
    captured: dict[Side, tuple[Piece, ...]] = field(default_factory=_no_captures)
    selection: Optional[Position] = None
    last_move: Optional[Move] = None
    en_passant_target: Optional[Position] = None
    history: tuple[Move, ...] = ()

    @property
    def is_over(self) -> bool:
        return self.is_checkmate or self.is_stalemate


def new_game() -> ChessState:
    """Standard starting position, white (first side) to move"""
    return from_board(Board.initial(), WHITE)


def from_board(
    board: Board, side_to_move: Side, en_passant_target: Optional[Position] = None
) -> ChessState:
    """Start from an arbitrary position (the legal moves and the check flags get computed)"""
    legal_moves = tuple(all_legal_moves(board, side_to_move, en_passant_target))
    in_check = is_in_check(board, side_to_move)
    return ChessState(
        board=board,
        side_to_move=side_to_move,
        legal_moves=legal_moves,
        is_check=in_check,
        is_checkmate=in_check and not legal_moves,
        is_stalemate=not in_check and not legal_moves,
        en_passant_target=en_passant_target,
    )


def legal_moves_for(state: ChessState, position: Position) -> list[Move]:
    """Legal moves of the piece on `position` (empty if there is no piece of the side to move there)"""
    # dereference first: an off-board position is a caller error, not an empty answer
    state.board.piece(position)
    return [move for move in state.legal_moves if move.from_square == position]


def select(state: ChessState, position: Position) -> ChessState:
    """Select a piece of the side to move that has at least one legal move"""
    if state.is_over:
        raise GameStateError("The game is over.")
    if not legal_moves_for(state, position):
        raise IllegalMoveError(
            f"Nothing to move on {position.to_algebraic()} for {state.side_to_move}."
        )
    return replace(state, selection=position)


def clear_selection(state: ChessState) -> ChessState:
    return replace(state, selection=None)


def resolve_move(
    state: ChessState,
    from_square: Position,
    to_square: Position,
    promotion: Optional[PieceType] = None,
) -> Move:
    """
    Find the legal move going from/to the given squares.
    ---

    The caller only knows where a piece goes. The legal move carries the flags (capture, castling, en passant).
    A promotion defaults to a queen.
    """
    return _match_legal_move(state, Move(from_square, to_square, promotion=promotion))


def apply_move(state: ChessState, move: Move) -> ChessState:
    """
    Play a move from the state's legal moves and return the next state.
    -----

    1. update the board (a new one: castling moves the rook as well, en passant removes the passed pawn)
    2. record the captured piece
    3. determine the en passant target for the opponent
    4. compute the opponent's legal moves, check, checkmate and stalemate
    """
    if state.is_over:
        raise GameStateError("The game is over: no more moves can be made.")

    move = _match_legal_move(state, move)
    new_board = state.board.apply(move)
    en_passant_target = en_passant_target_after(state.board, move)
    next_side = state.side_to_move.opponent
    next_state = from_board(new_board, next_side, en_passant_target)

    captured = dict(state.captured)
    if move.captured is not None:
        captured[move.captured.side] = captured[move.captured.side] + (move.captured,)

    return replace(
        next_state,
        captured=captured,
        last_move=move,
        history=state.history + (move,),
    )


def apply_human_move(state: ChessState, move: Move) -> ChessState:
    """
    Entry point for moves coming from the UI.

    Only the squares (and the promotion choice) of the move are taken into account; the
    rest is looked up in the set of legal moves.
    """
    resolved = resolve_move(state, move.from_square, move.to_square, move.promotion)
    return apply_move(state, resolved)


def request_engine_move(state: ChessState, depth: int) -> Move:
    """
    Optimal move for the side to move, searching `depth` plies.

    Pure function of its inputs: the search works on its own copy of the board, so it can run on another thread.
    """
    if state.is_over:
        raise GameStateError("The game is over: no move to search for.")
    return choose_move(ChessAdapter(), to_node(state), depth)


def to_node(state: ChessState) -> ChessNode:
    """Read-only snapshot for the search (with a private copy of the board)"""
    return ChessNode(state.board.copy(), state.side_to_move, state.en_passant_target)


def classify(state: ChessState) -> Outcome:
    if state.is_checkmate:
        return Outcome.CHECKMATE
    if state.is_stalemate:
        return Outcome.STALEMATE
    if state.is_check:
        return Outcome.CHECK
    return Outcome.ONGOING


def winner(state: ChessState) -> Optional[Side]:
    """Given we know it is checkmate, the side to move just got mated and the opponent must be the winner"""
    if not state.is_checkmate:
        return None
    return state.side_to_move.opponent


def _match_legal_move(state: ChessState, move: Move) -> Move:
    """
    The legal move with the same squares as `move`, carrying the promotion choice of `move`.

    A promotion choice on a move that does not promote is rejected.
    """
    if move.promotion is not None and move.promotion not in PROMOTION_OPTIONS:
        raise InvalidPromotionError(f"A pawn cannot promote into a {move.promotion}.")

    for legal in state.legal_moves:
        if legal.from_square != move.from_square or legal.to_square != move.to_square:
            continue
        if move.promotion is None:
            return legal
        if legal.promotion is None:
            raise InvalidPromotionError(f"{legal} is not a promotion.")
        return replace(legal, promotion=move.promotion)

    raise IllegalMoveError(f"Move not allowed: {move}")
