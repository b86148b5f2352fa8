"""
The call contract of the connect four engine. Same shape as the chess one: states are immutable and every
accepted move returns a new one.
"""

from dataclasses import dataclass
from typing import Optional

from src.connect_four.board import DEFAULT_COLS, DEFAULT_ROWS, Board
from src.connect_four.rules import winning_run
from src.core.exceptions import GameStateError
from src.core.position import Position
from src.core.shared_types import Outcome, Side
from src.search.adapters import ConnectFourAdapter, ConnectFourNode
from src.search.minimax import choose_move


@dataclass(frozen=True)
class ConnectFourState:
    board: Board
    side_to_move: Side
    winner: Optional[Side] = None
    is_draw: bool = False
    last_move: Optional[Position] = None
    history: tuple[int, ...] = ()

    @property
    def is_over(self) -> bool:
        return self.winner is not None or self.is_draw


def new_game(
    rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS, first_to_move: Side = Side.FIRST
) -> ConnectFourState:
    return ConnectFourState(board=Board.empty(rows, cols), side_to_move=first_to_move)


def legal_moves_for(state: ConnectFourState) -> list[int]:
    """Columns that still have room (none once the game is over)"""
    if state.is_over:
        return []
    return state.board.available_columns()


def apply_move(state: ConnectFourState, col: int) -> ConnectFourState:
    """
    Drop a disc of the side to move.
    ---

    The four-in-a-row check only looks at lines through the new disc; a full board without a winner is a draw.
    Raises OutOfBoundsError for a column that does not exist, IllegalMoveError for a full column.
    """
    if state.is_over:
        raise GameStateError("The game is over: no more discs can be dropped.")

    board, landed = state.board.drop(col, state.side_to_move)
    winner = winning_run(board, landed)
    return ConnectFourState(
        board=board,
        side_to_move=state.side_to_move.opponent,
        winner=winner,
        is_draw=winner is None and board.is_full(),
        last_move=landed,
        history=state.history + (col,),
    )


# Moves from the UI and from the engine take the same path
apply_human_move = apply_move


def request_engine_move(state: ConnectFourState, depth: int) -> int:
    """Optimal column for the side to move. Pure function of its inputs."""
    if state.is_over:
        raise GameStateError("The game is over: no move to search for.")
    return choose_move(ConnectFourAdapter(), to_node(state), depth)


def to_node(state: ConnectFourState) -> ConnectFourNode:
    return ConnectFourNode(state.board, state.side_to_move, state.last_move)


def classify(state: ConnectFourState) -> Outcome:
    if state.winner is not None:
        return Outcome.WIN
    if state.is_draw:
        return Outcome.DRAW
    return Outcome.ONGOING


def winner(state: ConnectFourState) -> Optional[Side]:
    return state.winner
