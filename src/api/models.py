"""Requests and Response models exchanged with the UI collaborator"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.chess.game import ChessState, classify as classify_chess
from src.chess.moves import Move
from src.chess.pieces import PieceType
from src.connect_four.game import ConnectFourState, classify as classify_connect_four
from src.core.exceptions import InvalidRequestError
from src.core.position import Position
from src.core.shared_types import Outcome, SessionStatus, Side


class PositionModel(BaseModel):
    row: int
    col: int

    @field_validator("row", "col")
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Board coordinates cannot be negative: {value}")
        return value

    @classmethod
    def from_position(cls, position: Position) -> "PositionModel":
        return cls(row=position.row, col=position.col)

    def to_position(self) -> Position:
        return Position(self.row, self.col)


# --- REQUEST MODELS ---
class ChessMoveRequest(BaseModel):
    from_square: PositionModel
    to_square: PositionModel
    promote_to: Optional[PieceType] = None

    def to_move(self) -> Move:
        """Only the squares and the promotion choice: the engine looks up the remaining flags"""
        return Move(
            self.from_square.to_position(),
            self.to_square.to_position(),
            promotion=self.promote_to,
        )


class ConnectFourMoveRequest(BaseModel):
    column: int

    @field_validator("column")
    @classmethod
    def validate_column(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Column cannot be negative: {value}")
        return value


# --- RESPONSE MODELS ---
class ChessSnapshot(BaseModel):
    board: list[str]
    side_to_move: Side
    outcome: Outcome
    status: SessionStatus
    epoch: int
    selection: Optional[PositionModel]
    selection_targets: list[PositionModel]
    captured: dict[Side, list[PieceType]]
    last_move: Optional[str]

    @classmethod
    def from_state(
        cls, state: ChessState, status: SessionStatus, epoch: int
    ) -> "ChessSnapshot":
        selection = state.selection
        targets = (
            [
                PositionModel.from_position(move.to_square)
                for move in state.legal_moves
                if move.from_square == selection
            ]
            if selection is not None
            else []
        )
        return cls(
            board=state.board.to_diagram(),
            side_to_move=state.side_to_move,
            outcome=classify_chess(state),
            status=status,
            epoch=epoch,
            selection=(
                PositionModel.from_position(selection) if selection is not None else None
            ),
            selection_targets=targets,
            captured={
                side: [piece.type for piece in pieces]
                for side, pieces in state.captured.items()
            },
            last_move=state.last_move.to_uci() if state.last_move else None,
        )


class ConnectFourSnapshot(BaseModel):
    board: list[str]
    side_to_move: Side
    outcome: Outcome
    status: SessionStatus
    epoch: int
    winner: Optional[Side]
    available_columns: list[int]
    last_move: Optional[PositionModel]

    @classmethod
    def from_state(
        cls, state: ConnectFourState, status: SessionStatus, epoch: int
    ) -> "ConnectFourSnapshot":
        return cls(
            board=state.board.to_diagram(),
            side_to_move=state.side_to_move,
            outcome=classify_connect_four(state),
            status=status,
            epoch=epoch,
            winner=state.winner,
            available_columns=[] if state.is_over else state.board.available_columns(),
            last_move=(
                PositionModel.from_position(state.last_move) if state.last_move else None
            ),
        )


class GameReport(BaseModel):
    """What the score keeping collaborator gets once a game ends. Storing it is up to them."""

    game: str
    outcome: Outcome
    winner: Optional[Side]
    human_side: Side
    moves_played: int
    elapsed_seconds: float

    @property
    def human_won(self) -> bool:
        return self.winner == self.human_side
