"""Unit tests for src/api/models.py"""

import pytest
from pydantic import ValidationError

from src.api.models import (
    ChessMoveRequest,
    ChessSnapshot,
    ConnectFourMoveRequest,
    ConnectFourSnapshot,
    GameReport,
    PositionModel,
)
from src.chess import game as chess_game
from src.chess.board import STARTING_DIAGRAM
from src.chess.moves import Move
from src.chess.pieces import PieceType
from src.connect_four import game as connect_four_game
from src.core.exceptions import InvalidRequestError
from src.core.position import Position
from src.core.shared_types import Outcome, SessionStatus, Side


# -- Validation - PositionModel --
@pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (-3, -3)])
def test_negative_coordinates(row: int, col: int) -> None:
    """The validator raises our own error, which pydantic passes on unchanged"""
    with pytest.raises(InvalidRequestError):
        PositionModel(row=row, col=col)


def test_position_round_trip() -> None:
    position = Position(6, 4)
    assert PositionModel.from_position(position).to_position() == position


# -- Validation - move requests --
def test_chess_move_request() -> None:
    request = ChessMoveRequest.model_validate(
        {
            "from_square": {"row": 1, "col": 0},
            "to_square": {"row": 0, "col": 0},
            "promote_to": "knight",
        }
    )
    assert request.promote_to == PieceType.KNIGHT
    assert request.to_move() == Move(
        Position.from_algebraic("a7"),
        Position.from_algebraic("a8"),
        promotion=PieceType.KNIGHT,
    )


def test_chess_move_request_promotion_is_optional() -> None:
    request = ChessMoveRequest(
        from_square=PositionModel(row=6, col=4), to_square=PositionModel(row=4, col=4)
    )
    assert request.to_move().promotion is None


def test_unknown_promotion_piece() -> None:
    with pytest.raises(ValidationError):
        ChessMoveRequest.model_validate(
            {
                "from_square": {"row": 1, "col": 0},
                "to_square": {"row": 0, "col": 0},
                "promote_to": "dragon",
            }
        )


def test_connect_four_move_request() -> None:
    assert ConnectFourMoveRequest(column=3).column == 3
    with pytest.raises(InvalidRequestError):
        ConnectFourMoveRequest(column=-1)


# -- Response models --
def test_chess_snapshot_of_new_game() -> None:
    snapshot = ChessSnapshot.from_state(
        chess_game.new_game(), SessionStatus.AWAITING_HUMAN_MOVE, 1
    )
    assert snapshot.board == list(STARTING_DIAGRAM)
    assert snapshot.side_to_move == Side.FIRST
    assert snapshot.outcome == Outcome.ONGOING
    assert snapshot.selection is None
    assert snapshot.selection_targets == []
    assert snapshot.captured == {Side.FIRST: [], Side.SECOND: []}
    assert snapshot.last_move is None


def test_chess_snapshot_serializes() -> None:
    state = chess_game.new_game()
    state = chess_game.apply_human_move(
        state, Move(Position.from_algebraic("e2"), Position.from_algebraic("e4"))
    )
    state = chess_game.select(state, Position.from_algebraic("a7"))
    data = ChessSnapshot.from_state(state, SessionStatus.AWAITING_HUMAN_MOVE, 3).model_dump(
        mode="json"
    )
    assert data["side_to_move"] == "second"
    assert data["status"] == "awaiting human move"
    assert data["last_move"] == "e2e4"
    assert data["selection"] == {"row": 1, "col": 0}
    assert len(data["selection_targets"]) == 2


def test_connect_four_snapshot() -> None:
    state = connect_four_game.new_game()
    for col in (0, 0, 1, 1, 2, 2, 3):
        state = connect_four_game.apply_move(state, col)
    snapshot = ConnectFourSnapshot.from_state(state, SessionStatus.TERMINAL, 1)
    assert snapshot.outcome == Outcome.WIN
    assert snapshot.winner == Side.FIRST
    assert snapshot.available_columns == []
    assert snapshot.last_move == PositionModel(row=5, col=3)


@pytest.mark.parametrize(
    "winner, human_side, human_won",
    [
        (Side.FIRST, Side.FIRST, True),
        (Side.SECOND, Side.FIRST, False),
        (None, Side.SECOND, False),
        (Side.SECOND, Side.SECOND, True),
    ],
)
def test_game_report_human_won(winner: Side | None, human_side: Side, human_won: bool) -> None:
    report = GameReport(
        game="chess",
        outcome=Outcome.CHECKMATE if winner else Outcome.STALEMATE,
        winner=winner,
        human_side=human_side,
        moves_played=12,
        elapsed_seconds=30.5,
    )
    assert report.human_won is human_won
