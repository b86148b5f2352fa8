"""
Game adapters: teach the generic search the rules of chess and connect four.

A node is a small frozen snapshot. The search never mutates one, it only asks the adapter for children.
"""

from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board as ChessBoard
from src.chess.evaluation import evaluate_board
from src.chess.moves import Move
from src.chess.rules import (
    all_legal_moves,
    en_passant_target_after,
    has_legal_move,
    is_in_check,
)
from src.connect_four.board import Board as ConnectFourBoard
from src.connect_four.rules import winning_run
from src.core.position import Position
from src.core.shared_types import Side
from src.search.minimax import Result


# --- CHESS ---
@dataclass(frozen=True)
class ChessNode:
    board: ChessBoard
    side_to_move: Side
    en_passant_target: Optional[Position] = None


class ChessAdapter:
    """Leaves are scored with the static evaluator (material + piece-square tables)."""

    def side_to_move(self, node: ChessNode) -> Side:
        return node.side_to_move

    def legal_moves(self, node: ChessNode) -> list[Move]:
        return all_legal_moves(node.board, node.side_to_move, node.en_passant_target)

    def play(self, node: ChessNode, move: Move) -> ChessNode:
        return ChessNode(
            board=node.board.apply(move),
            side_to_move=node.side_to_move.opponent,
            en_passant_target=en_passant_target_after(node.board, move),
        )

    def terminal(self, node: ChessNode) -> Optional[Result]:
        """Checkmate: the side to move lost. Stalemate: draw."""
        if has_legal_move(node.board, node.side_to_move, node.en_passant_target):
            return None
        if is_in_check(node.board, node.side_to_move):
            return Result(winner=node.side_to_move.opponent)
        return Result(winner=None)

    def score(self, node: ChessNode, side: Side) -> float:
        return evaluate_board(node.board, side)

    def is_capture(self, move: Move) -> bool:
        return move.is_capture


# --- CONNECT FOUR ---
@dataclass(frozen=True)
class ConnectFourNode:
    board: ConnectFourBoard
    side_to_move: Side
    last_played: Optional[Position] = None


class ConnectFourAdapter:
    """Moves are columns. There is no heuristic: anything short of a win/loss scores zero."""

    def side_to_move(self, node: ConnectFourNode) -> Side:
        return node.side_to_move

    def legal_moves(self, node: ConnectFourNode) -> list[int]:
        return node.board.available_columns()

    def play(self, node: ConnectFourNode, move: int) -> ConnectFourNode:
        board, landed = node.board.drop(move, node.side_to_move)
        return ConnectFourNode(board, node.side_to_move.opponent, landed)

    def terminal(self, node: ConnectFourNode) -> Optional[Result]:
        if node.last_played is not None:
            winner = winning_run(node.board, node.last_played)
            if winner is not None:
                return Result(winner=winner)
        if node.board.is_full():
            return Result(winner=None)
        return None

    def score(self, node: ConnectFourNode, side: Side) -> float:
        return 0

    def is_capture(self, move: int) -> bool:
        return False
