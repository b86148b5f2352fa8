"""Win-line detection and draw detection"""

from typing import Optional

from src.connect_four.board import Board
from src.core.position import Position
from src.core.shared_types import Side

RUN_LENGTH = 4

# One direction per axis: horizontal, vertical, and both diagonals. Each axis is walked both ways.
AXES: list[tuple[int, int]] = [(0, 1), (1, 0), (1, 1), (1, -1)]


def count_direction(board: Board, start: Position, d_row: int, d_col: int, side: Side) -> int:
    """Consecutive discs of `side` starting next to `start`, walking along (d_row, d_col)"""
    count = 0
    position = start.offset(d_row, d_col)
    while board.in_bounds(position) and board.owner(position) == side:
        count += 1
        position = position.offset(d_row, d_col)
    return count


def winning_run(board: Board, last_played: Position) -> Optional[Side]:
    """
    Only a run through the disc that was just played can be new,
    so we only scan the four axes through that cell.
    """
    side = board.owner(last_played)
    if side is None:
        return None

    for d_row, d_col in AXES:
        run = (
            1
            + count_direction(board, last_played, d_row, d_col, side)
            + count_direction(board, last_played, -d_row, -d_col, side)
        )
        if run >= RUN_LENGTH:
            return side
    return None


def find_winner(board: Board) -> Optional[Side]:
    """Whole-board scan. Useful for boards that were not built drop by drop."""
    for row in range(board.rows):
        for col in range(board.cols):
            winner = winning_run(board, Position(row, col))
            if winner is not None:
                return winner
    return None


def is_draw(board: Board, last_played: Optional[Position]) -> bool:
    """No winner, and not a single column left to drop into"""
    if last_played is not None and winning_run(board, last_played) is not None:
        return False
    return board.is_full()
