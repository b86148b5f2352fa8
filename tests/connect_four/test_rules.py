"""Unit tests for /src/connect_four/rules.py"""

import pytest

from src.connect_four.board import Board
from src.connect_four.rules import count_direction, find_winner, is_draw, winning_run
from src.core.position import Position
from src.core.shared_types import Side

# full board without four in a row anywhere
DRAWN_DIAGRAM = [
    "XOXOXOX",
    "XOXOXOX",
    "OXOXOXO",
    "OXOXOXO",
    "XOXOXOX",
    "XOXOXOX",
]


@pytest.mark.parametrize(
    "diagram, last_played, expected",
    [
        (
            [".......", ".......", ".......", ".......", "OOO....", "XXXX..."],
            Position(5, 3),
            Side.FIRST,
        ),
        (
            [".......", ".......", "...O...", "...O...", "...OX..", "...OXX."],
            Position(2, 3),
            Side.SECOND,
        ),
        (
            [".......", ".......", "...X...", "..XO...", ".XOO...", "XOOX..."],
            Position(2, 3),
            Side.FIRST,
        ),
        (
            [".......", ".......", "...X...", "...OX..", "...OOX.", "..XOOOX"],
            Position(2, 3),
            Side.FIRST,
        ),
    ],
    ids=["horizontal", "vertical", "diagonal", "anti-diagonal"],
)
def test_winning_run(diagram: list[str], last_played: Position, expected: Side) -> None:
    board = Board.from_diagram(diagram)
    assert winning_run(board, last_played) == expected
    assert find_winner(board) == expected
    assert not is_draw(board, last_played)


def test_three_is_not_enough() -> None:
    board = Board.from_diagram(
        [".......", ".......", ".......", ".......", "OOO....", "XXX...."]
    )
    assert winning_run(board, Position(5, 2)) is None
    assert find_winner(board) is None


def test_run_through_the_middle_of_the_line() -> None:
    """The last disc does not need to sit at the end of the run"""
    board = Board.from_diagram(
        [".......", ".......", ".......", ".......", "O..O...", "XX.XX.."]
    )
    board, landed = board.drop(2, Side.FIRST)
    assert winning_run(board, landed) == Side.FIRST


def test_empty_cell_has_no_run() -> None:
    assert winning_run(Board.empty(), Position(5, 0)) is None


def test_count_direction() -> None:
    board = Board.from_diagram(
        [".......", ".......", ".......", ".......", ".......", "XXX.XX."]
    )
    assert count_direction(board, Position(5, 3), 0, 1, Side.FIRST) == 2
    assert count_direction(board, Position(5, 3), 0, -1, Side.FIRST) == 3
    assert count_direction(board, Position(5, 3), 0, -1, Side.SECOND) == 0


def test_drawn_board() -> None:
    board = Board.from_diagram(DRAWN_DIAGRAM)
    assert board.is_full()
    assert find_winner(board) is None
    assert is_draw(board, Position(0, 0))
    assert is_draw(board, None)


def test_not_a_draw_while_columns_are_open() -> None:
    board = Board.from_diagram(["......."] + DRAWN_DIAGRAM[1:])
    assert not is_draw(board, None)
