"""
Depth-limited minimax with alpha-beta pruning.

The search knows nothing about the rules of a particular game: it talks to a `GameAdapter`
that enumerates moves, plays them on a copy of the position, recognises finished games
and scores the position at the search horizon.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, TypeVar

from src.core.exceptions import GameStateError
from src.core.shared_types import Side

logger = logging.getLogger(__name__)

# Wins/losses are scored beyond anything an evaluator returns.
WIN_SCORE = 1_000_000

NodeT = TypeVar("NodeT")
MoveT = TypeVar("MoveT")


@dataclass(frozen=True)
class Result:
    """A finished game: the winner, or None for a draw"""

    winner: Optional[Side]


class GameAdapter(Protocol[NodeT, MoveT]):
    """What the search needs to know about a game. A node is a read-only snapshot of a position."""

    def side_to_move(self, node: NodeT) -> Side: ...
    def legal_moves(self, node: NodeT) -> list[MoveT]: ...
    def play(self, node: NodeT, move: MoveT) -> NodeT: ...
    def terminal(self, node: NodeT) -> Optional[Result]: ...
    def score(self, node: NodeT, side: Side) -> float: ...
    def is_capture(self, move: MoveT) -> bool: ...


@dataclass
class SearchStats:
    """Bookkeeping, to compare pruned and unpruned searches"""

    nodes: int = 0


def terminal_score(result: Result, side: Side, depth: int) -> float:
    """
    Offset by the remaining depth: a win found higher up in the tree (i.e. sooner) scores more,
    a loss that comes later scores less badly.
    """
    if result.winner is None:
        return 0
    if result.winner == side:
        return WIN_SCORE + depth
    return -(WIN_SCORE + depth)


def alphabeta(
    adapter: GameAdapter[NodeT, MoveT],
    node: NodeT,
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
    side: Side,
    stats: Optional[SearchStats] = None,
) -> float:
    """
    Minimax value of `node` for `side`, skipping subtrees once beta <= alpha.

    `maximizing` is True when `side` is the one to move in `node`.
    """
    if stats is not None:
        stats.nodes += 1

    result = adapter.terminal(node)
    if result is not None:
        return terminal_score(result, side, depth)
    if depth == 0:
        return adapter.score(node, side)

    if maximizing:
        best_value = -math.inf
        for move in adapter.legal_moves(node):
            value = alphabeta(
                adapter, adapter.play(node, move), depth - 1, alpha, beta, False, side, stats
            )
            best_value = max(best_value, value)
            alpha = max(alpha, best_value)
            if beta <= alpha:
                break
        return best_value

    best_value = math.inf
    for move in adapter.legal_moves(node):
        value = alphabeta(
            adapter, adapter.play(node, move), depth - 1, alpha, beta, True, side, stats
        )
        best_value = min(best_value, value)
        beta = min(beta, best_value)
        if beta <= alpha:
            break
    return best_value


def minimax(
    adapter: GameAdapter[NodeT, MoveT],
    node: NodeT,
    depth: int,
    maximizing: bool,
    side: Side,
    stats: Optional[SearchStats] = None,
) -> float:
    """Plain minimax, visiting every node. Reference for the pruned search."""
    if stats is not None:
        stats.nodes += 1

    result = adapter.terminal(node)
    if result is not None:
        return terminal_score(result, side, depth)
    if depth == 0:
        return adapter.score(node, side)

    values = [
        minimax(adapter, adapter.play(node, move), depth - 1, not maximizing, side, stats)
        for move in adapter.legal_moves(node)
    ]
    return max(values) if maximizing else min(values)


def choose_move(
    adapter: GameAdapter[NodeT, MoveT],
    node: NodeT,
    depth: int,
    pruning: bool = True,
    stats: Optional[SearchStats] = None,
) -> MoveT:
    """
    Best move for the side to move
    ----

    Every legal move is played, and the resulting position searched `depth - 1` plies deep from the opponent's perspective.
    Only a strictly better score replaces the best move so far: ties go to the move generated first.
    """
    if depth < 1:
        raise ValueError(f"Search depth must be at least 1, got {depth}")

    side = adapter.side_to_move(node)
    moves = adapter.legal_moves(node)
    if not moves:
        raise GameStateError(f"No legal moves for {side}: the game is already over.")

    stats = stats if stats is not None else SearchStats()
    best_move = moves[0]
    best_value = -math.inf
    for move in moves:
        child = adapter.play(node, move)
        if pruning:
            value = alphabeta(
                adapter, child, depth - 1, -math.inf, math.inf, False, side, stats
            )
        else:
            value = minimax(adapter, child, depth - 1, False, side, stats)

        if value > best_value:
            best_value = value
            best_move = move

    logger.debug(
        "Chose %s for %s (score %s, depth %d, %d nodes)",
        best_move,
        side,
        best_value,
        depth,
        stats.nodes,
    )
    return best_move
