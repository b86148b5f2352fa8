"""Difficulty policy: blend the optimal search with random legal moves"""

import logging
import random
from typing import Optional

from src.core.config import DifficultyProfile
from src.core.exceptions import GameStateError
from src.search.minimax import GameAdapter, MoveT, NodeT, SearchStats, choose_move

logger = logging.getLogger(__name__)


class DifficultyPolicy:
    """
    An opponent that is fallible on purpose.

    Per move, one uniform sample decides: with probability `skill` the engine searches for the best move,
    otherwise it plays a random legal move (a random capture, if the profile prefers captures and there is one).
    """

    def __init__(self, profile: DifficultyProfile) -> None:
        self.profile = profile

    def select(
        self,
        adapter: GameAdapter[NodeT, MoveT],
        node: NodeT,
        rng: random.Random,
        stats: Optional[SearchStats] = None,
    ) -> MoveT:
        moves = adapter.legal_moves(node)
        if not moves:
            raise GameStateError("Cannot select a move: there are no legal moves.")

        if rng.random() < self.profile.skill:
            return choose_move(adapter, node, self.profile.depth, stats=stats)

        candidates = moves
        if self.profile.prefer_captures:
            captures = [move for move in moves if adapter.is_capture(move)]
            candidates = captures or moves
        move = rng.choice(candidates)
        logger.debug("Playing random move %s", move)
        return move
