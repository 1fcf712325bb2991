from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type

from loguru import logger

from .config import SearchConfig
from .evaluator import INF, Evaluator
from .exceptions import NoLegalMoves
from .movegen import MoveGenerator
from .position import Move, Position


@dataclass
class SearchResult:
    best_move: Move
    score: int
    evaluated_moves: int
    scored_moves: List[Tuple[Move, int]] = field(default_factory=list)


class TreeAI:
    """Fixed-depth minimax over a shared Position that is mutated in place.

    The root is always the side to move and maximizes; every level below
    alternates via an explicit ``maximizing`` flag. Leaf scores come from the
    evaluator (side-to-move perspective) and are negated on minimizing leaves,
    which are exactly the leaves where the opponent is to move.

    Each recursive step applies one move and undoes it in a ``finally`` block,
    so the Position is restored on every exit path, pruning included.
    """

    name = "tree"

    def __init__(
        self,
        position: Position,
        depth: int = 2,
        evaluator: Optional[Evaluator] = None,
        generator: Optional[MoveGenerator] = None,
    ) -> None:
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.position = position
        self.depth = depth
        self.evaluator = evaluator or Evaluator()
        self.generator = generator or MoveGenerator(position)
        self.evaluated_moves = 0
        self.last_result: Optional[SearchResult] = None

    def play_turn(self) -> Move:
        """Choose a move for the side to move at the configured depth."""
        return self.select_move(self.depth)

    def select_move(self, depth: Optional[int] = None) -> Move:
        return self.search(depth).best_move

    def moves_evaluated(self) -> int:
        """Sum of generated move-list sizes over every expanded node of the last search."""
        return self.evaluated_moves

    def search(self, depth: Optional[int] = None) -> SearchResult:
        depth = self.depth if depth is None else depth
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        position = self.position
        moves = self.generator.legal_moves_for_side(position.side_to_move)
        if not moves:
            raise NoLegalMoves(
                f"{position.side_to_move.name.lower()} has no legal moves in {position.description()!r}"
            )

        self.evaluated_moves = len(moves)
        best_score = -INF - depth
        best_move = moves[0]
        scored_moves: List[Tuple[Move, int]] = []
        for move in moves:
            position.apply(move)
            try:
                score = self._root_child_score(depth - 1)
            finally:
                position.undo(move)
            scored_moves.append((move, score))
            # ties keep the earliest move
            if score > best_score:
                best_score = score
                best_move = move

        # leave the flags describing the root position again
        self.generator.update_terminal_state()
        result = SearchResult(
            best_move=best_move,
            score=best_score,
            evaluated_moves=self.evaluated_moves,
            scored_moves=scored_moves,
        )
        self.last_result = result
        logger.debug(
            f"{self.name} depth={depth} move={best_move.uci()} score={best_score} "
            f"evaluated_moves={self.evaluated_moves}"
        )
        return result

    def _root_child_score(self, depth: int) -> int:
        raise NotImplementedError

    def _expand(self) -> List[Move]:
        moves = self.generator.legal_moves_for_side(self.position.side_to_move)
        self.evaluated_moves += len(moves)
        return moves

    def _score(self, maximizing: bool) -> int:
        score = self.evaluator.evaluate(self.position)
        return score if maximizing else -score

    def _leaf_score(self, maximizing: bool) -> int:
        self.generator.update_terminal_state()
        return self._score(maximizing)


class NaiveTreeAI(TreeAI):
    """Exhaustive minimax without pruning."""

    name = "naive"

    def _root_child_score(self, depth: int) -> int:
        return self._minimax(depth, maximizing=False)

    def _minimax(self, depth: int, maximizing: bool) -> int:
        if depth == 0:
            return self._leaf_score(maximizing)
        position = self.position
        moves = self._expand()
        if not moves and not position.is_check:
            # stalemate; a mated side keeps the depth-biased sentinel below
            return self._score(maximizing)

        if maximizing:
            value = -INF - depth
            for move in moves:
                position.apply(move)
                try:
                    value = max(value, self._minimax(depth - 1, False))
                finally:
                    position.undo(move)
        else:
            value = INF + depth
            for move in moves:
                position.apply(move)
                try:
                    value = min(value, self._minimax(depth - 1, True))
                finally:
                    position.undo(move)
        return value


class AlphaBetaTreeAI(TreeAI):
    """Minimax with alpha-beta pruning; same tree shape and scores as NaiveTreeAI."""

    name = "alphabeta"

    def _root_child_score(self, depth: int) -> int:
        # Each root child gets a window wider than any reachable score, so its
        # value is exact and the root choice matches plain minimax.
        bound = INF + depth + 1
        return self._alphabeta(depth, -bound, bound, maximizing=False)

    def _alphabeta(self, depth: int, alpha: int, beta: int, maximizing: bool) -> int:
        if depth == 0:
            return self._leaf_score(maximizing)
        position = self.position
        moves = self._expand()
        if not moves and not position.is_check:
            return self._score(maximizing)

        if maximizing:
            value = -INF - depth
            for move in moves:
                position.apply(move)
                try:
                    value = max(value, self._alphabeta(depth - 1, alpha, beta, False))
                finally:
                    position.undo(move)
                alpha = max(alpha, value)
                if value >= beta:
                    break
        else:
            value = INF + depth
            for move in moves:
                position.apply(move)
                try:
                    value = min(value, self._alphabeta(depth - 1, alpha, beta, True))
                finally:
                    position.undo(move)
                beta = min(beta, value)
                if value <= alpha:
                    break
        return value


STRATEGIES: Dict[str, Type[TreeAI]] = {
    NaiveTreeAI.name: NaiveTreeAI,
    AlphaBetaTreeAI.name: AlphaBetaTreeAI,
}


def create_ai(
    position: Position, config: SearchConfig, evaluator: Optional[Evaluator] = None
) -> TreeAI:
    """Build the configured search strategy bound to ``position``."""
    return STRATEGIES[config.strategy](position, depth=config.depth, evaluator=evaluator)
