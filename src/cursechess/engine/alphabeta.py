"""Fixed-depth minimax with alpha-beta pruning over copied snapshots."""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping

from cursechess.core.board import Board
from cursechess.core.enums import CastlingRights, Color, MovementProfile, PieceType
from cursechess.core.move import Move
from cursechess.core.move_generator import DEFAULT_ALTERED_PROFILES, MoveGenerator
from cursechess.core.snapshot import Snapshot
from cursechess.core.types import Coord
from cursechess.engine.evaluation import PIECE_VALUES, evaluate
from cursechess.engine.search import IEngine, SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

INF_SCORE = 1_000_000
MATE_SCORE = 100_000

# Ordering tiers, highest searched first.
_TIER_CAPTURE = 3
_TIER_PROMOTION = 2
_TIER_CASTLE = 1
_TIER_QUIET = 0


def _order_key(board: Board, move: Move) -> tuple[int, int]:
    if move.is_capture:
        if move.is_en_passant:
            victim_value = PIECE_VALUES[PieceType.PAWN]
        else:
            victim = board.piece_at(move.to_row, move.to_col)
            victim_value = PIECE_VALUES[victim.piece_type] if victim is not None else 0
        attacker = board.piece_at(move.from_row, move.from_col)
        attacker_value = PIECE_VALUES[attacker.piece_type] if attacker is not None else 0
        return _TIER_CAPTURE, victim_value * 10 - attacker_value
    if move.promotion is not None:
        return _TIER_PROMOTION, PIECE_VALUES[move.promotion]
    if move.is_castle:
        return _TIER_CASTLE, 0
    return _TIER_QUIET, 0


def order_moves(board: Board, moves: list[Move]) -> list[Move]:
    """Captures (MVV-LVA), then promotions, then castling, then quiet moves.

    The sort is stable: moves with equal keys keep their generation order.
    """
    return sorted(moves, key=lambda move: _order_key(board, move), reverse=True)


class SearchEngine(IEngine):
    """Minimax searcher: white maximises, black minimises.

    Scores are white-relative. A side with no legal moves scores
    ``-(MATE_SCORE + depth)`` for white / ``+(MATE_SCORE + depth)`` for black
    when in check (so faster mates rank higher), otherwise 0.
    """

    __slots__ = ("_rng", "_altered", "_use_pruning", "_nodes", "_last_score")

    def __init__(
        self,
        rng: random.Random | None = None,
        altered_profiles: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
        use_pruning: bool = True,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._altered = altered_profiles
        self._use_pruning = use_pruning
        self._nodes = 0
        self._last_score = 0

    @property
    def nodes_visited(self) -> int:
        """Nodes visited by the most recent search."""
        return self._nodes

    @property
    def last_score(self) -> int:
        """White-relative score of the most recent search."""
        return self._last_score

    def choose_move(
        self,
        board: Board,
        side: Color,
        castling: CastlingRights,
        en_passant: Coord | None,
        depth: int,
        random_move_probability: float = 0.0,
    ) -> Move | None:
        """Best move for *side*, or None when it has no legal move."""
        snapshot = Snapshot(board, side, castling, en_passant)
        limits = SearchLimits(depth=depth, random_move_probability=random_move_probability)
        return self.search(snapshot, limits).best_move

    def search(self, snapshot: Snapshot, limits: SearchLimits) -> SearchResult:
        if limits.depth < 1:
            raise ValueError("Search depth must be >= 1")

        self._nodes = 0
        side = snapshot.side_to_move
        gen = snapshot.generator(self._altered)
        root_moves = gen.generate_legal_moves(side)
        if not root_moves:
            score = self._terminal_score(gen, side, limits.depth)
            self._last_score = score
            return SearchResult(None, score, 0, 0)

        if (
            limits.random_move_probability > 0.0
            and self._rng.random() < limits.random_move_probability
        ):
            move = self._rng.choice(root_moves)
            score = evaluate(snapshot.play(move).board)
            self._last_score = score
            _LOGGER.debug("Random move %s for %s (score %d)", move, side, score)
            return SearchResult(move, score, 0, 0)

        best_move, best_score = self._search_root(snapshot, root_moves, limits.depth)
        self._last_score = best_score
        _LOGGER.debug(
            "Search depth %d for %s: best %s score %d nodes %d",
            limits.depth,
            side,
            best_move,
            best_score,
            self._nodes,
        )
        return SearchResult(best_move, best_score, limits.depth, self._nodes)

    def _search_root(
        self,
        snapshot: Snapshot,
        root_moves: list[Move],
        depth: int,
    ) -> tuple[Move | None, int]:
        maximizing = snapshot.side_to_move == Color.WHITE
        best_move: Move | None = None
        best_score = -INF_SCORE if maximizing else INF_SCORE
        alpha = -INF_SCORE
        beta = INF_SCORE

        for move in order_moves(snapshot.board, root_moves):
            score = self._alphabeta(snapshot.play(move), depth - 1, alpha, beta)
            if maximizing:
                if score > best_score:
                    best_score = score
                    best_move = move
                if self._use_pruning and score > alpha:
                    alpha = score
            else:
                if score < best_score:
                    best_score = score
                    best_move = move
                if self._use_pruning and score < beta:
                    beta = score

        return best_move, best_score

    def _alphabeta(self, snapshot: Snapshot, depth: int, alpha: int, beta: int) -> int:
        self._nodes += 1
        if depth <= 0:
            return evaluate(snapshot.board)

        side = snapshot.side_to_move
        gen = snapshot.generator(self._altered)
        moves = gen.generate_legal_moves(side)
        if not moves:
            return self._terminal_score(gen, side, depth)

        if side == Color.WHITE:
            best = -INF_SCORE
            for move in order_moves(snapshot.board, moves):
                score = self._alphabeta(snapshot.play(move), depth - 1, alpha, beta)
                if score > best:
                    best = score
                if self._use_pruning:
                    if best > alpha:
                        alpha = best
                    if beta <= alpha:
                        break
            return best

        best = INF_SCORE
        for move in order_moves(snapshot.board, moves):
            score = self._alphabeta(snapshot.play(move), depth - 1, alpha, beta)
            if score < best:
                best = score
            if self._use_pruning:
                if best < beta:
                    beta = best
                if beta <= alpha:
                    break
        return best

    @staticmethod
    def _terminal_score(gen: MoveGenerator, side: Color, depth: int) -> int:
        if not gen.is_in_check(side):
            return 0
        mate = MATE_SCORE + depth
        return -mate if side == Color.WHITE else mate
