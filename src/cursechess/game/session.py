"""ComputerGame — one human-versus-computer game.

Coordinates: RuleEngine, the search engine and the curse collaborator.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from cursechess.core.enums import Color, GameStatus, MovementProfile, PieceType
from cursechess.core.move import Move
from cursechess.core.move_generator import DEFAULT_ALTERED_PROFILES
from cursechess.core.piece import Piece
from cursechess.core.rule_engine import RuleEngine
from cursechess.core.state import GameState, MoveResult
from cursechess.core.types import Coord
from cursechess.engine.alphabeta import SearchEngine
from cursechess.engine.search import Difficulty, IEngine, SearchLimits
from cursechess.game import curse

_LOGGER = logging.getLogger(__name__)


class GameEndReason(Enum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    RESIGNATION = "resignation"


# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Color, MoveResult, GameState], None]  # mover, result, state
GameOverCallback = Callable[[GameEndReason, Color | None], None]  # reason, winner
CurseReadyCallback = Callable[[Piece, Coord], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_curse_ready: list[CurseReadyCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class ComputerGame:
    """Runs a game between a human player and the search engine.

    Every board change goes through :class:`RuleEngine`; the session only
    decides whose turn it is to act and forwards captures to the curse
    collaborator. Methods are meant to be called from a single thread.
    """

    __slots__ = (
        "_rules",
        "_engine",
        "_player_color",
        "_difficulty",
        "_limits",
        "_curses_enabled",
        "_end_reason",
        "_winner",
        "events",
    )

    def __init__(
        self,
        engine: IEngine | None = None,
        *,
        curses_enabled: bool = True,
        altered_profiles: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
    ) -> None:
        self._rules = RuleEngine(altered_profiles)
        self._engine: IEngine = (
            engine if engine is not None else SearchEngine(altered_profiles=altered_profiles)
        )
        self._player_color = Color.WHITE
        self._difficulty = Difficulty.MEDIUM
        self._limits = SearchLimits.for_difficulty(self._difficulty)
        self._curses_enabled = curses_enabled
        self._end_reason: GameEndReason | None = None
        self._winner: Color | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def rules(self) -> RuleEngine:
        return self._rules

    @property
    def player_color(self) -> Color:
        return self._player_color

    @property
    def computer_color(self) -> Color:
        return self._player_color.opposite

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @property
    def is_over(self) -> bool:
        return self._end_reason is not None

    @property
    def end_reason(self) -> GameEndReason | None:
        return self._end_reason

    @property
    def winner(self) -> Color | None:
        return self._winner

    @property
    def is_player_turn(self) -> bool:
        return not self.is_over and self._rules.turn_side == self._player_color

    # ── Game flow ────────────────────────────────────────────────────────

    def new_game(
        self,
        player_color: Color = Color.WHITE,
        difficulty: Difficulty = Difficulty.MEDIUM,
        fen: str | None = None,
        *,
        reply: bool = True,
    ) -> None:
        """Start a new game; the computer moves first when it has white."""
        if fen is None:
            self._rules.reset()
        else:
            self._rules = RuleEngine.from_fen(fen, self._rules.altered_profiles)
        self._player_color = player_color
        self._difficulty = Difficulty(difficulty)
        self._limits = SearchLimits.for_difficulty(self._difficulty)
        self._end_reason = None
        self._winner = None
        _LOGGER.debug(
            "New game: player %s, difficulty %s", player_color, self._difficulty.name
        )
        self._check_rules_outcome()
        if reply:
            self.play_computer_move()

    def submit_move(
        self,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        promotion: PieceType = PieceType.QUEEN,
        *,
        reply: bool = True,
    ) -> MoveResult:
        """Play the human move; with *reply* the computer answers at once."""
        if not self.is_player_turn:
            _LOGGER.debug("Move submitted out of turn")
            return MoveResult.rejected()

        result = self._play(from_row, from_col, to_row, to_col, promotion)
        if result.ok and reply:
            self.play_computer_move()
        return result

    def play_computer_move(self) -> MoveResult | None:
        """Let the engine move; None when it is not the computer's turn."""
        if self.is_over or self._rules.turn_side != self.computer_color:
            return None

        result = self._engine.search(self._rules.snapshot(), self._limits)
        move = result.best_move
        if move is None:
            return None
        return self._play(
            move.from_row,
            move.from_col,
            move.to_row,
            move.to_col,
            move.promotion or PieceType.QUEEN,
        )

    def hint(self) -> Move | None:
        """Engine suggestion for the player at the session depth."""
        if not self.is_player_turn:
            return None
        limits = SearchLimits(depth=self._limits.depth)
        return self._engine.search(self._rules.snapshot(), limits).best_move

    def resign(self) -> None:
        """The human player gives up; the computer wins."""
        if self.is_over:
            return
        self._finish(GameEndReason.RESIGNATION, self.computer_color)

    def activate_curse(
        self,
        row: int,
        col: int,
        swap_with: Coord | None = None,
        *,
        reply: bool = True,
    ) -> MoveResult:
        """Spend the player's turn on a ready curse (see :mod:`cursechess.game.curse`)."""
        if not self._curses_enabled:
            raise curse.CurseError("Curses are disabled for this game")
        if not self.is_player_turn:
            raise curse.CurseError("Not the player's turn")

        mover = self._rules.turn_side
        result = curse.activate_curse(self._rules, row, col, swap_with)
        self._emit_move(mover, result)
        self._check_rules_outcome()
        if reply:
            self.play_computer_move()
        return result

    # ── Internal helpers ─────────────────────────────────────────────────

    def _play(
        self,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        promotion: PieceType,
    ) -> MoveResult:
        mover = self._rules.turn_side
        result = self._rules.move(from_row, from_col, to_row, to_col, promotion)
        if not result.ok:
            return result

        if self._curses_enabled and result.captured is not None:
            capturer = self._rules.piece_at(to_row, to_col)
            if capturer is not None and curse.register_capture(capturer):
                _LOGGER.debug("%s %s curse is ready", capturer.color, capturer.piece_type)
                self._emit_curse_ready(capturer, (to_row, to_col))

        self._emit_move(mover, result)
        self._check_rules_outcome()
        return result

    def _check_rules_outcome(self) -> None:
        status = self._rules.status
        if status == GameStatus.CHECKMATE:
            self._finish(GameEndReason.CHECKMATE, self._rules.winner)
        elif status == GameStatus.STALEMATE:
            self._finish(GameEndReason.STALEMATE, None)

    def _finish(self, reason: GameEndReason, winner: Color | None) -> None:
        self._end_reason = reason
        self._winner = winner
        _LOGGER.info(
            "Game over (%s), winner: %s",
            reason.value,
            winner if winner is not None else "none",
        )
        for cb in self.events.on_game_over:
            cb(reason, winner)

    def _emit_move(self, mover: Color, result: MoveResult) -> None:
        for cb in self.events.on_move:
            cb(mover, result, self._rules.state)

    def _emit_curse_ready(self, piece: Piece, square: Coord) -> None:
        for cb in self.events.on_curse_ready:
            cb(piece, square)
