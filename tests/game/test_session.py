"""Tests for ComputerGame — the human-versus-computer session."""

from __future__ import annotations

import pytest

from cursechess.core.enums import Color, GameStatus, PieceType
from cursechess.core.move import Move
from cursechess.core.piece import Piece
from cursechess.core.snapshot import Snapshot
from cursechess.core.types import Coord
from cursechess.engine.search import Difficulty, SearchLimits, SearchResult
from cursechess.game import ComputerGame, CurseError, GameEndReason

_WHITE_MATES = "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"
_PAWN_TAKES = "4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1"


class _FirstMoveEngine:
    """Plays the first legal move and remembers the limits it was given."""

    def __init__(self) -> None:
        self.calls: list[SearchLimits] = []

    def search(self, snapshot: Snapshot, limits: SearchLimits) -> SearchResult:
        self.calls.append(limits)
        moves = snapshot.generator().generate_legal_moves(snapshot.side_to_move)
        return SearchResult(best_move=moves[0] if moves else None, score=0, depth=1, nodes=1)


def _make_game(
    player_color: Color = Color.WHITE,
    fen: str | None = None,
    **kwargs,
) -> tuple[ComputerGame, _FirstMoveEngine]:
    engine = _FirstMoveEngine()
    game = ComputerGame(engine, **kwargs)
    game.new_game(player_color, Difficulty.MEDIUM, fen)
    return game, engine


class TestNewGame:
    def test_player_white_moves_first(self) -> None:
        game, engine = _make_game()
        assert game.is_player_turn
        assert game.computer_color == Color.BLACK
        assert engine.calls == []

    def test_computer_opens_as_white(self) -> None:
        game, engine = _make_game(Color.BLACK)
        assert len(engine.calls) == 1
        assert game.rules.turn_side == Color.BLACK
        assert game.is_player_turn
        assert len(game.rules.move_history) == 1

    def test_difficulty_sets_limits(self) -> None:
        game = ComputerGame(_FirstMoveEngine())
        game.new_game(Color.WHITE, Difficulty.HARD)
        assert game.difficulty == Difficulty.HARD
        assert game.limits == SearchLimits(depth=4)

    def test_restart_clears_outcome(self) -> None:
        game, _ = _make_game()
        game.resign()
        game.new_game()
        assert not game.is_over
        assert game.winner is None
        assert game.rules.move_history == []

    def test_custom_fen(self) -> None:
        game, _ = _make_game(fen=_WHITE_MATES)
        rook = game.rules.piece_at(7, 0)
        assert rook is not None and rook.piece_type == PieceType.ROOK
        assert game.rules.board.king_square(Color.BLACK) == (0, 6)


class TestSubmitMove:
    def test_computer_replies(self) -> None:
        game, engine = _make_game()
        result = game.submit_move(6, 4, 4, 4)
        assert result.ok
        assert len(engine.calls) == 1
        assert engine.calls[0] == game.limits
        assert game.is_player_turn
        assert len(game.rules.move_history) == 2

    def test_without_reply(self) -> None:
        game, engine = _make_game()
        assert game.submit_move(6, 4, 4, 4, reply=False).ok
        assert engine.calls == []
        assert not game.is_player_turn

        result = game.play_computer_move()
        assert result is not None and result.ok
        assert game.is_player_turn

    def test_illegal_move_rejected(self) -> None:
        game, engine = _make_game()
        result = game.submit_move(6, 4, 3, 4)
        assert not result.ok
        assert engine.calls == []
        assert game.is_player_turn

    def test_out_of_turn_rejected(self) -> None:
        game, _ = _make_game()
        game.submit_move(6, 4, 4, 4, reply=False)
        assert not game.submit_move(1, 4, 3, 4).ok

    def test_computer_does_not_move_on_players_turn(self) -> None:
        game, engine = _make_game()
        assert game.play_computer_move() is None
        assert engine.calls == []

    def test_move_event_fires_for_both_sides(self) -> None:
        game, _ = _make_game()
        movers: list[Color] = []
        game.events.on_move.append(lambda mover, result, state: movers.append(mover))
        game.submit_move(6, 4, 4, 4)
        assert movers == [Color.WHITE, Color.BLACK]


class TestGameEnd:
    def test_player_delivers_mate(self) -> None:
        game, engine = _make_game(fen=_WHITE_MATES)
        outcomes: list[tuple[GameEndReason, Color | None]] = []
        game.events.on_game_over.append(lambda reason, winner: outcomes.append((reason, winner)))

        result = game.submit_move(7, 0, 0, 0)

        assert result.is_checkmate
        assert game.is_over
        assert game.end_reason == GameEndReason.CHECKMATE
        assert game.winner == Color.WHITE
        assert outcomes == [(GameEndReason.CHECKMATE, Color.WHITE)]
        assert engine.calls == []

    def test_computer_delivers_mate(self) -> None:
        game = ComputerGame()
        game.new_game(Color.BLACK, Difficulty.MEDIUM, _WHITE_MATES)
        assert game.rules.status == GameStatus.CHECKMATE
        assert game.end_reason == GameEndReason.CHECKMATE
        assert game.winner == Color.WHITE
        assert not game.is_player_turn

    def test_no_moves_after_game_over(self) -> None:
        game, _ = _make_game(fen=_WHITE_MATES)
        game.submit_move(7, 0, 0, 0)
        assert not game.submit_move(7, 6, 7, 5).ok

    def test_resign(self) -> None:
        game, _ = _make_game()
        outcomes: list[tuple[GameEndReason, Color | None]] = []
        game.events.on_game_over.append(lambda reason, winner: outcomes.append((reason, winner)))
        game.resign()
        game.resign()
        assert game.end_reason == GameEndReason.RESIGNATION
        assert game.winner == Color.BLACK
        assert outcomes == [(GameEndReason.RESIGNATION, Color.BLACK)]

    def test_stalemate_position_ends_at_once(self) -> None:
        game, _ = _make_game(Color.WHITE, "7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert game.end_reason == GameEndReason.STALEMATE
        assert game.winner is None


class TestHint:
    def test_hint_uses_depth_without_randomness(self) -> None:
        engine = _FirstMoveEngine()
        game = ComputerGame(engine)
        game.new_game(Color.WHITE, Difficulty.EASY)
        move = game.hint()
        assert move is not None
        assert engine.calls == [SearchLimits(depth=2, random_move_probability=0.0)]
        assert game.rules.move_history == []

    def test_no_hint_on_computer_turn(self) -> None:
        game, _ = _make_game()
        game.submit_move(6, 4, 4, 4, reply=False)
        assert game.hint() is None

    def test_real_engine_hint_is_legal(self) -> None:
        game = ComputerGame()
        game.new_game(Color.WHITE, Difficulty.EASY, _WHITE_MATES)
        assert game.hint() == Move(7, 0, 0, 0)


class TestCurses:
    def _pawn_game(self, **kwargs) -> ComputerGame:
        game, _ = _make_game(fen=_PAWN_TAKES, **kwargs)
        game.rules.piece_at(4, 4).capture_count = 1
        return game

    def test_capture_makes_curse_ready(self) -> None:
        game = self._pawn_game()
        ready: list[tuple[Piece, Coord]] = []
        game.events.on_curse_ready.append(lambda piece, square: ready.append((piece, square)))

        assert game.submit_move(4, 4, 3, 3, reply=False).ok

        pawn = game.rules.piece_at(3, 3)
        assert pawn.capture_count == 2
        assert pawn.special_ready
        assert ready == [(pawn, (3, 3))]

    def test_disabled_curses_do_not_count(self) -> None:
        game = self._pawn_game(curses_enabled=False)
        game.submit_move(4, 4, 3, 3, reply=False)
        assert game.rules.piece_at(3, 3).capture_count == 1
        with pytest.raises(CurseError):
            game.activate_curse(3, 3)

    def test_activate_passes_turn_to_computer(self) -> None:
        game = self._pawn_game()
        game.submit_move(4, 4, 3, 3)
        movers: list[Color] = []
        game.events.on_move.append(lambda mover, result, state: movers.append(mover))

        result = game.activate_curse(3, 3)

        assert result.ok
        assert game.rules.piece_at(3, 3).special_used
        assert movers == [Color.WHITE, Color.BLACK]
        assert game.is_player_turn

    def test_activate_out_of_turn(self) -> None:
        game = self._pawn_game()
        game.submit_move(4, 4, 3, 3, reply=False)
        with pytest.raises(CurseError):
            game.activate_curse(3, 3)

    def test_not_ready_leaves_turn(self) -> None:
        game, engine = _make_game()
        with pytest.raises(CurseError):
            game.activate_curse(6, 4)
        assert game.is_player_turn
        assert engine.calls == []
