"""Tests for capture-earned curses."""

import pytest

from cursechess.core.enums import Color, PieceType
from cursechess.core.piece import Piece
from cursechess.core.rule_engine import RuleEngine
from cursechess.game.curse import (
    CURSE_THRESHOLDS,
    CurseError,
    activate_curse,
    is_curse_ready,
    register_capture,
)


def _ready(rules: RuleEngine, row: int, col: int) -> Piece:
    piece = rules.piece_at(row, col)
    assert piece is not None
    piece.capture_count = CURSE_THRESHOLDS[piece.piece_type]
    piece.special_ready = True
    return piece


class TestRegisterCapture:
    @pytest.mark.parametrize(
        ("piece_type", "threshold"),
        [(PieceType.PAWN, 2), (PieceType.KNIGHT, 3), (PieceType.ROOK, 5)],
    )
    def test_ready_exactly_at_threshold(self, piece_type: PieceType, threshold: int) -> None:
        piece = Piece(Color.WHITE, piece_type)
        results = [register_capture(piece) for _ in range(threshold + 2)]
        assert results == [False] * (threshold - 1) + [True, False, False]
        assert piece.capture_count == threshold + 2
        assert piece.special_ready

    @pytest.mark.parametrize("piece_type", [PieceType.BISHOP, PieceType.QUEEN, PieceType.KING])
    def test_types_without_curse(self, piece_type: PieceType) -> None:
        piece = Piece(Color.BLACK, piece_type)
        assert not any(register_capture(piece) for _ in range(6))
        assert piece.capture_count == 0
        assert not piece.special_ready

    def test_used_curse_does_not_rearm(self) -> None:
        piece = Piece(Color.WHITE, PieceType.PAWN, capture_count=2, special_used=True)
        assert not register_capture(piece)
        assert not piece.special_ready

    def test_is_curse_ready(self) -> None:
        assert not is_curse_ready(None)
        assert not is_curse_ready(Piece(Color.WHITE, PieceType.PAWN))
        assert is_curse_ready(Piece(Color.WHITE, PieceType.PAWN, special_ready=True))
        assert not is_curse_ready(
            Piece(Color.WHITE, PieceType.PAWN, special_ready=True, special_used=True)
        )


class TestPawnCurse:
    FEN = "4k3/8/8/8/3P4/8/8/4K3 w - - 0 1"

    def test_activation_passes_turn(self) -> None:
        rules = RuleEngine.from_fen(self.FEN)
        pawn = _ready(rules, 4, 3)
        result = activate_curse(rules, 4, 3)
        assert result.ok
        assert rules.turn_side == Color.BLACK
        assert pawn.special_used
        assert not pawn.special_ready
        assert rules.move_history == []

    def test_pawn_then_steps_like_king(self) -> None:
        rules = RuleEngine.from_fen(self.FEN)
        _ready(rules, 4, 3)
        activate_curse(rules, 4, 3)
        assert rules.move(0, 4, 0, 3).ok
        assert len(rules.legal_moves(4, 3)) == 8
        assert rules.move(4, 3, 5, 3).ok

    def test_cannot_activate_twice(self) -> None:
        rules = RuleEngine.from_fen(self.FEN)
        _ready(rules, 4, 3)
        activate_curse(rules, 4, 3)
        assert rules.move(0, 4, 0, 3).ok
        with pytest.raises(CurseError):
            activate_curse(rules, 4, 3)


class TestKnightCurse:
    def test_swaps_with_own_piece(self, rules: RuleEngine) -> None:
        knight = _ready(rules, 7, 1)
        pawn = rules.piece_at(6, 3)
        activate_curse(rules, 7, 1, swap_with=(6, 3))
        assert rules.piece_at(6, 3) is knight
        assert rules.piece_at(7, 1) is pawn
        assert knight.special_used
        assert rules.turn_side == Color.BLACK

    @pytest.mark.parametrize(
        "swap_with",
        [None, (7, 1), (7, 4), (1, 3), (4, 4), (8, 0)],
    )
    def test_invalid_partner(self, rules: RuleEngine, swap_with) -> None:
        knight = _ready(rules, 7, 1)
        before = rules.serialize()
        with pytest.raises(CurseError):
            activate_curse(rules, 7, 1, swap_with=swap_with)
        assert rules.serialize() == before
        assert not knight.special_used

    def test_pawn_not_swapped_onto_last_rank(self) -> None:
        rules = RuleEngine.from_fen("1N2k3/8/8/8/8/8/P7/4K3 w - - 0 1")
        _ready(rules, 0, 1)
        with pytest.raises(CurseError):
            activate_curse(rules, 0, 1, swap_with=(6, 0))

    def test_swap_can_give_check(self) -> None:
        rules = RuleEngine.from_fen("4k3/8/8/1N6/8/8/5B2/4K3 w - - 0 1")
        _ready(rules, 3, 1)
        result = activate_curse(rules, 3, 1, swap_with=(6, 5))
        assert result.is_check
        assert rules.is_in_check(Color.BLACK)


class TestActivationErrors:
    def test_not_ready(self, rules: RuleEngine) -> None:
        with pytest.raises(CurseError):
            activate_curse(rules, 6, 4)
        assert rules.turn_side == Color.WHITE

    def test_opponent_piece(self, rules: RuleEngine) -> None:
        _ready(rules, 1, 4)
        with pytest.raises(CurseError):
            activate_curse(rules, 1, 4)

    def test_empty_or_offboard(self, rules: RuleEngine) -> None:
        with pytest.raises(CurseError):
            activate_curse(rules, 4, 4)
        with pytest.raises(CurseError):
            activate_curse(rules, 9, 9)

    def test_rook_has_no_ability(self, rules: RuleEngine) -> None:
        rook = _ready(rules, 7, 0)
        with pytest.raises(CurseError):
            activate_curse(rules, 7, 0)
        assert not rook.special_used
        assert rules.turn_side == Color.WHITE

    def test_not_while_in_check(self) -> None:
        rules = RuleEngine.from_fen("4k3/4r3/8/8/3P4/8/8/4K3 w - - 0 1")
        _ready(rules, 4, 3)
        with pytest.raises(CurseError):
            activate_curse(rules, 4, 3)

    def test_not_after_game_end(self) -> None:
        rules = RuleEngine.from_fen("6k1/5ppp/8/8/8/8/P7/R5K1 w - - 0 1")
        assert rules.move(7, 0, 0, 0).ok
        rules.piece_at(1, 5).special_ready = True
        with pytest.raises(CurseError):
            activate_curse(rules, 1, 5)

    def test_error_is_value_error(self) -> None:
        assert issubclass(CurseError, ValueError)
