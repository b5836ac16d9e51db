"""Game management layer — computer opponent session and curses.

Quick start::

    from cursechess.core import Color
    from cursechess.engine import Difficulty
    from cursechess.game import ComputerGame

    game = ComputerGame()
    game.new_game(player_color=Color.WHITE, difficulty=Difficulty.EASY)
    game.submit_move(6, 4, 4, 4)  # 1. e4, the computer replies
"""

from cursechess.game.curse import (
    CURSE_THRESHOLDS,
    CurseError,
    activate_curse,
    is_curse_ready,
    register_capture,
)
from cursechess.game.session import ComputerGame, GameEndReason, GameEvents

__all__ = [
    # Session
    "ComputerGame",
    "GameEndReason",
    "GameEvents",
    # Curses
    "CURSE_THRESHOLDS",
    "CurseError",
    "activate_curse",
    "is_curse_ready",
    "register_capture",
]
