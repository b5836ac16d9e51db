"""cursechess — chess with capture-earned curses and a computer opponent.

Sub-packages:

* :mod:`cursechess.core` — rules, board model, move generation, persistence.
* :mod:`cursechess.engine` — alpha-beta search and evaluation.
* :mod:`cursechess.game` — play-versus-computer session and curses.
"""

__version__ = "0.1.0"
