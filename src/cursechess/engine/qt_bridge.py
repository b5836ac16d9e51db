"""Qt bridge to run engine search in a worker thread."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from cursechess.core.snapshot import Snapshot
from cursechess.engine.alphabeta import SearchEngine
from cursechess.engine.search import IEngine, SearchLimits


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand.

    Move it to a ``QThread`` and queue :meth:`request_move` through a signal
    connection; results come back as signals on the caller's thread.
    """

    best_move_ready = pyqtSignal(int, object, int, int)
    search_no_move = pyqtSignal(int, int, int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_engine", "_limits")

    def __init__(
        self,
        *,
        depth: int = 3,
        random_move_probability: float = 0.0,
        engine: IEngine | None = None,
    ) -> None:
        super().__init__()
        self._engine: IEngine = engine if engine is not None else SearchEngine()
        self._limits = SearchLimits(
            depth=depth, random_move_probability=random_move_probability
        )

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @pyqtSlot(object, int)
    def request_move(self, snapshot_obj: object, request_id: int) -> None:
        """Search for the best move in *snapshot_obj* and emit result."""
        if not isinstance(snapshot_obj, Snapshot):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        try:
            result = self._engine.search(snapshot_obj, self._limits)
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if result.best_move is None:
            self.search_no_move.emit(request_id, result.score, result.nodes)
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.score,
            result.nodes,
        )

    @pyqtSlot(int, float)
    def set_limits(self, depth: int, random_move_probability: float) -> None:
        """Update search limits (takes effect on the next search)."""
        self._limits = SearchLimits(
            depth=depth, random_move_probability=random_move_probability
        )
