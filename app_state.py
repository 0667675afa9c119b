import logging
from enum import Enum

log = logging.getLogger(__name__)


class Focus(Enum):
    TABLES = "tables"
    GRID = "grid"


class Session:
    """Owns the open database handle and the screen-level state around it.

    Each open bumps session_id so completions issued for an earlier handle
    can be recognized and dropped. Handles released while background tasks
    may still be using them are retired and closed by reap() once the task
    runner is idle.
    """

    def __init__(self, width: int = 0, height: int = 0):
        self.database = None
        self.path: str | None = None
        self.session_id = 0
        self.width = width
        self.height = height
        self.last_error: str | None = None
        self.focus = Focus.TABLES
        self._retired: list = []

    @property
    def is_open(self) -> bool:
        return self.database is not None

    def open(self, database, path: str | None = None) -> int:
        if self.database is not None:
            self.release()
        self.session_id += 1
        self.database = database
        self.path = path
        self.last_error = None
        self.focus = Focus.TABLES
        log.info("session %d opened %s", self.session_id, path or "")
        return self.session_id

    def release(self):
        if self.database is None:
            return
        log.info("session %d released", self.session_id)
        self._retired.append(self.database)
        self.database = None
        self.path = None
        self.focus = Focus.TABLES
        # completions still in flight belong to the released handle
        self.session_id += 1

    def reap(self, runner) -> int:
        """Close retired handles when no task can still be using them."""
        if not self._retired or runner.in_flight():
            return 0
        closed = 0
        while self._retired:
            self._retired.pop().close()
            closed += 1
        return closed

    def close_all(self):
        self.release()
        while self._retired:
            self._retired.pop().close()

    def set_size(self, width: int, height: int):
        self.width = width
        self.height = height
