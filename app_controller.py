import logging
import time

from app_state import Focus, Session
from database import Database
from grid_pane import DataGrid
from messages import (
    OpenRequested,
    PageFailed,
    PageLoaded,
    QueryFailed,
    QueryFinished,
    RowSelected,
    SourceFailed,
    SourceOpened,
    TableSelected,
    TablesFailed,
    TablesLoaded,
)
from overlay import RowDetailOverlay
from path_picker import PathPicker
from query_prompt import QueryPrompt
from screen_layout import ScreenLayout
from table_list import TableList

log = logging.getLogger(__name__)

CTRL_C = 3


class RootController:
    """Routes every key and completion to exactly one receiver.

    Order of precedence: an open popup, then the path picker while no
    database is open, then the focused pane. Nothing here touches curses, so
    the whole flow can be driven from tests with a synchronous task runner.
    """

    def __init__(
        self,
        keys,
        tasks,
        *,
        initial_path=None,
        directory=".",
        page_size=None,
        opener=Database.open,
    ):
        self.keys = keys
        self.tasks = tasks
        self.fixed_page_size = page_size
        self._opener = opener

        self.session = Session()
        self.layout = ScreenLayout.compute(24, 80, page_size)
        self.picker = PathPicker(keys, initial_path, directory)
        self.tables = TableList(keys)
        self.grid = self._new_grid()
        self.modal = None
        self.quit_requested = False

        self.status_msg: str | None = None
        self.status_until = 0.0

        if initial_path:
            self._route_event(self.picker.submit())

    # ---------- helpers ----------
    def _new_grid(self) -> DataGrid:
        grid = DataGrid(
            self.keys,
            self.tasks,
            self.set_status,
            self.report_error,
            page_size=self.layout.page_size,
        )
        grid.set_size(self.layout.right_w, self.layout.pane_h)
        return grid

    def set_status(self, msg: str, seconds: float = 3):
        self.status_msg = msg
        self.status_until = time.time() + seconds

    def report_error(self, msg: str):
        log.warning("error: %s", msg)
        self.session.last_error = msg
        self.set_status(f"Error: {msg}", 5)

    @property
    def focused_pane(self):
        return self.grid if self.session.focus is Focus.GRID else self.tables

    # ---------- geometry ----------
    def resize(self, height: int, width: int):
        self.layout = ScreenLayout.compute(height, width, self.fixed_page_size)
        self.session.set_size(width, height)
        self.tables.set_size(self.layout.left_w, self.layout.pane_h)
        self.grid.set_size(self.layout.right_w, self.layout.pane_h, self.layout.page_size)
        if self.modal is not None:
            self.modal.resize(width, height)

    # ---------- keys ----------
    def handle_key(self, ch):
        if ch == -1:
            return
        if ch == CTRL_C:
            self.quit_requested = True
            return

        if self.modal is not None:
            if self.modal.handle_key(ch) == "close":
                self.modal = None
            return

        if not self.session.is_open:
            self._route_event(self.picker.handle_key(ch))
            return

        pane = self.focused_pane
        if pane is self.grid and self.grid.modal_input():
            self._route_event(self.grid.handle_key(ch))
            return
        if pane.captures_text():
            self._route_event(pane.handle_key(ch))
            return

        k = self.keys
        if k.matches(ch, "quit"):
            self.quit_requested = True
        elif k.matches(ch, "cancel"):
            if pane.captures_cancel():
                self._route_event(pane.handle_key(ch))
            else:
                self.back_to_picker()
        elif k.matches(ch, "switch_focus"):
            if self.session.focus is Focus.TABLES:
                self._enter_grid()
            else:
                self.session.focus = Focus.TABLES
        elif k.matches(ch, "focus_right") and self.session.focus is Focus.TABLES:
            self._enter_grid()
        elif k.matches(ch, "focus_left") and self.session.focus is Focus.GRID:
            self.session.focus = Focus.TABLES
        elif k.matches(ch, "open_query"):
            self.open_query()
        elif k.matches(ch, "refresh"):
            if self.session.focus is Focus.GRID:
                self.grid.refresh()
            else:
                self.refresh_tables()
        else:
            self._route_event(pane.handle_key(ch))

    def _route_event(self, event):
        if event is None:
            return
        if event == "quit":
            self.quit_requested = True
        elif isinstance(event, OpenRequested):
            self.open_source(event.path)
        elif isinstance(event, TableSelected):
            self.load_table(event.name)
            self.session.focus = Focus.GRID
        elif isinstance(event, RowSelected):
            self.modal = RowDetailOverlay(
                self.keys, event.columns, event.values, self.layout.W, self.layout.H
            )

    def _enter_grid(self):
        item = self.tables.selected_item()
        if item is not None and (self.grid.is_query_result or self.grid.table_name != item.name):
            self.load_table(item.name)
        self.session.focus = Focus.GRID

    # ---------- operations ----------
    def open_source(self, path: str):
        opener = self._opener

        def work():
            database = opener(path)
            try:
                tables = database.list_tables()
            except Exception:
                database.close()
                raise
            return database, tables

        self.tasks.submit(
            f"open {path}",
            work,
            lambda result: SourceOpened(path, result[0], result[1]),
            lambda err: SourceFailed(path, err),
        )

    def load_table(self, name: str):
        self.session.last_error = None
        self.grid.open_table(name)

    def refresh_tables(self):
        database = self.session.database
        session_id = self.session.session_id
        self.tasks.submit(
            "list tables",
            database.list_tables,
            lambda tables: TablesLoaded(session_id, tables),
            lambda err: TablesFailed(session_id, err),
        )

    def open_query(self):
        if not isinstance(self.modal, QueryPrompt):
            self.modal = QueryPrompt(
                self.keys,
                self.tasks,
                self.session.database,
                self.session.session_id,
                self.layout.W,
                self.layout.H,
            )

    def back_to_picker(self, error: str | None = None):
        self.session.release()
        self.session.reap(self.tasks)
        self.modal = None
        self.tables = TableList(self.keys)
        self.tables.set_size(self.layout.left_w, self.layout.pane_h)
        self.grid = self._new_grid()
        self.picker.opening = False
        self.picker.error = error

    # ---------- completions ----------
    def apply(self, msg):
        current = self.session.session_id

        if isinstance(msg, SourceOpened):
            if self.session.is_open:
                msg.database.close()
                return
            self._install_source(msg)
        elif isinstance(msg, SourceFailed):
            if not self.session.is_open:
                self.picker.set_error(msg.error)
        elif isinstance(msg, TablesLoaded):
            if msg.session_id == current:
                self.tables.set_tables(msg.tables)
                self.set_status(f"Loaded {len(msg.tables)} tables")
        elif isinstance(msg, TablesFailed):
            if msg.session_id == current:
                self.back_to_picker(error=msg.error)
        elif isinstance(msg, (PageLoaded, PageFailed)):
            if msg.token.session_id == current and self.grid.apply(msg):
                if isinstance(msg, PageLoaded):
                    self.session.last_error = None
        elif isinstance(msg, QueryFinished):
            if msg.session_id == current:
                self.grid.show_query_result(msg.query, msg.frame)
                if isinstance(self.modal, QueryPrompt):
                    self.modal = None
                self.session.focus = Focus.GRID
                self.session.last_error = None
        elif isinstance(msg, QueryFailed):
            if msg.session_id == current:
                if isinstance(self.modal, QueryPrompt):
                    self.modal.set_error(msg.error)
                else:
                    self.report_error(msg.error)
        else:
            log.warning("unhandled message %r", type(msg).__name__)

    def _install_source(self, msg: SourceOpened):
        session_id = self.session.open(msg.database, msg.path)
        self.picker.opening = False
        self.picker.error = None
        self.tables = TableList(self.keys, msg.tables)
        self.tables.set_size(self.layout.left_w, self.layout.pane_h)
        self.grid = self._new_grid()
        self.grid.bind(msg.database, session_id)
        if msg.tables:
            self.load_table(msg.tables[0])

    def process_pending(self) -> int:
        messages = self.tasks.drain()
        for msg in messages:
            self.apply(msg)
        self.session.reap(self.tasks)
        return len(messages)

    def shutdown(self):
        self.session.close_all()

    # ---------- status ----------
    def status_context(self) -> dict:
        if not self.session.is_open:
            hints = [("enter", "open"), ("esc", "quit")]
            view = ""
        elif self.session.focus is Focus.GRID:
            k = self.keys
            hints = [
                (k.hint("confirm"), "detail"),
                (k.hint("open_filter"), "filter"),
                (k.hint("next_page"), "page"),
                (k.hint("open_query"), "query"),
                (k.hint("quit"), "quit"),
            ]
            view = self.grid.status_text()
        else:
            k = self.keys
            hints = [
                (k.hint("confirm"), "open"),
                (k.hint("search"), "search"),
                (k.hint("open_query"), "query"),
                (k.hint("cancel"), "back"),
                (k.hint("quit"), "quit"),
            ]
            view = self.tables.title()
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_until,
            "error": self.session.last_error,
            "file_path": self.session.path,
            "view": view,
            "hints": hints,
        }
