import curses
import logging

from messages import QueryFailed, QueryFinished
from overlay import popup_size

log = logging.getLogger(__name__)


class QueryPrompt:
    """Multi-line SQL editor popup.

    The run key hands the text to the task runner; the outcome arrives later
    as QueryFinished or QueryFailed. A failure is shown under the editor and
    the text is kept so it can be corrected.
    """

    TITLE = "SQL Query"

    def __init__(self, keys, tasks, database, session_id: int, term_w: int, term_h: int):
        self.keys = keys
        self.tasks = tasks
        self.database = database
        self.session_id = session_id
        self.lines: list[str] = [""]
        self.row = 0
        self.col = 0
        self.scroll = 0
        self.error: str | None = None
        self.running = False
        self.origin_y = 0
        self.origin_x = 0
        self.resize(term_w, term_h)

    def resize(self, term_w: int, term_h: int):
        self.width, self.height = popup_size(term_w, term_h, 70, 50, 50, 12)
        self.content_w = max(1, self.width - 6)
        # border, title, blank, error line, help line
        self.editor_h = max(1, self.height - 7)

    # ---------- buffer ----------
    def get_text(self) -> str:
        return "\n".join(self.lines)

    def set_text(self, text: str):
        self.lines = text.split("\n") or [""]
        self.row = len(self.lines) - 1
        self.col = len(self.lines[self.row])

    def set_error(self, message: str):
        self.running = False
        self.error = message

    def _insert(self, s: str):
        line = self.lines[self.row]
        self.lines[self.row] = line[: self.col] + s + line[self.col :]
        self.col += len(s)

    def _newline(self):
        line = self.lines[self.row]
        self.lines[self.row] = line[: self.col]
        self.lines.insert(self.row + 1, line[self.col :])
        self.row += 1
        self.col = 0

    def _backspace(self):
        if self.col > 0:
            line = self.lines[self.row]
            self.lines[self.row] = line[: self.col - 1] + line[self.col :]
            self.col -= 1
        elif self.row > 0:
            prev = self.lines[self.row - 1]
            self.lines[self.row - 1] = prev + self.lines[self.row]
            del self.lines[self.row]
            self.row -= 1
            self.col = len(prev)

    def _delete(self):
        line = self.lines[self.row]
        if self.col < len(line):
            self.lines[self.row] = line[: self.col] + line[self.col + 1 :]
        elif self.row + 1 < len(self.lines):
            self.lines[self.row] = line + self.lines[self.row + 1]
            del self.lines[self.row + 1]

    def _move_vertical(self, delta: int):
        self.row = max(0, min(len(self.lines) - 1, self.row + delta))
        self.col = min(self.col, len(self.lines[self.row]))

    # ---------- running ----------
    def run(self) -> bool:
        if self.running:
            return False
        query = self.get_text().strip()
        if not query:
            return False
        self.running = True
        self.error = None
        database = self.database
        session_id = self.session_id
        self.tasks.submit(
            "query",
            lambda: database.execute_query(query),
            lambda frame: QueryFinished(session_id, query, frame),
            lambda err: QueryFailed(session_id, query, err),
        )
        return True

    # ---------- input ----------
    def handle_key(self, ch):
        """Return "close" when dismissed, otherwise None."""
        if ch == -1:
            return None
        if self.keys.matches(ch, "cancel"):
            return "close"
        if self.keys.matches(ch, "run_query"):
            self.run()
            return None

        if ch in (10, 13, curses.KEY_ENTER):
            self._newline()
        elif ch in (curses.KEY_BACKSPACE, 127, 8):
            self._backspace()
        elif ch == curses.KEY_DC:
            self._delete()
        elif ch == curses.KEY_LEFT:
            if self.col > 0:
                self.col -= 1
            elif self.row > 0:
                self.row -= 1
                self.col = len(self.lines[self.row])
        elif ch == curses.KEY_RIGHT:
            if self.col < len(self.lines[self.row]):
                self.col += 1
            elif self.row + 1 < len(self.lines):
                self.row += 1
                self.col = 0
        elif ch == curses.KEY_UP:
            self._move_vertical(-1)
        elif ch == curses.KEY_DOWN:
            self._move_vertical(1)
        elif ch == curses.KEY_HOME:
            self.col = 0
        elif ch == curses.KEY_END:
            self.col = len(self.lines[self.row])
        elif ch == 9:
            self._insert("    ")
        elif 32 <= ch <= 126:
            self._insert(chr(ch))
        return None

    # ---------- rendering ----------
    def _h_offset(self) -> int:
        return max(0, self.col - self.content_w + 1)

    def draw(self, screen, ctx):
        term_h, term_w = screen.getmaxyx()
        self.origin_y = max(0, (term_h - self.height) // 2)
        self.origin_x = max(0, (term_w - self.width) // 2)
        win = ctx.panel(screen, self.origin_y, self.origin_x, self.height, self.width)
        if win is None:
            return
        ctx.clear(win)
        ctx.box(win, "popup_border")
        ctx.text(win, 1, 3, f" {self.TITLE} ", self.content_w, "title")

        if self.row < self.scroll:
            self.scroll = self.row
        elif self.row >= self.scroll + self.editor_h:
            self.scroll = self.row - self.editor_h + 1

        hoff = self._h_offset()
        for i, line in enumerate(self.lines[self.scroll : self.scroll + self.editor_h]):
            shift = hoff if self.scroll + i == self.row else 0
            ctx.text(win, 3 + i, 3, line[shift:], self.content_w)

        if self.running:
            ctx.text(win, self.height - 3, 3, "Running…", self.content_w, "dim")
        elif self.error:
            ctx.text(win, self.height - 3, 3, f"Error: {self.error}", self.content_w, "error")

        run_hint = self.keys.hint("run_query")
        ctx.text(win, self.height - 2, 3, f"{run_hint}: run | esc: close", self.content_w, "dim")

    def cursor_position(self) -> tuple[int, int] | None:
        y = self.origin_y + 3 + (self.row - self.scroll)
        x = self.origin_x + 3 + self.col - self._h_offset()
        return y, x
