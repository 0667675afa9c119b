import curses
from enum import Enum

from file_type_handler import FileTypeHandler
from line_editor import LineEditor
from messages import OpenRequested


class PickerFocus(Enum):
    INPUT = "input"
    LIST = "list"


class PathPicker:
    """Screen shown while no database is open.

    A path field and the database files found in the working directory share
    the screen; arrow keys at either edge hand focus to the other. Submitting
    a valid path returns OpenRequested; the open itself runs elsewhere and any
    failure comes back through set_error().
    """

    BOX_WIDTH = 50

    def __init__(self, keys, initial_path: str | None = None, directory: str = "."):
        self.keys = keys
        self.input = LineEditor(initial_path or "")
        self.files = FileTypeHandler.discover(directory)
        self.cursor = 0
        self.error: str | None = None
        self.opening = False
        self._input_origin = None
        if self.files and not initial_path:
            self.focused = PickerFocus.LIST
        else:
            self.focused = PickerFocus.INPUT

    def set_error(self, message: str):
        self.error = message
        self.opening = False

    # ---------- focus ----------
    def _switch_to_list(self, cursor: int):
        self.focused = PickerFocus.LIST
        self.cursor = cursor

    def _switch_to_input(self):
        self.focused = PickerFocus.INPUT

    # ---------- input ----------
    def handle_key(self, ch):
        """Return OpenRequested, "quit", or None."""
        k = self.keys
        if k.matches(ch, "confirm"):
            return self.submit()

        if k.matches(ch, "cancel"):
            return "quit"

        if ch == curses.KEY_UP:
            if not self.files:
                return None
            if self.focused is PickerFocus.INPUT:
                self._switch_to_list(len(self.files) - 1)
            elif self.cursor > 0:
                self.cursor -= 1
            else:
                self._switch_to_input()
            return None

        if ch == curses.KEY_DOWN:
            if not self.files:
                return None
            if self.focused is PickerFocus.INPUT:
                self._switch_to_list(0)
            elif self.cursor < len(self.files) - 1:
                self.cursor += 1
            return None

        if self.focused is PickerFocus.LIST:
            if k.matches(ch, "scroll_up"):
                if self.cursor > 0:
                    self.cursor -= 1
                else:
                    self._switch_to_input()
            elif k.matches(ch, "scroll_down"):
                if self.cursor < len(self.files) - 1:
                    self.cursor += 1
            return None

        self.input.handle_key(ch)
        return None

    def chosen_path(self) -> str:
        if self.focused is PickerFocus.LIST and self.files:
            return self.files[self.cursor]
        return self.input.get_buffer().strip()

    def submit(self):
        if self.opening:
            return None
        path = self.chosen_path()
        if not path:
            return None
        problem = FileTypeHandler(path).validate()
        if problem:
            self.error = problem
            return None
        self.error = None
        self.opening = True
        return OpenRequested(path)

    # ---------- rendering ----------
    def draw(self, win, ctx):
        ctx.clear(win)
        h, w = win.getmaxyx()
        box_w = min(self.BOX_WIDTH + 4, max(10, w - 2))

        lines = 4 + (len(self.files) + 4 if self.files else 0) + 2 + (2 if self.error else 0)
        top = max(0, (h - lines) // 2)
        left = max(0, (w - box_w) // 2)

        ctx.text(win, top, left, "sqlpeek", box_w, "title")
        y = top + 2
        ctx.text(win, y, left + 2, "Database path", box_w, "dim")
        y += 1
        box = ctx.panel(win, y, left, 3, box_w)
        self._input_origin = None
        if box is not None:
            style = "focused_border" if self.focused is PickerFocus.INPUT else "unfocused_border"
            ctx.box(box, style)
            visible, col = self.input.visible_text(box_w - 4)
            if not visible and self.focused is not PickerFocus.INPUT:
                ctx.text(box, 1, 2, "/path/to/database.db", box_w - 4, "dim")
            else:
                ctx.text(box, 1, 2, visible, box_w - 4)
            self._input_origin = (y + 1, left + 2 + col)
        y += 3

        if self.files:
            y += 1
            ctx.text(win, y, left + 2, "Files in current directory", box_w, "dim")
            y += 1
            list_h = min(len(self.files) + 2, max(3, h - y - 3))
            box = ctx.panel(win, y, left, list_h, box_w)
            if box is not None:
                style = "focused_border" if self.focused is PickerFocus.LIST else "unfocused_border"
                ctx.box(box, style)
                rows = max(1, list_h - 2)
                start = max(0, self.cursor - rows + 1)
                for i, name in enumerate(self.files[start : start + rows]):
                    idx = start + i
                    if self.focused is PickerFocus.LIST and idx == self.cursor:
                        ctx.text(box, 1 + i, 1, " > " + name, box_w - 2, "title")
                    else:
                        ctx.text(box, 1 + i, 1, "   " + name, box_w - 2)
            y += list_h

        if self.error:
            y += 1
            ctx.text(win, y, left, f"Error: {self.error}", w - left, "error")
            y += 1

        y += 1
        hint = "opening…" if self.opening else "enter: open | esc: quit"
        ctx.text(win, y, left, hint, box_w, "dim")

    def cursor_position(self) -> tuple[int, int] | None:
        if self.focused is not PickerFocus.INPUT:
            return None
        return self._input_origin
