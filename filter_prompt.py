from enum import Enum

from line_editor import LineEditor


class FilterMode(Enum):
    OFF = "off"
    PICK_COLUMN = "pick_column"
    TYPE_VALUE = "type_value"


class FilterPrompt:
    """Two-step filter input: choose a column, then type the value.

    Only holds the prompt state; the grid decides what to fetch.
    """

    def __init__(self):
        self.mode = FilterMode.OFF
        self.columns: list[str] = []
        self.col_index = 0
        self.col_scroll = 0
        self.column: str | None = None
        self.editor = LineEditor()
        # committed (or live) filter applied to page fetches
        self.applied_column: str | None = None
        self.applied_text: str | None = None
        self.saved_page: int | None = None
        self.filtered_total = 0

    # ---------- queries ----------
    @property
    def active(self) -> bool:
        return self.mode is not FilterMode.OFF

    @property
    def typing(self) -> bool:
        return self.mode is FilterMode.TYPE_VALUE

    @property
    def applied(self) -> bool:
        return bool(self.applied_column) and bool(self.applied_text)

    def criteria(self) -> tuple[str | None, str | None]:
        if self.applied:
            return self.applied_column, self.applied_text
        return None, None

    def visible_count(self, height: int) -> int:
        max_visible = max(3, (height - 3) // 2)
        return min(len(self.columns), max_visible)

    # ---------- transitions ----------
    def start(self, columns, current_page: int):
        self.columns = list(columns)
        self.mode = FilterMode.PICK_COLUMN
        self.col_index = 0
        self.col_scroll = 0
        if not self.applied:
            self.saved_page = current_page

    def rescale_saved_page(self, old_size: int, new_size: int):
        if self.saved_page is not None:
            self.saved_page = self.saved_page * old_size // new_size

    def move(self, delta: int, height: int):
        if not self.columns:
            return
        self.col_index = max(0, min(len(self.columns) - 1, self.col_index + delta))
        visible = max(1, self.visible_count(height))
        if self.col_index < self.col_scroll:
            self.col_scroll = self.col_index
        elif self.col_index >= self.col_scroll + visible:
            self.col_scroll = self.col_index - visible + 1

    def choose(self) -> str | None:
        if not self.columns:
            return None
        self.column = self.columns[self.col_index]
        self.mode = FilterMode.TYPE_VALUE
        self.editor.reset()
        return self.column

    def apply_live(self):
        text = self.editor.get_buffer()
        if text:
            self.applied_column = self.column
            self.applied_text = text
        else:
            self.applied_column = None
            self.applied_text = None

    def commit(self):
        self.mode = FilterMode.OFF
        if not self.applied:
            self.saved_page = None

    def clear(self) -> int | None:
        """Drop any filter and return the page to restore."""
        page = self.saved_page
        self.mode = FilterMode.OFF
        self.column = None
        self.editor.reset()
        self.applied_column = None
        self.applied_text = None
        self.saved_page = None
        self.filtered_total = 0
        return page
