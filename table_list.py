from line_editor import LineEditor
from messages import TableItem, TableSelected


class TableList:
    """Selectable list of table names with an optional name search."""

    def __init__(self, keys, tables=None):
        self.keys = keys
        self.items: list[TableItem] = [TableItem(str(t)) for t in (tables or [])]
        self.cursor = 0
        self.scroll = 0
        self.height = 0
        self.width = 0
        self.searching = False
        self.search = LineEditor()

    # ---------- state ----------
    def set_tables(self, tables):
        selected = self.selected_item()
        self.items = [TableItem(str(t)) for t in tables]
        self.cursor = 0
        self.scroll = 0
        if selected is not None:
            for idx, item in enumerate(self.visible_items()):
                if item == selected:
                    self.cursor = idx
                    break

    def set_size(self, width: int, height: int):
        self.width = width
        self.height = height

    def visible_items(self) -> list[TableItem]:
        needle = self.search.get_buffer().lower()
        if not needle:
            return list(self.items)
        return [item for item in self.items if needle in item.name.lower()]

    def selected_item(self) -> TableItem | None:
        items = self.visible_items()
        if not items:
            return None
        return items[max(0, min(self.cursor, len(items) - 1))]

    def captures_text(self) -> bool:
        return self.searching

    def captures_cancel(self) -> bool:
        return self.searching or self.has_search()

    def title(self) -> str:
        return f"Tables ({len(self.items)})"

    # ---------- input ----------
    def handle_key(self, ch):
        if self.searching:
            return self._handle_search(ch)

        k = self.keys
        items = self.visible_items()
        if k.matches(ch, "confirm"):
            item = self.selected_item()
            return TableSelected(item.name) if item else None
        if k.matches(ch, "search"):
            self.searching = True
            return None
        if k.matches(ch, "scroll_down"):
            self.cursor = min(max(0, len(items) - 1), self.cursor + 1)
        elif k.matches(ch, "scroll_up"):
            self.cursor = max(0, self.cursor - 1)
        elif k.matches(ch, "page_down"):
            self.cursor = min(max(0, len(items) - 1), self.cursor + self._rows())
        elif k.matches(ch, "page_up"):
            self.cursor = max(0, self.cursor - self._rows())
        elif k.matches(ch, "top"):
            self.cursor = 0
        elif k.matches(ch, "bottom"):
            self.cursor = max(0, len(items) - 1)
        elif k.matches(ch, "cancel") and self.search.get_buffer():
            self.search.reset()
            self.cursor = 0
        return None

    def _handle_search(self, ch):
        result = self.search.handle_key(ch)
        if result == "submit":
            self.searching = False
        elif result == "cancel":
            self.searching = False
            self.search.reset()
            self.cursor = 0
        elif result == "changed":
            self.cursor = 0
            self.scroll = 0
        return None

    def has_search(self) -> bool:
        return bool(self.search.get_buffer())

    # ---------- rendering ----------
    def _rows(self) -> int:
        # title line + blank line, and the search line when shown
        extra = 3 if (self.searching or self.has_search()) else 2
        return max(1, self.height - 2 - extra)

    def draw(self, win, ctx, focused=False):
        ctx.clear(win)
        h, w = win.getmaxyx()
        ctx.text(win, 0, 0, self.title(), w, "title")

        items = self.visible_items()
        rows = max(1, h - (3 if (self.searching or self.has_search()) else 2))
        if self.cursor < self.scroll:
            self.scroll = self.cursor
        elif self.cursor >= self.scroll + rows:
            self.scroll = self.cursor - rows + 1

        if not items:
            ctx.text(win, 2, 0, "No tables" if not self.items else "No matches", w, "dim")
        for i, item in enumerate(items[self.scroll : self.scroll + rows]):
            idx = self.scroll + i
            if idx == self.cursor:
                style = "title" if focused else None
                ctx.text(win, 2 + i, 0, "│ " + item.name, w, style)
            else:
                ctx.text(win, 2 + i, 0, "  " + item.name, w)

        if self.searching or self.has_search():
            visible, _ = self.search.visible_text(w - 9)
            ctx.text(win, h - 1, 0, "Filter: ", w, "label")
            ctx.text(win, h - 1, 8, visible, w - 8)

    def cursor_position(self, win_h: int) -> tuple[int, int] | None:
        if not self.searching:
            return None
        _, col = self.search.visible_text(self.width - 2 - 9)
        return win_h - 1, 8 + col
