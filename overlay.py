def wrap_text(text: str, max_width: int) -> list[str]:
    """Word-wrap to max_width, hard-breaking words that are longer than a line."""
    if max_width <= 0 or len(text) <= max_width:
        return [text]

    words = text.split()
    if not words:
        return [""]

    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        if len(current) + 1 + len(word) <= max_width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    lines.append(current)

    result: list[str] = []
    for line in lines:
        if len(line) <= max_width:
            result.append(line)
            continue
        for i in range(0, len(line), max_width):
            result.append(line[i : i + max_width])
    return result


def popup_size(term_w: int, term_h: int, pct_w: int, pct_h: int, min_w: int, min_h: int):
    width = max(term_w * pct_w // 100, min_w)
    height = max(term_h * pct_h // 100, min_h)
    return min(width, max(1, term_w)), min(height, max(1, term_h))


class RowDetailOverlay:
    """Read-only popup listing one record as aligned ``column : value`` lines."""

    TITLE = "Row Detail"
    HELP = "↑↓: scroll | esc/enter: close"

    def __init__(self, keys, columns, values, term_w: int, term_h: int):
        self.keys = keys
        self.columns = [str(c) for c in columns]
        self.values = [str(v) for v in values]
        self.scroll = 0
        self.lines: list[tuple[str, str]] = []
        self.resize(term_w, term_h)

    def resize(self, term_w: int, term_h: int):
        self.width, self.height = popup_size(term_w, term_h, 60, 70, 40, 10)
        # border (2) + horizontal padding (2 each side)
        self.content_w = max(1, self.width - 6)
        # border, padding, title, blank line, help
        self.content_h = max(1, self.height - 7)
        self.lines = self.build_lines(self.columns, self.values, self.content_w)
        self.scroll = min(self.scroll, self.max_scroll())

    @staticmethod
    def build_lines(columns, values, content_w: int) -> list[tuple[str, str]]:
        """Return (label, text) pairs; continuation lines have a blank label."""
        max_label = max((len(c) for c in columns), default=0)
        indent = max_label + 3
        value_w = max(10, content_w - indent)

        lines: list[tuple[str, str]] = []
        for i, col in enumerate(columns):
            val = values[i] if i < len(values) else ""
            wrapped = []
            for part in val.split("\n"):
                wrapped.extend(wrap_text(part, value_w))
            label = col.rjust(max_label) + " : "
            lines.append((label, wrapped[0]))
            for extra in wrapped[1:]:
                lines.append((" " * indent, extra))
        return lines

    def max_scroll(self) -> int:
        return max(0, len(self.lines) - self.content_h)

    def handle_key(self, ch):
        """Return "close" when dismissed."""
        if ch == -1:
            return None

        k = self.keys
        if k.matches(ch, "cancel") or k.matches(ch, "confirm") or k.matches(ch, "quit"):
            return "close"

        max_scroll = self.max_scroll()
        half_page = max(1, self.content_h // 2)

        if k.matches(ch, "page_down"):
            self.scroll = min(max_scroll, self.scroll + half_page)
        elif k.matches(ch, "page_up"):
            self.scroll = max(0, self.scroll - half_page)
        elif k.matches(ch, "top"):
            self.scroll = 0
        elif k.matches(ch, "bottom"):
            self.scroll = max_scroll
        elif k.matches(ch, "scroll_down"):
            self.scroll = min(max_scroll, self.scroll + 1)
        elif k.matches(ch, "scroll_up"):
            self.scroll = max(0, self.scroll - 1)
        return None

    def cursor_position(self):
        return None

    def draw(self, screen, ctx):
        term_h, term_w = screen.getmaxyx()
        y = max(0, (term_h - self.height) // 2)
        x = max(0, (term_w - self.width) // 2)
        win = ctx.panel(screen, y, x, self.height, self.width)
        if win is None:
            return
        ctx.clear(win)
        ctx.box(win, "popup_border")
        ctx.text(win, 1, 3, f" {self.TITLE} ", self.content_w, "title")

        top = 3
        for i, (label, text) in enumerate(self.lines[self.scroll : self.scroll + self.content_h]):
            ctx.text(win, top + i, 3, label, self.content_w, "label")
            ctx.text(win, top + i, 3 + len(label), text, max(0, self.content_w - len(label)))

        more = ""
        if self.max_scroll():
            more = f"  {self.scroll + 1}-{min(len(self.lines), self.scroll + self.content_h)}/{len(self.lines)}"
        ctx.text(win, self.height - 2, 3, self.HELP + more, self.content_w, "dim")
