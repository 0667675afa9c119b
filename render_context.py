import curses


class RenderContext:
    """Styles plus the few paint primitives every view uses.

    Built once after curses starts and handed to each draw call.
    """

    PAIR_TITLE = 1
    PAIR_DIM = 2
    PAIR_ERROR = 3
    PAIR_FOCUS = 4
    PAIR_LABEL = 5
    PAIR_SELECTED = 6
    PAIR_STATUS = 7
    PAIR_POPUP = 8

    STYLE_NAMES = (
        "normal",
        "title",
        "dim",
        "error",
        "focused_border",
        "unfocused_border",
        "popup_border",
        "label",
        "selected",
        "header",
        "status",
    )

    def __init__(self, styles: dict[str, int] | None = None):
        self.styles = {name: 0 for name in self.STYLE_NAMES}
        self.styles.update(styles or {})

    @classmethod
    def create(cls) -> "RenderContext":
        styles = {
            "header": curses.A_BOLD,
            "selected": curses.A_REVERSE,
            "dim": curses.A_DIM,
            "title": curses.A_BOLD,
            "error": curses.A_BOLD,
            "focused_border": curses.A_BOLD,
            "unfocused_border": curses.A_DIM,
            "popup_border": curses.A_BOLD,
            "label": curses.A_BOLD,
        }
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(cls.PAIR_TITLE, curses.COLOR_MAGENTA, -1)
            curses.init_pair(cls.PAIR_DIM, curses.COLOR_WHITE, -1)
            curses.init_pair(cls.PAIR_ERROR, curses.COLOR_RED, -1)
            curses.init_pair(cls.PAIR_FOCUS, curses.COLOR_BLUE, -1)
            curses.init_pair(cls.PAIR_LABEL, curses.COLOR_CYAN, -1)
            curses.init_pair(cls.PAIR_SELECTED, curses.COLOR_YELLOW, curses.COLOR_BLUE)
            curses.init_pair(cls.PAIR_STATUS, curses.COLOR_WHITE, curses.COLOR_BLACK)
            curses.init_pair(cls.PAIR_POPUP, curses.COLOR_MAGENTA, -1)
            styles.update(
                {
                    "title": curses.color_pair(cls.PAIR_TITLE) | curses.A_BOLD,
                    "dim": curses.color_pair(cls.PAIR_DIM) | curses.A_DIM,
                    "error": curses.color_pair(cls.PAIR_ERROR) | curses.A_BOLD,
                    "focused_border": curses.color_pair(cls.PAIR_FOCUS) | curses.A_BOLD,
                    "unfocused_border": curses.color_pair(cls.PAIR_DIM) | curses.A_DIM,
                    "popup_border": curses.color_pair(cls.PAIR_POPUP) | curses.A_BOLD,
                    "label": curses.color_pair(cls.PAIR_LABEL) | curses.A_BOLD,
                    "selected": curses.color_pair(cls.PAIR_SELECTED),
                    "status": curses.color_pair(cls.PAIR_STATUS),
                }
            )
        except curses.error:
            pass
        return cls(styles)

    def attr(self, style: str | None) -> int:
        if not style:
            return 0
        return self.styles.get(style, 0)

    # ---------- paint primitives ----------
    def text(self, win, y: int, x: int, s: str, width: int | None = None, style: str | None = None):
        h, w = win.getmaxyx()
        if y < 0 or y >= h or x < 0 or x >= w:
            return
        n = w - x if width is None else min(width, w - x)
        if n <= 0:
            return
        try:
            win.addnstr(y, x, s, n, self.attr(style))
        except curses.error:
            # writing the bottom-right cell raises after drawing
            pass

    def box(self, win, style: str | None = None):
        attr = self.attr(style)
        try:
            win.attron(attr)
            win.box()
            win.attroff(attr)
        except curses.error:
            pass

    def panel(self, parent, y: int, x: int, h: int, w: int):
        """Sub-window clipped to the parent, or None if nothing is visible."""
        ph, pw = parent.getmaxyx()
        h = min(h, ph - y)
        w = min(w, pw - x)
        if h <= 0 or w <= 0 or y < 0 or x < 0:
            return None
        try:
            return parent.derwin(h, w, y, x)
        except curses.error:
            return None

    def clear(self, win):
        try:
            win.erase()
        except curses.error:
            pass
