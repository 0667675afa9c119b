from dataclasses import dataclass

MARGIN_X = 2
LEFT_PCT = 30
LEFT_MIN = 25
RIGHT_MIN = 10
PANE_MIN_H = 5
# rows used by the outer title line, blank line, and status bar
CHROME_ROWS = 4
# pane border, header, separator, filter line
GRID_CHROME = 5


@dataclass(frozen=True)
class ScreenLayout:
    """Pane geometry derived from the terminal size.

    The left pane holds the table list, the right pane the data grid. Both
    start at row 1 beneath the title line; the status bar is the last row.
    """

    H: int
    W: int
    left_w: int
    right_w: int
    pane_h: int
    page_size: int

    @property
    def top(self) -> int:
        return 1

    @property
    def left_x(self) -> int:
        return MARGIN_X

    @property
    def right_x(self) -> int:
        return MARGIN_X + self.left_w + 1

    @property
    def status_y(self) -> int:
        return max(0, self.H - 1)

    @classmethod
    def compute(cls, height: int, width: int, fixed_page_size: int | None = None) -> "ScreenLayout":
        inner = width - 2 * MARGIN_X
        left_w = max(LEFT_MIN, inner * LEFT_PCT // 100)
        right_w = max(RIGHT_MIN, inner - left_w - 1)
        pane_h = max(PANE_MIN_H, height - CHROME_ROWS)
        page_size = fixed_page_size or max(1, pane_h - GRID_CHROME)
        return cls(height, width, left_w, right_w, pane_h, page_size)
