"""Fit table columns into a fixed horizontal budget.

Columns are sized from their header and a sample of rows, accepted left to
right, and whatever space is left over is spread across the accepted columns.
If not every column fits, room is reserved at the end for a ``+N more`` marker.
"""
from dataclasses import dataclass, field

MIN_COL_WIDTH = 6
MAX_COL_WIDTH = 40
CELL_PADDING = 2


@dataclass(frozen=True)
class ColumnFit:
    display_cols: int = 0
    widths: list[int] = field(default_factory=list)
    indicator_width: int = 0
    total_cols: int = 0

    @property
    def hidden(self) -> int:
        return self.total_cols - self.display_cols


def indicator_text(hidden: int) -> str:
    return f"+{hidden} more"


def _indicator_width(hidden: int) -> int:
    if hidden <= 0:
        return 0
    return len(indicator_text(hidden)) + 1


def natural_width(
    header, values, *, min_width=MIN_COL_WIDTH, max_width=MAX_COL_WIDTH, padding=CELL_PADDING
) -> int:
    longest = len(str(header))
    for v in values:
        longest = max(longest, len(str(v)))
    return max(min_width, min(max_width, longest + padding))


def fit_columns(
    headers,
    sample_rows,
    available_width: int,
    *,
    min_width: int = MIN_COL_WIDTH,
    max_width: int = MAX_COL_WIDTH,
    padding: int = CELL_PADDING,
) -> ColumnFit:
    headers = list(headers)
    total = len(headers)
    if total == 0:
        return ColumnFit()

    available = max(1, int(available_width))
    rows = [list(r) for r in sample_rows]
    natural = []
    for idx, header in enumerate(headers):
        values = [r[idx] for r in rows if idx < len(r)]
        natural.append(
            natural_width(header, values, min_width=min_width, max_width=max_width, padding=padding)
        )

    widths: list[int] = []
    used = 0
    for idx, cw in enumerate(natural):
        reserve = _indicator_width(total - (idx + 1))
        if used + cw + reserve > available:
            break
        widths.append(cw)
        used += cw

    if not widths:
        # first column alone is too wide: shrink it into what is left
        reserve = _indicator_width(total - 1)
        if available - reserve < 1:
            reserve = 0
        widths = [max(1, min(natural[0], available - reserve))]
        used = widths[0]

    indicator = _indicator_width(total - len(widths))
    if used + indicator > available:
        indicator = 0

    spare = available - used - indicator
    if spare > 0:
        share, extra = divmod(spare, len(widths))
        widths = [w + share + (1 if i < extra else 0) for i, w in enumerate(widths)]

    return ColumnFit(len(widths), widths, indicator, total)
