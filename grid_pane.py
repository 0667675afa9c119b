import logging
from typing import Callable

import pandas as pd

from filter_prompt import FilterMode, FilterPrompt
from layout_fitter import ColumnFit, fit_columns, indicator_text
from messages import FetchToken, PageFailed, PageLoaded, RowSelected
from pagination import Paginator

log = logging.getLogger(__name__)

QUERY_RESULT_NAME = "query result"


def _cell(text: str, width: int) -> str:
    s = str(text).replace("\n", " ").replace("\t", " ")
    if len(s) > width - 1:
        s = s[: max(0, width - 2)] + "…" if width > 1 else s[:width]
    return s.ljust(width)[:width]


class DataGrid:
    """One table's paginated, filterable view.

    Only the current page's rows are held. Page fetches run as background
    tasks; their completions come back through apply() and are dropped unless
    they answer the most recent request for the same table and filter.
    """

    def __init__(
        self,
        keys,
        tasks,
        set_status_cb: Callable[[str, int], None],
        report_error_cb: Callable[[str], None],
        page_size: int = 20,
    ):
        self.keys = keys
        self.tasks = tasks
        self._set_status = set_status_cb
        self._report_error = report_error_cb

        self.database = None
        self.session_id = 0

        self.table_name: str | None = None
        self.columns: list[str] = []
        self.page_df = pd.DataFrame()
        self.page_size = max(1, page_size)
        self.paginator = Paginator(0, self.page_size)
        self.total_rows = 0
        self.filter = FilterPrompt()
        self.fit = ColumnFit()

        self.is_query_result = False
        self.query_text: str | None = None

        self.cursor = 0
        self.row_offset = 0
        self.width = 0
        self.height = 0

        self.loaded = False
        self.loading = False
        self.error: str | None = None

        self._seq = 0
        self._pending_page: int | None = None

    # ---------- wiring ----------
    def bind(self, database, session_id: int):
        self.database = database
        self.session_id = session_id

    def set_size(self, width: int, height: int, page_size: int | None = None):
        self.width = width
        self.height = height
        if page_size is not None and max(1, page_size) != self.page_size:
            self._change_page_size(max(1, page_size))
        self._refit()

    def _change_page_size(self, page_size: int):
        old = self.page_size
        first = self._base_page() * old
        self.page_size = page_size
        self.filter.rescale_saved_page(old, page_size)
        if self.is_query_result:
            return
        self.paginator.set_page_size(page_size)
        if len(self.page_df) > page_size:
            self.page_df = self.page_df.iloc[:page_size]
            self.cursor = min(self.cursor, page_size - 1)
        if not self.table_name:
            return
        # keep the first row of the current (or pending) page in view
        page = first // page_size
        if self.loaded:
            page = min(page, self.paginator.page_count - 1)
        self._request(page)

    def _refit(self):
        sample = self.page_df.values.tolist() if len(self.page_df) else []
        self.fit = fit_columns(self.columns, sample, max(1, self.width - 2))

    # ---------- state queries ----------
    @property
    def page(self) -> int:
        return self.paginator.page_index

    @property
    def row_count(self) -> int:
        return len(self.page_df)

    def visible_rows(self) -> list[list[str]]:
        return self.page_df.values.tolist()

    def modal_input(self) -> bool:
        return self.filter.active

    def captures_text(self) -> bool:
        return self.filter.typing

    def captures_cancel(self) -> bool:
        return self.filter.active or self.filter.applied

    # ---------- loading ----------
    def open_table(self, name: str):
        self.table_name = name
        self.is_query_result = False
        self.query_text = None
        self.columns = []
        self.page_df = pd.DataFrame()
        self.paginator = Paginator(0, self.page_size)
        self.total_rows = 0
        self.filter.clear()
        self.cursor = 0
        self.row_offset = 0
        self.loaded = False
        self.error = None
        self._refit()
        self._request(0)

    def show_query_result(self, query: str, frame: pd.DataFrame):
        self._seq += 1
        self._pending_page = None
        self.loading = False
        self.table_name = QUERY_RESULT_NAME
        self.is_query_result = True
        self.query_text = query
        self.filter.clear()
        self._install(frame, len(frame), page=0, page_size=max(1, len(frame)))
        self.total_rows = len(frame)

    def refresh(self):
        if not self.table_name:
            return
        if self.is_query_result:
            self._request(0)
            return
        if self._pending_page is not None:
            page = self._pending_page
        else:
            page = self.paginator.page_index
        self._request(page)

    def _request(self, page: int, *, cursor_end: bool = False):
        if self.database is None or not self.table_name:
            return
        column, text = self.filter.criteria()
        self._seq += 1
        page_size = self.page_size
        token = FetchToken(
            session_id=self.session_id,
            table=self.table_name,
            page=page,
            page_size=page_size,
            filter_column=column,
            filter_text=text,
            seq=self._seq,
            cursor_end=cursor_end,
        )
        self._pending_page = page
        self.loading = True

        database = self.database
        table = self.table_name
        offset = page * page_size
        if self.is_query_result:
            query = self.query_text

            def work():
                frame = database.execute_query(query)
                return frame, len(frame)

        elif column:

            def work():
                total = database.count_filtered(table, column, text)
                frame = database.fetch_filtered(table, column, text, page_size, offset)
                return frame, total

        else:

            def work():
                total = database.count_rows(table)
                frame = database.fetch_rows(table, page_size, offset)
                return frame, total

        self.tasks.submit(
            f"page {table}[{page}]",
            work,
            lambda result: PageLoaded(token, result[0], result[1]),
            lambda err: PageFailed(token, err),
        )

    def _is_current(self, token: FetchToken) -> bool:
        return (
            token.seq == self._seq
            and token.session_id == self.session_id
            and token.table == self.table_name
            and (token.filter_column, token.filter_text) == self.filter.criteria()
        )

    def apply(self, msg) -> bool:
        """Apply a page completion. Returns False if it was stale."""
        token = msg.token
        if not self._is_current(token):
            log.debug("dropping stale page completion %s", token)
            return False

        self.loading = False
        self._pending_page = None

        if isinstance(msg, PageFailed):
            if not self.loaded:
                self.error = msg.error
            self._report_error(msg.error)
            return True

        if self.is_query_result:
            self._install(msg.frame, msg.total, page=0, page_size=max(1, msg.total))
            self.total_rows = msg.total
            return True

        self._install(
            msg.frame, msg.total, page=token.page, page_size=token.page_size,
            cursor_end=token.cursor_end,
        )
        if token.filter_column:
            self.filter.filtered_total = msg.total
        else:
            self.total_rows = msg.total
        return True

    def _install(self, frame, total, *, page, page_size, cursor_end=False):
        self.page_df = frame.reset_index(drop=True)
        if len(frame.columns) or not self.columns:
            self.columns = [str(c) for c in frame.columns]
        self.paginator.page_size = max(1, page_size)
        self.paginator.update_total_rows(total)
        self.paginator.set_page(page)
        if cursor_end and len(self.page_df):
            self.cursor = len(self.page_df) - 1
        else:
            self.cursor = 0
        self.row_offset = 0
        self.loaded = True
        self.error = None
        self._refit()

    # ---------- navigation ----------
    def _base_page(self) -> int:
        if self._pending_page is not None:
            return self._pending_page
        return self.paginator.page_index

    def next_page(self) -> bool:
        if not self.loaded:
            return False
        base = self._base_page()
        if not self.paginator.has_next(base):
            return False
        self._request(base + 1)
        return True

    def prev_page(self, cursor_end: bool = False) -> bool:
        if not self.loaded:
            return False
        base = self._base_page()
        if not self.paginator.has_prev(base):
            return False
        self._request(base - 1, cursor_end=cursor_end)
        return True

    def move_cursor(self, delta: int):
        n = len(self.page_df)
        if n == 0:
            self.cursor = 0
            return
        self.cursor = max(0, min(n - 1, self.cursor + delta))

    def selected_record(self) -> RowSelected | None:
        if not len(self.page_df) or not (0 <= self.cursor < len(self.page_df)):
            return None
        values = ["" if v is None else str(v) for v in self.page_df.iloc[self.cursor].tolist()]
        return RowSelected(columns=list(self.columns), values=values)

    # ---------- input ----------
    def handle_key(self, ch):
        if self.filter.mode is FilterMode.PICK_COLUMN:
            return self._handle_pick_column(ch)
        if self.filter.mode is FilterMode.TYPE_VALUE:
            return self._handle_filter_input(ch)
        return self._handle_browse(ch)

    def _handle_browse(self, ch):
        k = self.keys
        if k.matches(ch, "confirm"):
            return self.selected_record()

        if k.matches(ch, "open_filter"):
            if self.is_query_result:
                self._set_status("Filtering is not available for query results", 3)
            elif self.loaded and self.columns:
                self.filter.start(self.columns, self._base_page())
            return None

        if k.matches(ch, "cancel"):
            if self.filter.applied:
                self._cancel_filter()
            return None

        if k.matches(ch, "next_page"):
            self.next_page()
        elif k.matches(ch, "prev_page"):
            self.prev_page()
        elif k.matches(ch, "scroll_down"):
            if self.cursor + 1 < len(self.page_df):
                self.cursor += 1
            else:
                self.next_page()
        elif k.matches(ch, "scroll_up"):
            if self.cursor > 0:
                self.cursor -= 1
            else:
                self.prev_page(cursor_end=True)
        elif k.matches(ch, "page_down"):
            self.move_cursor(self._rows_area())
        elif k.matches(ch, "page_up"):
            self.move_cursor(-self._rows_area())
        elif k.matches(ch, "top"):
            self.cursor = 0
        elif k.matches(ch, "bottom"):
            self.cursor = max(0, len(self.page_df) - 1)
        return None

    def _handle_pick_column(self, ch):
        k = self.keys
        if k.matches(ch, "cancel"):
            self._cancel_filter()
        elif k.matches(ch, "scroll_up"):
            self.filter.move(-1, self._inner_height())
        elif k.matches(ch, "scroll_down"):
            self.filter.move(1, self._inner_height())
        elif k.matches(ch, "confirm"):
            self.filter.choose()
        return None

    def _handle_filter_input(self, ch):
        result = self.filter.editor.handle_key(ch)
        if result == "cancel":
            self._cancel_filter()
        elif result == "submit":
            self.filter.commit()
        elif result == "changed":
            self.filter.apply_live()
            if self.filter.applied:
                self._request(0)
            else:
                self._request(self.filter.saved_page or 0)
        return None

    def _cancel_filter(self):
        was_applied = self.filter.applied
        page = self.filter.clear()
        if was_applied:
            self._request(page or 0)

    # ---------- rendering ----------
    def _inner_height(self) -> int:
        return max(1, self.height - 2)

    def _filter_lines(self) -> int:
        if self.filter.mode is FilterMode.PICK_COLUMN:
            return self.filter.visible_count(self._inner_height())
        if self.filter.mode is FilterMode.TYPE_VALUE:
            return 1
        return 0

    def _rows_area(self) -> int:
        return max(1, self._inner_height() - 2 - self._filter_lines())

    def status_text(self) -> str:
        if not self.table_name:
            return ""
        if self.is_query_result:
            text = f"{QUERY_RESULT_NAME} ({self.total_rows} rows)"
        else:
            pages = self.paginator.page_count
            page_info = f"page {self.paginator.page_index + 1}/{pages}"
            column, value = self.filter.criteria()
            if column:
                suffix = " (typing)" if self.filter.typing else ""
                text = (
                    f"{self.table_name} · {column}~\"{value}\" · "
                    f"{self.filter.filtered_total} matches{suffix} · {page_info}"
                )
            else:
                text = f"{self.table_name} · {page_info} · {self.total_rows} rows"
        if self.loading:
            text += " · loading…"
        return text

    def draw(self, win, ctx, focused=False):
        ctx.clear(win)
        h, w = win.getmaxyx()

        if not self.loaded:
            if self.error:
                ctx.text(win, 0, 0, self.table_name or "", w, "title")
                ctx.text(win, 2, 0, f"Error: {self.error}", w, "error")
            else:
                label = f"Loading {self.table_name}…" if self.table_name else "← Select a table"
                ctx.text(win, h // 2, max(0, (w - len(label)) // 2), label, w, "dim")
            return

        if not self.columns:
            ctx.text(win, h // 2, 0, "No columns returned", w, "dim")
            return

        # header
        x = 0
        for idx in range(self.fit.display_cols):
            cw = self.fit.widths[idx]
            ctx.text(win, 0, x, _cell(self.columns[idx], cw), cw, "header")
            x += cw
        if self.fit.hidden > 0 and self.fit.indicator_width:
            # indicator_width includes the separating space
            ctx.text(win, 0, x + 1, indicator_text(self.fit.hidden), self.fit.indicator_width - 1, "dim")
        ctx.text(win, 1, 0, "─" * w, w, "dim")

        rows_area = self._rows_area()
        n = len(self.page_df)
        if n == 0:
            empty = "No matching rows" if self.filter.applied else "No rows in this table"
            ctx.text(win, 2 + rows_area // 2, max(0, (w - len(empty)) // 2), empty, w, "dim")
        else:
            self.cursor = max(0, min(self.cursor, n - 1))
            if self.cursor < self.row_offset:
                self.row_offset = self.cursor
            elif self.cursor >= self.row_offset + rows_area:
                self.row_offset = self.cursor - rows_area + 1
            self.row_offset = max(0, min(self.row_offset, max(0, n - rows_area)))

            rows = self.page_df.values.tolist()
            for i, row in enumerate(rows[self.row_offset : self.row_offset + rows_area]):
                y = 2 + i
                selected = self.row_offset + i == self.cursor
                style = "selected" if selected and focused else None
                line = ""
                for idx in range(self.fit.display_cols):
                    line += _cell(row[idx] if idx < len(row) else "", self.fit.widths[idx])
                ctx.text(win, y, 0, line.ljust(w) if selected else line, w, style)

        self._draw_filter(win, ctx, h, w)

    def _draw_filter(self, win, ctx, h, w):
        mode = self.filter.mode
        if mode is FilterMode.PICK_COLUMN:
            visible = self.filter.visible_count(self._inner_height())
            top = h - visible
            start = self.filter.col_scroll
            for i, name in enumerate(self.filter.columns[start : start + visible]):
                if start + i == self.filter.col_index:
                    ctx.text(win, top + i, 0, "▸ " + name, w, "title")
                else:
                    ctx.text(win, top + i, 0, "  " + name, w, "dim")
        elif mode is FilterMode.TYPE_VALUE:
            prompt = f"{self.filter.column}: "
            visible, _ = self.filter.editor.visible_text(w - len(prompt) - 1)
            ctx.text(win, h - 1, 0, prompt, w, "label")
            ctx.text(win, h - 1, len(prompt), visible, w - len(prompt))

    def cursor_position(self, win_h: int) -> tuple[int, int] | None:
        """Screen offset of the text cursor inside the pane, when typing."""
        if self.filter.mode is not FilterMode.TYPE_VALUE:
            return None
        prompt = f"{self.filter.column}: "
        text_w = max(1, self.width - 2 - len(prompt) - 1)
        _, col = self.filter.editor.visible_text(text_w)
        return win_h - 1, len(prompt) + col
