import curses
import logging

from app_controller import RootController
from app_state import Focus
from render_context import RenderContext
from status_bar import render_status

log = logging.getLogger(__name__)


class Orchestrator:
    """Curses event loop: read a key, apply finished tasks, repaint."""

    def __init__(self, stdscr, controller: RootController):
        self.stdscr = stdscr
        self.controller = controller
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)
        self.stdscr.keypad(True)
        self.ctx = RenderContext.create()
        self._resize()

    def _resize(self):
        h, w = self.stdscr.getmaxyx()
        self.controller.resize(h, w)

    # ---------------- UI ----------------

    def redraw(self):
        c = self.controller
        scr = self.stdscr
        self.ctx.clear(scr)
        cursor = None

        if not c.session.is_open:
            c.picker.draw(scr, self.ctx)
            cursor = c.picker.cursor_position()
        else:
            cursor = self._draw_panes()

        layout = c.layout
        status = render_status(c.status_context(), max(1, layout.W - 1))
        self.ctx.text(scr, layout.status_y, 0, status, layout.W - 1, "status")

        if c.modal is not None:
            c.modal.draw(scr, self.ctx)
            cursor = c.modal.cursor_position() if hasattr(c.modal, "cursor_position") else None

        try:
            if cursor is not None:
                curses.curs_set(1)
                scr.move(*cursor)
            else:
                curses.curs_set(0)
        except curses.error:
            pass
        scr.refresh()

    def _draw_panes(self):
        c = self.controller
        layout = c.layout
        scr = self.stdscr
        title = "sqlpeek"
        if c.session.path:
            title += f" · {c.session.path}"
        self.ctx.text(scr, 0, layout.left_x, title, layout.W - layout.left_x, "title")

        cursor = None
        grid_focused = c.session.focus is Focus.GRID

        left = self.ctx.panel(scr, layout.top, layout.left_x, layout.pane_h, layout.left_w)
        if left is not None:
            self.ctx.box(left, "unfocused_border" if grid_focused else "focused_border")
            inner = self.ctx.panel(left, 1, 1, layout.pane_h - 2, layout.left_w - 2)
            if inner is not None:
                c.tables.draw(inner, self.ctx, focused=not grid_focused)
                pos = c.tables.cursor_position(inner.getmaxyx()[0])
                if pos is not None and not grid_focused:
                    cursor = (layout.top + 1 + pos[0], layout.left_x + 1 + pos[1])

        right = self.ctx.panel(scr, layout.top, layout.right_x, layout.pane_h, layout.right_w)
        if right is not None:
            self.ctx.box(right, "focused_border" if grid_focused else "unfocused_border")
            inner = self.ctx.panel(right, 1, 1, layout.pane_h - 2, layout.right_w - 2)
            if inner is not None:
                c.grid.draw(inner, self.ctx, focused=grid_focused)
                pos = c.grid.cursor_position(inner.getmaxyx()[0])
                if pos is not None and grid_focused:
                    cursor = (layout.top + 1 + pos[0], layout.right_x + 1 + pos[1])
        return cursor

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        try:
            while not self.controller.quit_requested:
                ch = self.stdscr.getch()

                if ch == curses.KEY_RESIZE:
                    self._resize()
                else:
                    self.controller.handle_key(ch)

                self.controller.process_pending()

                if self.controller.quit_requested:
                    break
                self.redraw()
        finally:
            self.controller.shutdown()
