import curses


class LineEditor:
    """Single-line text buffer with emacs-style editing keys.

    handle_key returns "submit" on Enter, "cancel" on Esc, "changed" when the
    text was edited, and None otherwise.
    """

    def __init__(self, text: str = ""):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.set_buffer(text)

    # ---------- state helpers ----------
    def reset(self):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def get_buffer(self):
        return self.buffer

    def set_buffer(self, text):
        self.buffer = text or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    # ---------- word helpers ----------
    @staticmethod
    def _is_word_char(ch):
        return ch.isalnum() or ch == "_"

    def _word_boundary_left(self):
        i = self.cursor
        while i > 0 and not self._is_word_char(self.buffer[i - 1]):
            i -= 1
        while i > 0 and self._is_word_char(self.buffer[i - 1]):
            i -= 1
        return i

    # ---------- input handling ----------
    def handle_key(self, ch):
        if ch in (10, 13, curses.KEY_ENTER):
            return "submit"

        if ch == 27:  # Esc
            return "cancel"

        if ch == 23:  # Ctrl+W, delete word backward
            start = self._word_boundary_left()
            if start < self.cursor:
                self.buffer = self.buffer[:start] + self.buffer[self.cursor :]
                self.cursor = start
                return "changed"
            return None

        if ch == 21:  # Ctrl+U, kill to line start
            if self.cursor > 0:
                self.buffer = self.buffer[self.cursor :]
                self.cursor = 0
                return "changed"
            return None

        if ch == 11:  # Ctrl+K, kill to line end
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor]
                return "changed"
            return None

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
                return "changed"
            return None

        if ch in (curses.KEY_DC, 4):  # Delete or Ctrl+D
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
                return "changed"
            return None

        if ch in (curses.KEY_LEFT, 2):  # Left or Ctrl+B
            self.cursor = max(0, self.cursor - 1)
            return None

        if ch in (curses.KEY_RIGHT, 6):  # Right or Ctrl+F
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None

        if ch in (curses.KEY_HOME, 1):  # Home or Ctrl+A
            self.cursor = 0
            return None

        if ch in (curses.KEY_END, 5):  # End or Ctrl+E
            self.cursor = len(self.buffer)
            return None

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            return "changed"

        return None

    # ---------- rendering ----------
    def visible_text(self, text_w: int) -> tuple[str, int]:
        """Return the visible slice and the cursor column within it."""
        text_w = max(1, text_w)
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w - 1:
            self.hscroll = self.cursor - text_w + 1

        start = self.hscroll
        return self.buffer[start : start + text_w], self.cursor - self.hscroll
