import curses
import unittest

from line_editor import LineEditor


class LineEditorEmacsKeysTests(unittest.TestCase):
    def test_insert_and_results(self):
        ed = LineEditor()
        self.assertEqual(ed.handle_key(ord("a")), "changed")
        self.assertEqual(ed.handle_key(curses.KEY_LEFT), None)
        self.assertEqual(ed.handle_key(ord("b")), "changed")
        self.assertEqual(ed.get_buffer(), "ba")
        self.assertEqual(ed.handle_key(10), "submit")
        self.assertEqual(ed.handle_key(27), "cancel")

    def test_ctrl_w_deletes_previous_word(self):
        ed = LineEditor("select name from")
        ed.handle_key(23)
        self.assertEqual(ed.get_buffer(), "select name ")

    def test_ctrl_u_and_ctrl_k(self):
        ed = LineEditor("hello world")
        ed.cursor = 5
        ed.handle_key(11)
        self.assertEqual(ed.get_buffer(), "hello")
        ed.handle_key(21)
        self.assertEqual(ed.get_buffer(), "")
        self.assertIsNone(ed.handle_key(21))

    def test_backspace_at_start_is_not_a_change(self):
        ed = LineEditor("x")
        ed.handle_key(1)
        self.assertIsNone(ed.handle_key(127))
        self.assertEqual(ed.handle_key(4), "changed")
        self.assertEqual(ed.get_buffer(), "")

    def test_visible_text_scrolls_with_cursor(self):
        ed = LineEditor("abcdefghij")
        text, col = ed.visible_text(5)
        self.assertEqual(text, "ghij")
        self.assertEqual(col, 4)
        ed.handle_key(curses.KEY_HOME)
        text, col = ed.visible_text(5)
        self.assertEqual(text, "abcde")
        self.assertEqual(col, 0)


if __name__ == "__main__":
    unittest.main()
