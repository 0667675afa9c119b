import curses
import unittest

import pandas as pd

from database import QueryError
from keys import KeyMap
from messages import QueryFailed, QueryFinished
from query_prompt import QueryPrompt
from task_runner import TaskRunner

CTRL_R = 18


class FakeDatabase:
    def __init__(self, fail=None):
        self.fail = fail
        self.queries = []

    def execute_query(self, text):
        self.queries.append(text)
        if self.fail:
            raise QueryError(self.fail)
        return pd.DataFrame([["1"]], columns=["x"], dtype=object)


class QueryPromptEditingTests(unittest.TestCase):
    def setUp(self):
        self.prompt = QueryPrompt(KeyMap(), TaskRunner(synchronous=True), FakeDatabase(), 1, 120, 40)

    def type(self, text):
        for ch in text:
            self.prompt.handle_key(10 if ch == "\n" else ord(ch))

    def test_multi_line_insert(self):
        self.type("select *\nfrom t")
        self.assertEqual(self.prompt.get_text(), "select *\nfrom t")
        self.assertEqual((self.prompt.row, self.prompt.col), (1, 6))

    def test_backspace_joins_lines(self):
        self.type("ab\ncd")
        self.prompt.handle_key(curses.KEY_HOME)
        self.prompt.handle_key(curses.KEY_BACKSPACE)
        self.assertEqual(self.prompt.lines, ["abcd"])
        self.assertEqual(self.prompt.col, 2)

    def test_arrows_cross_line_ends(self):
        self.type("ab\ncd")
        self.prompt.handle_key(curses.KEY_HOME)
        self.prompt.handle_key(curses.KEY_LEFT)
        self.assertEqual((self.prompt.row, self.prompt.col), (0, 2))
        self.prompt.handle_key(curses.KEY_RIGHT)
        self.assertEqual((self.prompt.row, self.prompt.col), (1, 0))
        self.prompt.handle_key(curses.KEY_END)
        self.prompt.handle_key(curses.KEY_UP)
        self.assertEqual((self.prompt.row, self.prompt.col), (0, 2))

    def test_delete_joins_next_line(self):
        self.type("a\nb")
        self.prompt.handle_key(curses.KEY_UP)
        self.prompt.handle_key(curses.KEY_END)
        self.prompt.handle_key(curses.KEY_DC)
        self.assertEqual(self.prompt.lines, ["ab"])

    def test_escape_closes(self):
        self.assertEqual(self.prompt.handle_key(27), "close")

    def test_rebound_cancel_closes(self):
        prompt = QueryPrompt(KeyMap({"cancel": ["ctrl+q"]}), TaskRunner(synchronous=True), FakeDatabase(), 1, 120, 40)
        self.assertIsNone(prompt.handle_key(27))
        self.assertEqual(prompt.handle_key(17), "close")

    def test_popup_minimum_size(self):
        small = QueryPrompt(KeyMap(), TaskRunner(synchronous=True), FakeDatabase(), 1, 60, 20)
        self.assertEqual((small.width, small.height), (50, 12))


class QueryPromptRunTests(unittest.TestCase):
    def test_run_posts_finished_message(self):
        runner = TaskRunner(synchronous=True)
        db = FakeDatabase()
        prompt = QueryPrompt(KeyMap(), runner, db, 7, 120, 40)
        prompt.set_text("select 1 as x")
        prompt.handle_key(CTRL_R)
        self.assertTrue(prompt.running)
        (msg,) = runner.drain()
        self.assertIsInstance(msg, QueryFinished)
        self.assertEqual(msg.session_id, 7)
        self.assertEqual(msg.query, "select 1 as x")

    def test_failure_message_and_error_keeps_text(self):
        runner = TaskRunner(synchronous=True)
        prompt = QueryPrompt(KeyMap(), runner, FakeDatabase(fail='near "selec": syntax error'), 1, 120, 40)
        prompt.set_text("selec 1")
        prompt.handle_key(CTRL_R)
        (msg,) = runner.drain()
        self.assertIsInstance(msg, QueryFailed)
        prompt.set_error(msg.error)
        self.assertFalse(prompt.running)
        self.assertIn("syntax error", prompt.error)
        self.assertEqual(prompt.get_text(), "selec 1")

    def test_empty_and_repeated_runs_are_ignored(self):
        runner = TaskRunner(synchronous=True)
        db = FakeDatabase()
        prompt = QueryPrompt(KeyMap(), runner, db, 1, 120, 40)
        self.assertFalse(prompt.run())
        prompt.set_text("select 1")
        self.assertTrue(prompt.run())
        self.assertFalse(prompt.run())
        self.assertEqual(db.queries, ["select 1"])


if __name__ == "__main__":
    unittest.main()
