import sqlite3

import pytest

from database import quote_ident


class DummyWin:
    """Enough of a curses window for draw calls; records written text."""

    def __init__(self, h=24, w=80, y=0, x=0):
        self._h = h
        self._w = w
        self.y = y
        self.x = x
        self.writes = []

    def getmaxyx(self):
        return self._h, self._w

    def addnstr(self, y, x, s, n, attr=0):
        self.writes.append((y, x, s[:n]))

    def derwin(self, h, w, y, x):
        child = DummyWin(h, w, self.y + y, self.x + x)
        child.writes = self.writes
        return child

    def erase(self):
        pass

    def box(self):
        pass

    def attron(self, attr):
        pass

    def attroff(self, attr):
        pass

    def text(self):
        return "\n".join(s for _, _, s in self.writes)


@pytest.fixture
def dummy_win():
    return DummyWin


@pytest.fixture
def make_sqlite(tmp_path):
    """Build a SQLite file from {table: (columns, rows)} and return its path."""

    def _make(tables, name="test.db"):
        path = tmp_path / name
        conn = sqlite3.connect(path)
        try:
            for table, (columns, rows) in tables.items():
                cols = ", ".join(quote_ident(c) for c in columns)
                conn.execute(f"CREATE TABLE {quote_ident(table)} ({cols})")
                marks = ", ".join("?" for _ in columns)
                conn.executemany(f"INSERT INTO {quote_ident(table)} VALUES ({marks})", rows)
            conn.commit()
        finally:
            conn.close()
        return str(path)

    return _make


@pytest.fixture
def users_db(make_sqlite):
    rows = [(i, f"user{i}", f"city{i % 3}") for i in range(25)]
    return make_sqlite({"users": (["id", "name", "city"], rows)})
