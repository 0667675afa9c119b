import logging
import sqlite3
import threading
from pathlib import Path

import pandas as pd


log = logging.getLogger(__name__)

NULL_TEXT = "NULL"


class SourceError(Exception):
    """The data source could not be opened or read."""


class QueryError(Exception):
    """A query, filter or page fetch failed."""


def quote_ident(name: str) -> str:
    return '"' + str(name).replace('"', '""') + '"'


def _render_cell(value) -> str:
    if value is None:
        return NULL_TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class Database:
    """Read-only access to one SQLite file.

    Every method may be called from a worker thread; calls are serialized on a
    lock. Result rows come back as an object-dtype DataFrame of strings.
    """

    def __init__(self, path: str, conn: sqlite3.Connection):
        self.path = path
        self._conn = conn
        self._lock = threading.Lock()
        self.closed = False

    @classmethod
    def open(cls, path: str) -> "Database":
        try:
            uri = Path(path).resolve().as_uri() + "?mode=ro"
            conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        except sqlite3.Error as exc:
            raise SourceError(str(exc)) from exc
        log.info("opened %s", path)
        return cls(path, conn)

    def close(self):
        if self.closed:
            return
        with self._lock:
            self._conn.close()
            self.closed = True
        log.info("closed %s", self.path)

    # ---------- queries ----------
    def _run(self, sql: str, params=()) -> pd.DataFrame:
        with self._lock:
            try:
                cur = self._conn.execute(sql, params)
                columns = [d[0] for d in cur.description or ()]
                records = cur.fetchall() if columns else []
            except (sqlite3.Error, ValueError) as exc:
                raise QueryError(str(exc)) from exc
        rows = [[_render_cell(v) for v in rec] for rec in records]
        return pd.DataFrame(rows, columns=pd.Index(columns, dtype=object), dtype=object)

    def _scalar(self, sql: str, params=()) -> int:
        with self._lock:
            try:
                row = self._conn.execute(sql, params).fetchone()
            except sqlite3.Error as exc:
                raise QueryError(str(exc)) from exc
        return int(row[0]) if row else 0

    def list_tables(self) -> list[str]:
        sql = "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        try:
            frame = self._run(sql)
        except QueryError as exc:
            # a file that is not a database fails here, not on connect
            raise SourceError(str(exc)) from exc
        return [str(name) for name in frame.iloc[:, 0]] if len(frame) else []

    def count_rows(self, table: str) -> int:
        return self._scalar(f"SELECT COUNT(*) FROM {quote_ident(table)}")

    def fetch_rows(self, table: str, limit: int, offset: int) -> pd.DataFrame:
        sql = f"SELECT * FROM {quote_ident(table)} LIMIT ? OFFSET ?"
        return self._run(sql, (limit, offset))

    def count_filtered(self, table: str, column: str, text: str) -> int:
        sql = (
            f"SELECT COUNT(*) FROM {quote_ident(table)} "
            f"WHERE {quote_ident(column)} LIKE ? ESCAPE '\\' COLLATE NOCASE"
        )
        return self._scalar(sql, (_like_pattern(text),))

    def fetch_filtered(
        self, table: str, column: str, text: str, limit: int, offset: int
    ) -> pd.DataFrame:
        sql = (
            f"SELECT * FROM {quote_ident(table)} "
            f"WHERE {quote_ident(column)} LIKE ? ESCAPE '\\' COLLATE NOCASE "
            "LIMIT ? OFFSET ?"
        )
        return self._run(sql, (_like_pattern(text), limit, offset))

    def execute_query(self, text: str) -> pd.DataFrame:
        return self._run(text)
