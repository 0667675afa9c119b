"""Events passed between components and the completion messages posted by
background tasks. Every completion carries the context it was issued for so
the receiver can drop it when that context is gone."""
from dataclasses import dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class TableItem:
    name: str


# ---------- UI events ----------
@dataclass(frozen=True)
class TableSelected:
    name: str


@dataclass(frozen=True)
class RowSelected:
    columns: list[str]
    values: list[str]


@dataclass(frozen=True)
class OpenRequested:
    path: str


# ---------- completions ----------
@dataclass(frozen=True)
class FetchToken:
    session_id: int
    table: str
    page: int
    page_size: int
    filter_column: str | None
    filter_text: str | None
    seq: int
    cursor_end: bool = False


@dataclass
class SourceOpened:
    path: str
    database: Any
    tables: list[str]


@dataclass
class SourceFailed:
    path: str
    error: str


@dataclass
class TablesLoaded:
    session_id: int
    tables: list[str]


@dataclass
class TablesFailed:
    session_id: int
    error: str


@dataclass
class PageLoaded:
    token: FetchToken
    frame: pd.DataFrame
    total: int


@dataclass
class PageFailed:
    token: FetchToken
    error: str


@dataclass
class QueryFinished:
    session_id: int
    query: str
    frame: pd.DataFrame


@dataclass
class QueryFailed:
    session_id: int
    query: str
    error: str
