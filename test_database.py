import pytest

from database import Database, QueryError, SourceError, quote_ident


@pytest.fixture
def db(make_sqlite):
    path = make_sqlite(
        {
            "people": (
                ["id", "name", "note"],
                [(1, "Anna", None), (2, "Bob", b"\xffraw"), (3, "Anthony", "50%_off")],
            ),
            "empty": (["a"], []),
        }
    )
    database = Database.open(path)
    yield database
    database.close()


def test_list_tables_sorted(db):
    assert db.list_tables() == ["empty", "people"]


def test_fetch_renders_text_null_and_blobs(db):
    frame = db.fetch_rows("people", 10, 0)
    assert list(frame.columns) == ["id", "name", "note"]
    assert frame.dtypes.tolist() == [object, object, object]
    assert frame.iloc[0].tolist() == ["1", "Anna", "NULL"]
    assert frame.iloc[1, 2].endswith("raw")
    assert "�" in frame.iloc[1, 2]


def test_paging_with_limit_offset(db):
    frame = db.fetch_rows("people", 2, 1)
    assert frame["name"].tolist() == ["Bob", "Anthony"]
    assert db.count_rows("people") == 3


def test_empty_table_keeps_columns(db):
    frame = db.fetch_rows("empty", 10, 0)
    assert len(frame) == 0
    assert list(frame.columns) == ["a"]


def test_filter_is_case_insensitive_substring(db):
    frame = db.fetch_filtered("people", "name", "an", 10, 0)
    assert frame["name"].tolist() == ["Anna", "Anthony"]
    assert db.count_filtered("people", "name", "an") == 2


def test_filter_treats_wildcards_literally(db):
    assert db.count_filtered("people", "note", "%") == 1
    assert db.count_filtered("people", "note", "0%_") == 1
    assert db.count_filtered("people", "name", "_") == 0


def test_execute_query(db):
    frame = db.execute_query("SELECT name, id * 2 AS doubled FROM people ORDER BY id")
    assert list(frame.columns) == ["name", "doubled"]
    assert frame["doubled"].tolist() == ["2", "4", "6"]


def test_bad_query_raises_query_error(db):
    with pytest.raises(QueryError):
        db.execute_query("SELEC nope")
    with pytest.raises(QueryError):
        db.count_rows("missing")


def test_database_is_read_only(db):
    with pytest.raises(QueryError):
        db.execute_query("DELETE FROM people")
    assert db.count_rows("people") == 3


def test_not_a_database_fails_on_list(tmp_path):
    path = tmp_path / "junk.db"
    path.write_bytes(b"this is not a sqlite file at all" * 10)
    database = Database.open(str(path))
    try:
        with pytest.raises(SourceError):
            database.list_tables()
    finally:
        database.close()


def test_missing_file_cannot_be_opened(tmp_path):
    with pytest.raises(SourceError):
        Database.open(str(tmp_path / "absent.db"))


def test_quote_ident_escapes_quotes(make_sqlite):
    path = make_sqlite({'we"ird': (["x"], [(1,)])})
    database = Database.open(path)
    try:
        assert quote_ident('we"ird') == '"we""ird"'
        assert database.count_rows('we"ird') == 1
    finally:
        database.close()


def test_close_is_idempotent(make_sqlite):
    database = Database.open(make_sqlite({"t": (["x"], [])}))
    database.close()
    database.close()
    assert database.closed
    with pytest.raises(SourceError):
        database.list_tables()
