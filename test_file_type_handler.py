import pytest

from file_type_handler import FileTypeHandler


@pytest.mark.parametrize(
    "name, ok",
    [("a.db", True), ("a.sqlite", True), ("a.SQLite3", True), ("a.csv", False), ("db", False)],
)
def test_is_supported_name(name, ok):
    assert FileTypeHandler.is_supported_name(name) is ok


def test_validate_accepts_existing_db(tmp_path):
    path = tmp_path / "x.sqlite3"
    path.write_bytes(b"")
    assert FileTypeHandler(str(path)).validate() is None


def test_validate_messages(tmp_path):
    (tmp_path / "noext").write_text("")
    assert FileTypeHandler(str(tmp_path / "nope.db")).validate().startswith("file not found")
    assert "directory" in FileTypeHandler(str(tmp_path)).validate()
    msg = FileTypeHandler(str(tmp_path / "noext")).validate()
    assert msg == "unsupported file extension (none) (expected .db, .sqlite, or .sqlite3)"


def test_discover_skips_directories(tmp_path):
    (tmp_path / "folder.db").mkdir()
    (tmp_path / "real.db").write_bytes(b"")
    assert FileTypeHandler.discover(str(tmp_path)) == [str(tmp_path / "real.db")]


def test_discover_missing_directory_is_empty(tmp_path):
    assert FileTypeHandler.discover(str(tmp_path / "gone")) == []
