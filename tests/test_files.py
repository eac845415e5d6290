import pytest

from kvstore.exceptions import CodecError, UnsupportedPathError
from kvstore.storage import files


def test_prepare_creates_directory_and_empty_file(tmp_path):
    path = tmp_path / "a" / "b" / "store.json"
    assert files.validate_and_prepare(str(path)) is False
    assert path.exists()
    assert path.read_text() == ""


def test_prepare_reports_existing_content(tmp_path):
    path = tmp_path / "store.json"
    path.write_text('{"a":1}')
    assert files.validate_and_prepare(str(path)) is True
    assert path.read_text() == '{"a":1}'


def test_prepare_treats_empty_file_as_new(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("")
    assert files.validate_and_prepare(str(path)) is False


def test_prepare_requires_directory_component():
    with pytest.raises(UnsupportedPathError):
        files.validate_and_prepare("store.json")


def test_prepare_fails_when_path_is_a_directory(tmp_path):
    target = tmp_path / "store.json"
    target.mkdir()
    with pytest.raises(OSError):
        files.validate_and_prepare(str(target))


def test_flush_overwrites_and_cleans_up(tmp_path):
    path = tmp_path / "store.json"
    path.write_text('{"old":true,"padding":"xxxxxxxxxxxx"}')
    files.flush(str(path), {"new": 1})
    assert path.read_text() == '{"new":1}'
    assert not (tmp_path / "store.json.tmp").exists()


def test_load_round_trips_flush(tmp_path):
    path = str(tmp_path / "store.json")
    files.flush(path, {"s": "x", "i": 1})
    assert files.load(path) == {"s": "x", "i": 1}


def test_load_rejects_invalid_utf8(tmp_path):
    path = tmp_path / "store.json"
    path.write_bytes(b'{"a":"\xff"}')
    with pytest.raises(CodecError):
        files.load(str(path))


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        files.load(str(tmp_path / "missing.json"))
