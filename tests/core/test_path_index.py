import pytest

from patchspace.core.models import FileRecord
from patchspace.core.path_index import PathIndex

def test_set_get_has():
    index = PathIndex()
    record = FileRecord(path="src/a.js", content="a")
    index.set("src/a.js", record)
    assert index.has("src/a.js")
    assert index.get("src/a.js") is record
    assert index.get("missing.js") is None
    assert not index.has("missing.js")

def test_set_replaces_existing_record():
    index = PathIndex()
    index.set("a.txt", FileRecord(path="a.txt", content="old"))
    index.set("a.txt", FileRecord(path="a.txt", content="new"))
    assert len(index) == 1
    assert index.get("a.txt").content == "new"

def test_empty_path_rejected():
    with pytest.raises(ValueError):
        PathIndex().set("", FileRecord(path="x"))

def test_entries_exhaustive_snapshot():
    index = PathIndex()
    for path in ["b.txt", "a/c.txt", "a/d.txt"]:
        index.set(path, FileRecord(path=path))
    entries = index.entries()
    assert sorted(path for path, _ in entries) == ["a/c.txt", "a/d.txt", "b.txt"]
    # Mutating while walking a snapshot is safe
    for path, _ in entries:
        index.set(path + ".bak", FileRecord(path=path + ".bak"))
    assert len(index) == 6

def test_clear():
    index = PathIndex()
    index.set("a.txt", FileRecord(path="a.txt"))
    index.clear()
    assert len(index) == 0
    assert index.entries() == []

def test_record_name_follows_path():
    record = FileRecord(path="src/components/App.jsx")
    assert record.name == "App.jsx"
    record.path = "README"
    assert record.name == "README"
