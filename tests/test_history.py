import json

import pytest

from csvjson.errors import DuplicateEntryError, EntryNotFoundError, InvalidInputError
from csvjson.history import HistoryStore
from csvjson.models import HistoryEntry
from csvjson.session import ConverterSession
from csvjson.storage import FileStorage, MemoryClipboard, MemoryStorage


def entry(csv, records, name=""):
    return HistoryEntry(name=name, csv=csv, json=records)


@pytest.fixture
def store():
    s = HistoryStore(MemoryStorage())
    s.load()
    return s


def persisted(store):
    return json.loads(store.storage.read())


def test_load_missing_is_empty(store):
    assert store.entries == []


@pytest.mark.parametrize("raw", ["{not json", '{"id": 1}', '[{"csv": 3}]'])
def test_load_corrupt_is_empty(raw):
    s = HistoryStore(MemoryStorage(raw))
    assert s.load() == []


def test_load_non_utf8_file_is_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    s = HistoryStore(FileStorage(path))
    assert s.load() == []

    a = entry("h\n1", [{"h": "1"}])
    s.append(a)
    assert HistoryStore(FileStorage(path)).load() == [a]


def test_append_and_search_all_in_order(store):
    a = entry("h\n1", [{"h": "1"}])
    b = entry("h\n2", [{"h": "2"}])
    store.append(a)
    store.append(b)
    assert [e.id for e in store.search("")] == [a.id, b.id]
    assert [e["id"] for e in persisted(store)] == [a.id, b.id]


def test_ids_are_unique(store):
    a = entry("h\n1", [{"h": "1"}])
    assert a.id != entry("h\n1", [{"h": "1"}]).id
    store.append(a)
    with pytest.raises(DuplicateEntryError):
        store.append(a)


def test_search_fields(store):
    named = entry("x\n1", [{"x": "1"}], name="Quarterly")
    by_csv = entry("Region\nNorth", [{"region": "North"}])
    by_json = entry("k\nv", [{"k": "v"}])
    for e in (named, by_csv, by_json):
        store.append(e)

    assert store.search("quarter") == [named]
    assert store.search("NORTH") == [by_csv]
    # compact serialization: no space after the colon
    assert store.search('"k":"v"') == [by_json]
    assert store.search("absent") == []


def test_rename_keeps_csv_and_json(store):
    a = entry("h\n1", [{"h": "1"}])
    store.append(a)
    writes = store.storage.writes

    store.rename(a.id, "renamed")

    renamed = store.get(a.id)
    assert renamed.name == "renamed"
    assert renamed.csv == a.csv
    assert renamed.records == a.records
    assert store.storage.writes == writes + 1
    assert persisted(store)[0]["name"] == "renamed"


def test_rename_and_remove_unknown_are_noops(store):
    a = entry("h\n1", [{"h": "1"}])
    store.append(a)
    store.rename("missing", "x")
    store.remove("missing")
    assert store.entries == [a]


def test_remove(store):
    a = entry("h\n1", [{"h": "1"}])
    b = entry("h\n2", [{"h": "2"}])
    store.append(a)
    store.append(b)
    store.remove(a.id)
    assert a.id not in [e.id for e in store.search("")]
    assert [e["id"] for e in persisted(store)] == [b.id]


def test_export_text(store):
    store.append(entry("h\n1", [{"h": "1"}], name="one"))
    exported = json.loads(store.export_text())
    assert exported[0]["name"] == "one"
    assert exported[0]["json"] == [{"h": "1"}]
    assert store.export_text().startswith("[\n  {")


def test_file_storage_round_trip(tmp_path):
    path = tmp_path / "nested" / "history.json"
    s = HistoryStore(FileStorage(path))
    s.load()
    a = entry("h\n1", [{"h": "1"}], name="kept")
    s.append(a)

    reloaded = HistoryStore(FileStorage(path))
    assert reloaded.load() == [a]
    assert [p.name for p in path.parent.iterdir()] == ["history.json"]


def test_session_convert_and_copy():
    store = HistoryStore(MemoryStorage())
    clipboard = MemoryClipboard()
    session = ConverterSession(store, clipboard)

    result = session.convert("h1,h2\na,b")
    assert clipboard.text == session.json_text == result.json_text
    assert store.entries == [result.entry]

    assert session.copy_csv(result.entry.id) == "h1,h2\na,b"
    assert clipboard.text == "h1,h2\na,b"
    assert json.loads(session.copy_json(result.entry.id)) == [{"h1": "a", "h2": "b"}]

    with pytest.raises(EntryNotFoundError):
        session.copy_csv("missing")


def test_session_input_error_flag():
    session = ConverterSession(HistoryStore(MemoryStorage()), MemoryClipboard())
    with pytest.raises(InvalidInputError):
        session.convert("h1")
    assert session.input_error is True
    assert session.store.entries == []

    session.dismiss_error()
    assert session.input_error is False


def test_session_search_term():
    session = ConverterSession(HistoryStore(MemoryStorage()), MemoryClipboard())
    first = session.convert("a\napple").entry
    session.convert("a\npear")
    session.search_term = "APP"
    assert session.visible_history() == [first]
    assert len(session.visible_history("")) == 2


def test_session_skip_blank_lines():
    session = ConverterSession(HistoryStore(MemoryStorage()), MemoryClipboard(), skip_blank_lines=True)
    assert session.convert("a,b\n\nc,d").records == [{"a": "c", "b": "d"}]
