import threading

import pytest

from microscopy.errors import NotFound
from microscopy.models.schemas import HistoryEntry
from microscopy.session.history_store import HistoryStore

from conftest import make_result


def _entry(name="Dock-A-5"):
    return HistoryEntry(name=name, snapshot=make_result())


def test_append_is_most_recent_first():
    store = HistoryStore()
    first, second = _entry("first"), _entry("second")
    store.append(first)
    store.append(second)
    assert [e.name for e in store.list()] == ["second", "first"]
    assert len(store) == 2


def test_find_round_trip():
    store = HistoryStore()
    entry = store.append(_entry())
    assert store.find(entry.id) == entry


def test_find_missing_raises_not_found():
    store = HistoryStore()
    store.append(_entry())
    with pytest.raises(NotFound):
        store.find("nonexistent-id")


def test_listing_is_restartable_and_lazy():
    store = HistoryStore()
    listing = store.list()
    assert list(listing) == []

    entry = store.append(_entry())
    # The same listing sees appends made after it was created
    assert list(listing) == [entry]
    assert list(listing) == list(listing)
    assert len(listing) == 1


def test_duplicate_names_allowed():
    store = HistoryStore()
    a = store.append(_entry("Bay-001"))
    b = store.append(_entry("Bay-001"))
    assert a.id != b.id
    assert len(store) == 2


def test_append_rejects_non_entries():
    store = HistoryStore()
    with pytest.raises(TypeError):
        store.append({"name": "x"})
    assert len(store) == 0


def test_concurrent_appends_are_all_kept():
    store = HistoryStore()
    entries = [_entry(f"s{i}") for i in range(40)]

    def worker(chunk):
        for e in chunk:
            store.append(e)

    threads = [threading.Thread(target=worker, args=(entries[i::4],)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 40
    assert {e.id for e in store.list()} == {e.id for e in entries}
