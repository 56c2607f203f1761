import pytest

from fula.datastore import MapDatastore, NotFoundError, QueryResult, to_datastore_key


def test_key_is_rooted():
    data = b"\x01q\x1e abc"
    assert to_datastore_key(data) == b"/" + data


def test_empty_key_is_root():
    assert to_datastore_key(b"") == b"/"


def test_key_is_cleaned():
    assert to_datastore_key(b"a//b/./c/../d") == to_datastore_key(b"/a/b/d")
    assert to_datastore_key(b"/../x") == to_datastore_key(b"x")


def test_key_already_clean_is_unchanged():
    key = to_datastore_key(b"some-link-bytes")
    assert to_datastore_key(key) == key


def test_put_get_round_trip():
    store = MapDatastore()
    key = to_datastore_key(b"block")
    store.put(key, b"payload")
    assert store.get(key) == b"payload"
    assert store.has(key) is True


def test_get_missing_raises():
    store = MapDatastore()
    with pytest.raises(NotFoundError):
        store.get(b"/missing")
    assert store.has(b"/missing") is False


def test_delete():
    store = MapDatastore()
    store.put(b"/a", b"1")
    store.delete(b"/a")
    store.delete(b"/never-there")
    assert store.has(b"/a") is False


def test_put_replaces_value():
    store = MapDatastore()
    store.put(b"/a", b"first")
    store.put(b"/a", b"second")
    assert store.get(b"/a") == b"second"


def test_query_all_in_key_order():
    store = MapDatastore()
    for key in (b"/c", b"/a", b"/b"):
        store.put(key, key * 2)
    results = list(store.query())
    assert [r.key for r in results] == sorted([b"/c", b"/a", b"/b"])
    assert all(r.value == r.key * 2 for r in results)


def test_query_keys_only_reports_size():
    store = MapDatastore()
    store.put(b"/a", b"12345")
    (result,) = store.query(keys_only=True)
    assert result == QueryResult(key=b"/a", value=None, size=len(b"12345"))


def test_query_prefix_and_limit():
    store = MapDatastore()
    for key in (b"/x1", b"/x2", b"/x3", b"/y1"):
        store.put(key, b"v")
    assert [r.key for r in store.query(prefix=b"/x")] == [b"/x1", b"/x2", b"/x3"]
    limited = list(store.query(prefix=b"/x", limit=1))
    assert [r.key for r in limited] == [b"/x1"]
    assert list(store.query(prefix=b"/z")) == []


def test_context_manager_keeps_data_readable():
    with MapDatastore() as store:
        store.put(b"/k", b"v")
        assert store.get(b"/k") == b"v"