"""An in-memory key/value datastore for blocks, keyed by link bytes."""

import threading
from dataclasses import dataclass


class NotFoundError(LookupError):
    """Raised when a key is not in the datastore."""

    def __init__(self, key=None):
        super().__init__("datastore: key not found")
        self.key = key


@dataclass(frozen=True)
class QueryResult:
    """One entry of a query; value is None for keys-only queries."""

    key: bytes
    value: bytes | None
    size: int


def _clean(path):
    parts = []
    for part in path.split(b"/"):
        if part in (b"", b"."):
            continue
        if part == b"..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return b"/" + b"/".join(parts)


def to_datastore_key(link_bytes):
    """Return the datastore key for the binary form of a link."""
    return _clean(bytes(link_bytes))


def _as_key(key):
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)


class MapDatastore:
    """Thread-safe datastore held in a dict."""

    def __init__(self):
        self._values = {}
        self._lock = threading.Lock()

    def put(self, key, value):
        """Store a value under a key, replacing any previous value."""
        with self._lock:
            self._values[_as_key(key)] = bytes(value)

    def get(self, key):
        """Return the value for a key, or raise NotFoundError."""
        key = _as_key(key)
        with self._lock:
            try:
                return self._values[key]
            except KeyError:
                raise NotFoundError(key) from None

    def has(self, key):
        """Tell whether the key is present."""
        with self._lock:
            return _as_key(key) in self._values

    def delete(self, key):
        """Remove a key; removing an absent key is not an error."""
        with self._lock:
            self._values.pop(_as_key(key), None)

    def query(self, prefix=None, keys_only=False, limit=0):
        """Yield entries in key order, filtered by prefix and capped by limit."""
        prefix = None if prefix is None else _as_key(prefix)
        with self._lock:
            entries = sorted(self._values.items())
        count = 0
        for key, value in entries:
            if limit and count >= limit:
                return
            if prefix is not None and not key.startswith(prefix):
                continue
            count += 1
            yield QueryResult(
                key=key, value=None if keys_only else value, size=len(value)
            )

    def close(self):
        """Release the datastore; nothing is held outside memory."""
        return None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False