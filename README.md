# fula

Building blocks for a node that takes part in a storage pool: settings for
the node and its chain client, a small file-based key store, an in-memory
block datastore, CID and multihash helpers, tracking of blocks written to
disk, and a WSGI application that answers a subset of the IPFS RPC API from
the datastore.

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | What it holds |
| --- | --- |
| `fula.bigint` | `encode_big_int` / `decode_big_int`: arbitrary-size integers written as bare JSON numbers |
| `fula.chain_options` | `BlockchainOptions` with the chain client defaults, `default_update_pool_name`, `default_get_pool_name` |
| `fula.blox_options` | `BloxOptions` for a node, and `clean_path` |
| `fula.keystore` | `SimpleKeyStorer`, which keeps one secret seed in a file |
| `fula.datastore` | `MapDatastore`, `QueryResult`, `NotFoundError`, `to_datastore_key` |
| `fula.cid` | `Cid`, `multihash_encode` and helpers turning block file names into CIDs |
| `fula.tracking` | `BlockTracker`, which finds blocks stored since the last check |
| `fula.rpc` | `IpfsRpcApp`, a WSGI application serving IPFS-style RPC endpoints |

## Big integers

Amounts that may exceed 64 bits are written into JSON bodies as bare
decimal numbers:

```python
from fula.bigint import decode_big_int, encode_big_int

text = encode_big_int(10**30)
assert decode_big_int(text) == 10**30
assert decode_big_int("null") is None
```

`encode_big_int` raises `TypeError` for anything that is not an `int`
(booleans included). `decode_big_int` accepts `str` or `bytes`, returns
`None` for `null` and raises `ValueError` for text that is not a base-10
integer.

## Settings

`BlockchainOptions` is a dataclass holding the chain client settings:
authorizer, authorized peers, endpoint, secrets path, timeout (30 seconds),
minimum ping success count (7), maximum ping time (900 ms), topic name
(`"0"`), relays, pool-name callbacks, fetch frequency (one hour) and
optional IPFS client handles. An empty `blockchain_endpoint` falls back to
the default endpoint. `default_get_pool_name()` returns `"0"` and
`default_update_pool_name(name)` does nothing.

`BloxOptions` holds the settings of a node. The pool `name` is required and
a missing one raises `ValueError`. After construction:

- a `ping_count` of zero or less becomes 5, with a warning logged;
- an empty `topic_name` becomes `clean_path(name)`;
- a missing `datastore` becomes a new `MapDatastore`;
- an empty `blockchain_endpoint` becomes the default endpoint;
- an empty `authorizer` becomes `peer_id`.

```python
from fula.blox_options import BloxOptions, clean_path

options = BloxOptions(name="pools/./1/", peer_id="peer-a")
assert options.topic_name == "pools/1"
assert options.ping_count == 5
assert options.authorizer == "peer-a"
assert clean_path("/a/../b//c/.") == "/b/c"
```

## Keeping the secret seed

```python
from fula.keystore import SimpleKeyStorer

store = SimpleKeyStorer("/tmp/node-secrets")
store.save_key("secret")
assert store.load_key() == "secret"
```

The seed is written to `secret_seed.txt` in the chosen directory with mode
0600. An empty directory name selects `/internal/.secrets`; if the
directory cannot be created, the `SECRETS_DIR` environment variable or the
current directory is used instead. Surrounding whitespace is stripped on
load; loading a missing seed raises `FileNotFoundError`.

## Datastore and CIDs

`MapDatastore` keeps block bytes in memory under keys produced by
`to_datastore_key`, which takes the binary form of a link:

```python
from fula.cid import Cid
from fula.datastore import MapDatastore, NotFoundError, to_datastore_key

cid = Cid.decode("bafyr4iauqnsshryxfg2262z6mqev5fyef7gmgjk54skmtggnplehusyno4")
key = to_datastore_key(cid.to_bytes())

with MapDatastore() as store:
    store.put(key, b"block bytes")
    assert store.has(key)
    assert store.get(key) == b"block bytes"

    store.delete(key)
    try:
        store.get(key)
    except NotFoundError:
        pass
```

`MapDatastore.query(prefix=None, keys_only=False, limit=0)` yields
`QueryResult` entries (`key`, `value`, `size`) in key order, optionally
limited to a key prefix and a maximum count; `value` is `None` for
keys-only queries.

`Cid` is a frozen dataclass of `version`, `codec` and `multihash`.
`Cid.decode` reads base58 v0 CIDs and multibase v1 CIDs, `Cid.from_bytes`
reads the binary form, and `to_bytes` / `encode` write them back (v1 as
lower-case base32). Invalid input raises `ValueError`.

Blocks on disk are named after the upper-case base32 form of their
multihash. `cid_from_block_filename` turns such a file name back into a
dag-cbor CIDv1, `find_cid_from_digest` does the same for a
multibase-encoded multihash, and `hex_string_to_cid` for hex of
`<hash code><length><digest>`. `multihash_encode(digest, code)` builds a
multihash from a digest.

## Tracking stored blocks

`BlockTracker` walks a blocks directory and reports the CIDs of `.data`
files modified after a given time, searching only directories modified
after that time and skipping `.temp` entries. It also keeps the time of the
last check as the modification time of a file, and appends CIDs that failed
to be recorded to another file, one per line:

```python
from fula.tracking import BlockTracker

tracker = BlockTracker(
    "/uniondrive/ipfs_datastore/blocks",
    "/internal/.last_time_ipfs_checked",
    "/uniondrive/failed_cids.info",
)
since = tracker.last_checked_time()
links = tracker.list_modified_stored_blocks(since)
tracker.update_last_checked_time()
```

`last_checked_time` returns `ZERO_TIME` when no check has been recorded.
Naive datetimes passed to `list_modified_stored_blocks` are taken as UTC.

## IPFS-style RPC

`IpfsRpcApp` is a plain WSGI application answering `pin/ls`, `block/stat`,
`id`, `log/level`, `stats/repo`, `files/stat`, `stats/bitswap`, `stats/bw`
and `bitswap/ledger` under `/api/v0/`, all from a datastore. Any other path
answers 404. `id` returns an empty body when no public key is given, and
`stats/repo` answers 500 when no `free_space` callable is given. It can be
served with the standard library:

```python
from wsgiref.simple_server import make_server

from fula.datastore import MapDatastore
from fula.rpc import IpfsRpcApp

app = IpfsRpcApp(
    MapDatastore(),
    "peer-a",
    "/uniondrive/ipfs_datastore",
    ["peer-b"],
    ["/ip4/127.0.0.1/tcp/40001"],
    b"public key bytes",
    lambda: 1_000_000_000,
)
make_server("127.0.0.1", 5001, app).serve_forever()
```

## What the package does not do

The package holds the pieces of a node, not a running node. It has no
command to start one, and it does not talk to the pool chain service or to
other peers: there is no chain client, no typed request and response
messages for chain actions, no peer-to-peer block exchange, announcements
or ping, and no pinning through an IPFS or cluster daemon. The settings
classes only hold values for such components. Blocks live in memory only;
`MapDatastore` does not persist anything to disk.