"""A WSGI application answering a subset of the IPFS RPC API from a datastore."""

import base64
import json
import logging
from http import HTTPStatus
from urllib.parse import parse_qs

from fula.cid import Cid
from fula.datastore import NotFoundError, to_datastore_key

log = logging.getLogger("fula.blox")

VERSION = "0.0.0"
PROTOCOL_NAME = "fx_exchange"

_PIN_PREFIX = b"/"


def _json_bytes(payload):
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    text = text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
    return (text + "\n").encode("utf-8")


def _status_line(code):
    status = HTTPStatus(code)
    return f"{status.value} {status.phrase}"


class _Response:
    def __init__(self, code, body, content_type):
        self.code = code
        self.body = body
        self.headers = [
            ("Content-Type", content_type),
            ("Content-Length", str(len(body))),
        ]
        if content_type.startswith("text/plain"):
            self.headers.append(("X-Content-Type-Options", "nosniff"))


def _json(payload, code=200):
    return _Response(code, _json_bytes(payload), "application/json")


def _error(message, code):
    return _Response(code, (message + "\n").encode("utf-8"), "text/plain; charset=utf-8")


def _not_found():
    return _error("404 page not found", 404)


class _QueryFailed(Exception):
    pass


class IpfsRpcApp:
    """Serve pin, block, id, stats and ledger RPC endpoints for a blox node."""

    def __init__(
        self,
        datastore,
        peer_id,
        store_dir="",
        authorized_peers=(),
        addresses=(),
        public_key=None,
        free_space=None,
    ):
        self.datastore = datastore
        self.peer_id = str(peer_id)
        self.store_dir = store_dir
        self.authorized_peers = [str(peer) for peer in authorized_peers]
        self.addresses = [str(address) for address in addresses]
        self.public_key = public_key
        self.free_space = free_space
        self._routes = {
            "/api/v0/pin/ls": self._pin_ls,
            "/api/v0/block/stat": self._block_stat,
            "/api/v0/id": self._id,
            "/api/v0/log/level": self._log_level,
            "/api/v0/stats/repo": self._stats_repo,
            "/api/v0/files/stat": self._files_stat,
            "/api/v0/stats/bitswap": self._stats_bitswap,
            "/api/v0/stats/bw": self._stats_bw,
            "/api/v0/bitswap/ledger": self._bitswap_ledger,
        }

    def __call__(self, environ, start_response):
        path = environ.get("PATH_INFO", "") or "/"
        params = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)
        handler = self._routes.get(path)
        if handler is None:
            log.error(
                "404 Not Found method=%s url=%s params=%s",
                environ.get("REQUEST_METHOD", ""),
                path,
                params,
            )
            response = _not_found()
        else:
            response = handler(params)
        start_response(_status_line(response.code), response.headers)
        return [response.body]

    @staticmethod
    def _arg(params):
        values = params.get("arg")
        return values[0] if values else ""

    def _entries(self, prefix=None, limit=0):
        try:
            return list(self.datastore.query(prefix=prefix, keys_only=True, limit=limit))
        except Exception as exc:  # any datastore failure becomes a 500
            log.error("failed to query datastore: %s", exc)
            raise _QueryFailed(str(exc)) from exc

    def _totals(self):
        entries = self._entries()
        return sum(entry.size for entry in entries), len(entries)

    def _pin_ls(self, params):
        cid_text = self._arg(params)
        prefix = None
        limit = 0
        if cid_text:
            try:
                wanted = Cid.decode(cid_text)
            except ValueError as exc:
                log.error("failed to decode cidStr %s: %s", cid_text, exc)
                return _error(f"invalid cid: {exc}", 400)
            prefix = _PIN_PREFIX + wanted.to_bytes()
            limit = 1
        try:
            entries = self._entries(prefix=prefix, limit=limit)
        except _QueryFailed as exc:
            return _error(f"internal error while querying datastore: {exc}", 500)
        keys = {}
        for entry in entries:
            key = bytes(entry.key)
            if len(key) <= 1:
                log.debug("key too short to be a valid CID: %r", key)
                continue
            try:
                found = Cid.from_bytes(key[1:])
            except ValueError as exc:
                log.debug("failed to cast sliced key to cid %r: %s", key[1:], exc)
                continue
            keys[str(found)] = {"Type": "recursive"}
        return _json({"Keys": keys} if keys else {})

    def _block_stat(self, params):
        cid_text = self._arg(params)
        if not cid_text:
            return _error("no cid specified", 400)
        try:
            wanted = Cid.decode(cid_text)
        except ValueError as exc:
            return _error(f"invalid cid: {exc}", 400)
        try:
            value = self.datastore.get(to_datastore_key(wanted.to_bytes()))
        except NotFoundError:
            return _not_found()
        except Exception as exc:  # any datastore failure becomes a 500
            return _error(f"internal error: {exc}", 500)
        return _json({"Key": str(wanted), "Size": len(value)})

    def _id(self, params):
        if self.public_key is None:
            log.error("Public key is not available")
            return _Response(200, b"", "text/plain; charset=utf-8")
        return _json(
            {
                "Addresses": list(self.addresses),
                "AgentVersion": VERSION,
                "ID": self.peer_id,
                "ProtocolVersion": f"{PROTOCOL_NAME}/{VERSION}",
                "Protocols": [PROTOCOL_NAME],
                "PublicKey": base64.b64encode(bytes(self.public_key)).decode("ascii"),
            }
        )

    def _log_level(self, params):
        return _json({"Message": "ignored"})

    def _stats_repo(self, params):
        try:
            if self.free_space is None:
                raise RuntimeError("storage stats are not available")
            storage_max = int(self.free_space())
        except Exception as exc:  # reported to the caller as a 500
            log.error("failed to get storage stats: %s", exc)
            return _error(f"internal error while getting storage stats: {exc}", 500)
        try:
            repo_size, num_objects = self._totals()
        except _QueryFailed as exc:
            return _error(f"internal error while querying datastore: {exc}", 500)
        return _json(
            {
                "NumObjects": num_objects,
                "RepoPath": self.store_dir,
                "SizeStat": {"RepoSize": repo_size, "StorageMax": storage_max},
                "Version": f"fx-repo@{VERSION}",
                "RepoSize": repo_size,
            }
        )

    def _files_stat(self, params):
        try:
            repo_size, num_objects = self._totals()
        except _QueryFailed as exc:
            return _error(f"internal error while querying datastore: {exc}", 500)
        return _json(
            {
                "Blocks": num_objects,
                "CumulativeSize": repo_size,
                "Hash": "",
                "Size": repo_size,
                "Type": "directory",
            }
        )

    def _stats_bitswap(self, params):
        try:
            _, num_objects = self._totals()
        except _QueryFailed as exc:
            return _error(f"internal error while querying datastore: {exc}", 500)
        return _json(
            {
                "BlocksReceived": num_objects,
                "BlocksSent": 0,
                "DataReceived": 0,
                "DataSent": 0,
                "DupBlksReceived": 0,
                "DupDataReceived": 0,
                "MessagesReceived": num_objects,
                "Peers": list(self.authorized_peers),
                "ProvideBufLen": 0,
                "Wantlist": [],
            }
        )

    def _stats_bw(self, params):
        try:
            _, num_objects = self._totals()
        except _QueryFailed as exc:
            return _error(f"internal error while querying datastore: {exc}", 500)
        return _json({"RateIn": 0, "RateOut": 0, "TotalIn": num_objects, "TotalOut": 0})

    def _bitswap_ledger(self, params):
        return _json(
            {"Exchanged": 0, "Peer": self.peer_id, "Recv": 0, "Sent": 0, "Value": 0}
        )