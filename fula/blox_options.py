"""Settings for a blox node."""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Optional

from fula.chain_options import DEFAULT_BLOCKCHAIN_ENDPOINT
from fula.datastore import MapDatastore

log = logging.getLogger("fula.blox")

DEFAULT_PING_COUNT = 5


def clean_path(path):
    """Return the shortest slash-separated path equivalent to path."""
    rooted = path.startswith("/")
    parts = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(part)
    cleaned = "/".join(parts)
    if rooted:
        return "/" + cleaned
    return cleaned or "."


@dataclass
class BloxOptions:
    """Blox node settings; the pool name is required."""

    name: str = ""
    host: Any = None
    peer_id: str = ""
    topic_name: str = ""
    store_dir: str = ""
    announce_interval: timedelta = timedelta(seconds=5)
    datastore: Any = None
    link_system: Any = None
    authorizer: str = ""
    authorized_peers: list[str] = field(default_factory=list)
    exchange_opts: list[Any] = field(default_factory=list)
    relays: list[str] = field(default_factory=list)
    update_pool_name: Optional[Callable[[str], Any]] = None
    get_pool_name: Optional[Callable[[], str]] = None
    ping_count: int = 0
    max_ping_time: int = 0
    min_success_rate: int = 0
    blockchain_endpoint: str = DEFAULT_BLOCKCHAIN_ENDPOINT
    secrets_path: str = ""
    pool_host_mode: bool = False
    ipfs_http_server: Any = None
    default_ipfs_http_server: str = ""
    ipfs_client: Any = None
    ipfs_cluster_api: Any = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("blox pool name must be specified")
        if self.ping_count <= 0:
            log.warning(
                "ping count is not specified, using default of %d instead of %d",
                DEFAULT_PING_COUNT,
                self.ping_count,
            )
            self.ping_count = DEFAULT_PING_COUNT
        if not self.topic_name:
            self.topic_name = clean_path(self.name)
        if self.datastore is None:
            self.datastore = MapDatastore()
        if not self.blockchain_endpoint:
            self.blockchain_endpoint = DEFAULT_BLOCKCHAIN_ENDPOINT
        if not self.authorizer:
            self.authorizer = self.peer_id