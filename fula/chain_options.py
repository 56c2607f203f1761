"""Settings for the blockchain client."""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable

DEFAULT_BLOCKCHAIN_ENDPOINT = "api.node3.functionyard.fula.network"


def default_update_pool_name(new_pool_name):
    """Accept a new pool name and do nothing with it."""
    return None


def default_get_pool_name():
    """Return the pool name used when none is known."""
    return "0"


@dataclass
class BlockchainOptions:
    """Blockchain client settings; an empty endpoint falls back to the default."""

    authorizer: str = ""
    authorized_peers: list[str] = field(default_factory=list)
    allow_transient_connection: bool = True
    blockchain_endpoint: str = DEFAULT_BLOCKCHAIN_ENDPOINT
    secrets_path: str = ""
    timeout: int = 30
    min_ping_success_count: int = 7
    max_ping_time: int = 900
    topic_name: str = "0"
    relays: list[str] = field(default_factory=list)
    update_pool_name: Callable[[str], Any] = default_update_pool_name
    get_pool_name: Callable[[], str] = default_get_pool_name
    fetch_frequency: timedelta = timedelta(hours=1)
    ipfs_client: Any = None
    ipfs_cluster_api: Any = None

    def __post_init__(self):
        if not self.blockchain_endpoint:
            self.blockchain_endpoint = DEFAULT_BLOCKCHAIN_ENDPOINT