import dataclasses
from datetime import timedelta

from fula.chain_options import (
    BlockchainOptions,
    default_get_pool_name,
    default_update_pool_name,
)


def test_defaults():
    options = BlockchainOptions()
    assert options.blockchain_endpoint == "api.node3.functionyard.fula.network"
    assert options.topic_name == "0"
    assert options.timeout == 30
    assert options.min_ping_success_count == 7
    assert options.fetch_frequency == timedelta(hours=1)
    assert options.allow_transient_connection is True
    assert options.relays == []
    assert options.authorized_peers == []


def test_default_callbacks():
    options = BlockchainOptions()
    assert options.get_pool_name() == "0"
    assert options.update_pool_name("5") is None


def test_default_pool_name_functions():
    assert default_get_pool_name() == "0"
    assert default_update_pool_name("anything") is None


def test_empty_endpoint_falls_back_to_default():
    options = BlockchainOptions(blockchain_endpoint="")
    assert options.blockchain_endpoint == "api.node3.functionyard.fula.network"


def test_replace_with_empty_endpoint_falls_back():
    options = dataclasses.replace(
        BlockchainOptions(blockchain_endpoint="127.0.0.1:4000"), blockchain_endpoint=""
    )
    assert options.blockchain_endpoint == "api.node3.functionyard.fula.network"


def test_custom_values_kept():
    options = BlockchainOptions(
        blockchain_endpoint="127.0.0.1:4000",
        allow_transient_connection=False,
        topic_name="12",
    )
    assert options.blockchain_endpoint == "127.0.0.1:4000"
    assert options.allow_transient_connection is False
    assert options.topic_name == "12"


def test_lists_not_shared_between_instances():
    first = BlockchainOptions()
    second = BlockchainOptions()
    first.relays.append("relay")
    assert second.relays == []


def test_custom_pool_name_callbacks():
    names = []
    options = BlockchainOptions(update_pool_name=names.append, get_pool_name=lambda: "9")
    options.update_pool_name("9")
    assert names == ["9"]
    assert options.get_pool_name() == "9"