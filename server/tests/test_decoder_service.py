"""Tests for decoding node subtrees into NodeConfig models."""

import logging

import pytest

from nodeinventory.core.errors import (
    InvalidShapeError,
    MalformedFieldError,
    MissingDataError,
)
from nodeinventory.core.models import MemoryConfig, NetworkConfig, ProcessorConfig
from nodeinventory.core.tree import StoreNode
from nodeinventory.services.decoder_service import decode_disk, decode_node_config


VALID_NODE = {
    "ipaddress": "10.0.0.11",
    "disks/sda/size": "500107862016",
    "disks/sda/rotational": "true",
    "disks/sda/readonly": "false",
    "disks/sda/type": "disk",
    "disks/sda/filesystem": "",
    "disks/sda/mountpoint": "",
    "disks/sda/haschildren": "true",
    "disks/sda1/size": "1048576",
    "disks/sda1/type": "part",
    "disks/sda1/filesystem": "ext4",
    "disks/sda1/mountpoint": "/boot",
    "cpu/0/physicalid": "0",
    "cpu/0/siblings": "8",
    "cpu/0/coreid": "0",
    "cpu/0/numcores": "4",
    "cpu/0/speed": "2394.998",
    "cpu/0/bits": "64",
    "cpu/1/physicalid": "0",
    "cpu/1/siblings": "8",
    "cpu/1/coreid": "1",
    "cpu/1/numcores": "4",
    "cpu/1/speed": "2394.998",
    "cpu/1/bits": "64",
    "mem/totalsize": "16777216000",
    "net/eth0/ipv4address": "10.0.0.11/24",
    "net/eth0/ipv6address": "fe80::1/64",
    "net/eth0/speed": "1000",
    "net/lo/ipv4address": "127.0.0.1/8",
    "net/lo/ipv6address": "",
    "net/lo/speed": "",
}


@pytest.fixture
def node_tree(store, namespace, seed_node):
    def _tree(values, node_id="node1"):
        seed_node(node_id, values)
        return store.get_tree(namespace.node_key(node_id))

    return _tree


def _leaf(key, value):
    return StoreNode(key=key, value=value)


def _dir(key, *children):
    return StoreNode(key=key, dir=True, children=list(children))


def test_decode_full_node(node_tree):
    config = decode_node_config("node1", node_tree(VALID_NODE))

    assert config.ip_address == "10.0.0.11"

    assert [disk.name for disk in config.disks] == ["sda", "sda1"]
    sda, sda1 = config.disks
    assert sda.size == 500107862016
    assert sda.rotational is True
    assert sda.readonly is False
    assert sda.has_children is True
    assert sda1.type == "part"
    assert sda1.filesystem == "ext4"
    assert sda1.mountpoint == "/boot"

    assert config.processors == [
        ProcessorConfig(id=0, physical_id=0, siblings=8, core_id=0, num_cores=4, speed=2394.998, bits=64),
        ProcessorConfig(id=1, physical_id=0, siblings=8, core_id=1, num_cores=4, speed=2394.998, bits=64),
    ]
    assert config.memory == MemoryConfig(total_size=16777216000)
    assert config.network_adapters == [
        NetworkConfig(name="eth0", ipv4_address="10.0.0.11/24", ipv6_address="fe80::1/64", speed=1000),
        NetworkConfig(name="lo", ipv4_address="127.0.0.1/8", ipv6_address="", speed=0),
    ]


def test_missing_subtree_raises_missing_data():
    with pytest.raises(MissingDataError) as excinfo:
        decode_node_config("node1", None)

    assert excinfo.value.node_id == "node1"


def test_empty_node_decodes_to_defaults(namespace):
    config = decode_node_config("node1", _dir(namespace.node_key("node1")))

    assert config.disks == []
    assert config.processors == []
    assert config.network_adapters == []
    assert config.memory == MemoryConfig(total_size=0)
    assert config.ip_address == ""


def test_memory_is_present_without_memory_subtree(node_tree):
    config = decode_node_config("node1", node_tree({"cpu/0/bits": "64"}))

    assert config.memory.total_size == 0


def test_unknown_names_are_skipped_without_changing_siblings(node_tree, caplog):
    noisy = dict(VALID_NODE)
    noisy.update(
        {
            "gpu/0/model": "unknown",
            "cpu/0/flags": "fpu vme",
            "mem/swapsize": "not-a-number",
            "net/eth0/mac": "00:11:22:33:44:55",
            "disks/sda/model": "Samsung SSD",
        }
    )

    with caplog.at_level(logging.WARNING):
        noisy_config = decode_node_config("node1", node_tree(noisy, node_id="noisy"))
    clean_config = decode_node_config("node1", node_tree(VALID_NODE, node_id="clean"))

    assert noisy_config == clean_config
    assert "gpu" in caplog.text
    assert "flags" in caplog.text
    assert "swapsize" in caplog.text


@pytest.mark.parametrize(
    "key, value",
    [
        ("cpu/0/physicalid", "x"),
        ("cpu/0/siblings", "-1"),
        ("cpu/0/coreid", "1.5"),
        ("cpu/0/numcores", "4294967296"),
        ("cpu/0/speed", "fast"),
        ("cpu/0/bits", ""),
        ("mem/totalsize", "16G"),
        ("net/eth0/speed", "1Gb/s"),
        ("disks/sda/size", "big"),
        ("disks/sda/rotational", "yes"),
    ],
)
def test_malformed_recognised_value_aborts_node(node_tree, key, value):
    values = dict(VALID_NODE)
    values[key] = value

    with pytest.raises(MalformedFieldError) as excinfo:
        decode_node_config("node1", node_tree(values))

    assert excinfo.value.node_id == "node1"
    assert excinfo.value.key.endswith(key)
    assert excinfo.value.value == value


def test_processor_ordinal_must_be_unsigned(node_tree):
    with pytest.raises(MalformedFieldError) as excinfo:
        decode_node_config("node1", node_tree({"cpu/first/bits": "64"}))

    assert excinfo.value.value == "first"


def test_empty_speed_is_zero_only_for_network_adapters(node_tree):
    config = decode_node_config("n", node_tree({"net/eth1/speed": ""}, node_id="n"))
    assert config.network_adapters[0].speed == 0

    with pytest.raises(MalformedFieldError):
        decode_node_config("p", node_tree({"cpu/0/speed": ""}, node_id="p"))
    with pytest.raises(MalformedFieldError):
        decode_node_config("m", node_tree({"mem/totalsize": ""}, node_id="m"))


def test_ip_address_directory_is_invalid_shape(node_tree):
    with pytest.raises(InvalidShapeError) as excinfo:
        decode_node_config("node1", node_tree({"ipaddress/v4": "10.0.0.1"}))

    assert excinfo.value.node_id == "node1"
    assert excinfo.value.key.endswith("/ipaddress")


def test_empty_ip_address_directory_is_invalid_shape(namespace):
    root = _dir(
        namespace.node_key("node1"),
        _dir(namespace.ip_address_key("node1")),
    )

    with pytest.raises(InvalidShapeError):
        decode_node_config("node1", root)


def test_property_directory_is_invalid_shape(node_tree):
    with pytest.raises(InvalidShapeError):
        decode_node_config("node1", node_tree({"mem/totalsize/bytes": "1024"}))


def test_children_keep_store_order():
    root = _dir(
        "/r/n",
        _dir(
            "/r/n/cpu",
            _dir("/r/n/cpu/2", _leaf("/r/n/cpu/2/bits", "64")),
            _dir("/r/n/cpu/0", _leaf("/r/n/cpu/0/bits", "32")),
            _dir("/r/n/cpu/1"),
        ),
        _dir(
            "/r/n/net",
            _dir("/r/n/net/wlan0"),
            _dir("/r/n/net/eth0"),
        ),
    )

    config = decode_node_config("n", root)

    assert [proc.id for proc in config.processors] == [2, 0, 1]
    assert [proc.bits for proc in config.processors] == [64, 32, 0]
    assert [adapter.name for adapter in config.network_adapters] == ["wlan0", "eth0"]


def test_decode_disk_uses_key_segment_as_name():
    disk = decode_disk(
        _dir(
            "/r/n/disks/nvme0n1",
            _leaf("/r/n/disks/nvme0n1/size", "1024"),
            _leaf("/r/n/disks/nvme0n1/readonly", "1"),
        )
    )

    assert disk.name == "nvme0n1"
    assert disk.size == 1024
    assert disk.readonly is True
    assert disk.rotational is False
