import logging

import pytest

from jabreg.descriptor import JingleNodeDescriptor, StunServerDescriptor, codec
from jabreg.util.error import ConfigurationError


def stun_list(n: int) -> list[StunServerDescriptor]:
    return [
        StunServerDescriptor(
            address=f"stun{i}.example.com",
            port=3478 + i,
            username="user" if i % 2 else None,
            password="pass" if i % 2 else None,
            is_turn_supported=bool(i % 2),
            protocol="tcp" if i % 2 else "udp",
        )
        for i in range(n)
    ]


@pytest.mark.parametrize("n", [0, 1, 7])
def test_round_trip(n):
    servers = stun_list(n)
    store = {}
    codec.encode(servers, "STUN", store)
    assert codec.decode(store, "STUN", 100, StunServerDescriptor.load_descriptor) == servers


def test_keys_are_not_padded():
    store = {}
    codec.encode(stun_list(11), "STUN", store)
    assert "STUN10.ADDRESS" in store
    assert "STUN010.ADDRESS" not in store
    assert "STUN0.ADDRESS" in store


def test_decode_stops_at_max_count():
    store = {}
    codec.encode(stun_list(5), "STUN", store)
    decoded = codec.decode(store, "STUN", 3, StunServerDescriptor.load_descriptor)
    assert [s.address for s in decoded] == [
        "stun0.example.com",
        "stun1.example.com",
        "stun2.example.com",
    ]


def test_decode_stops_at_first_gap():
    store = {}
    codec.encode(stun_list(4), "STUN", store)
    for key in [k for k in store if k.startswith("STUN2.")]:
        del store[key]
    decoded = codec.decode(store, "STUN", 100, StunServerDescriptor.load_descriptor)
    assert decoded == stun_list(2)


def test_decode_empty():
    store = {"USER_ID": "alice@example.com", "STUN1.ADDRESS": "orphan.example.com"}
    assert codec.decode(store, "STUN", 100, StunServerDescriptor.load_descriptor) == []


def test_decode_one():
    store = {}
    codec.encode([JingleNodeDescriptor("relay.example.com", True)], "JINGLENODES", store)
    loader = JingleNodeDescriptor.load_descriptor
    assert codec.decode_one(store, "JINGLENODES", 0, loader) == JingleNodeDescriptor(
        "relay.example.com", True
    )
    assert codec.decode_one(store, "JINGLENODES", 1, loader) is None


def test_encode_leaves_tail_alone():
    store = {}
    codec.encode(stun_list(3), "STUN", store)
    codec.encode(stun_list(1), "STUN", store)
    assert "STUN2.ADDRESS" in store
    assert len(codec.decode(store, "STUN", 100, StunServerDescriptor.load_descriptor)) == 3


def test_clear_prefixes():
    store = {"USER_ID": "x@example.com"}
    codec.encode(stun_list(2), "STUN", store)
    codec.encode([JingleNodeDescriptor("relay.example.com")], "JINGLENODES", store)
    removed = codec.clear_prefixes(store, "STUN", "JINGLENODES")
    assert store == {"USER_ID": "x@example.com"}
    assert "STUN1.PORT" in removed
    assert "JINGLENODES0.ADDRESS" in removed
    assert codec.clear_prefixes(store, "STUN") == []


def test_index_prefix():
    assert codec.index_prefix("STUN", 0) == "STUN0"
    assert codec.index_prefix("JINGLENODES", 12) == "JINGLENODES12"
    with pytest.raises(ValueError):
        codec.index_prefix("STUN", -1)


def test_validate_reports_index():
    servers = stun_list(3)
    servers[2].address = ""
    with pytest.raises(ConfigurationError) as e:
        codec.validate(servers, "STUN")
    assert e.value.key == "STUN2.ADDRESS"


def test_validate_max_count():
    codec.validate(stun_list(3), "STUN", 3)
    with pytest.raises(ConfigurationError) as e:
        codec.validate(stun_list(4), "STUN", 3)
    assert e.value.key == "STUN"
    assert e.value.reason == "invalid-value"


def test_decode_logs_only_actual_truncation(caplog):
    store = {}
    codec.encode(stun_list(3), "STUN", store)
    with caplog.at_level(logging.DEBUG, logger="jabreg.descriptor.codec"):
        codec.decode(store, "STUN", 3, StunServerDescriptor.load_descriptor)
        codec.decode({}, "STUN", 0, StunServerDescriptor.load_descriptor)
    assert "beyond the maximum" not in caplog.text

    with caplog.at_level(logging.DEBUG, logger="jabreg.descriptor.codec"):
        codec.decode(store, "STUN", 2, StunServerDescriptor.load_descriptor)
    assert "beyond the maximum of 2 for STUN" in caplog.text
