import logging

import jabreg  # noqa: F401
from jabreg.util import bool_to_str, names_with_prefixes, str_to_bool, sub_properties
from jabreg.util.util import addLoggingLevel


def test_bools():
    assert bool_to_str(True) == "true"
    assert bool_to_str(False) == "false"
    assert str_to_bool("true")
    assert str_to_bool(" TRUE ")
    assert str_to_bool("1")
    assert not str_to_bool("false")
    assert not str_to_bool("nope")
    assert not str_to_bool(None)
    assert str_to_bool(None, True)
    assert str_to_bool("", True)


def test_names_with_prefixes():
    names = ["STUN0.ADDRESS", "USER_ID", "JINGLENODES1.ADDRESS", "STUN12.PORT"]
    assert names_with_prefixes(names, ["STUN", "JINGLENODES"]) == [
        "STUN0.ADDRESS",
        "JINGLENODES1.ADDRESS",
        "STUN12.PORT",
    ]
    assert names_with_prefixes(names, []) == []


def test_sub_properties():
    props = {
        "ENCRYPTION_PROTOCOL.ZRTP": "0",
        "ENCRYPTION_PROTOCOL_STATUS.ZRTP": "true",
        "ENCRYPTION_PROTOCOL": "weird",
    }
    assert sub_properties(props, "ENCRYPTION_PROTOCOL") == {"ZRTP": "0"}


def test_trace_level(caplog):
    assert logging.TRACE == logging.DEBUG - 5  # type:ignore
    # registering twice is harmless
    addLoggingLevel()
    log = logging.getLogger("jabreg.test")
    with caplog.at_level(logging.TRACE):  # type:ignore
        log.trace("traced %s", "message")  # type:ignore
    assert "traced message" in caplog.text
