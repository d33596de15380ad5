from jabreg.account import AccountIdentity, merge_properties


def test_merge_properties():
    destination = {"A": "local"}
    merge_properties({"A": "persisted", "B": "persisted"}, destination)
    assert destination == {"A": "local", "B": "persisted"}


def test_set_or_remove_if_empty():
    identity = AccountIdentity()
    identity.set_or_remove_if_empty("USER_ID", "alice@example.com")
    assert identity.get("USER_ID") == "alice@example.com"
    identity.set_or_remove_if_empty("USER_ID", "")
    assert "USER_ID" not in identity.properties
    identity.set_or_remove_if_empty("USER_ID", None)
    assert "USER_ID" not in identity.properties


def test_typed_getters():
    identity = AccountIdentity(
        {"FLAG": "true", "PORT": "5222", "BROKEN": "five", "EMPTY": ""}
    )
    assert identity.get_bool("FLAG")
    assert not identity.get_bool("MISSING")
    assert identity.get_bool("EMPTY", True)
    assert identity.get_int("PORT") == 5222
    assert identity.get_int("BROKEN", 7) == 7
    assert identity.get_int("MISSING", 3) == 3


def test_password():
    identity = AccountIdentity()
    identity.password = "secret"
    assert identity.properties["PASSWORD"] == "secret"
    identity.password = None
    assert identity.password is None
    assert "PASSWORD" not in identity.properties


def test_store_properties():
    identity = AccountIdentity({"USER_ID": "alice@example.com"})
    out = {"USER_ID": "old@example.com", "KEEP": "1"}
    result = identity.store_properties("proto.png", None, out)
    assert result is out
    assert out == {
        "USER_ID": "alice@example.com",
        "KEEP": "1",
        "PROTOCOL_ICON_PATH": "proto.png",
    }
