from typing import Optional

import pytest
import sqlalchemy as sa

from jabreg.core import config
from jabreg.db import MemoryPropertyStore, SQLPropertyStore, StoredAccount
from jabreg.db.meta import Base

JABBER = "Jabber"


@pytest.fixture(autouse=True)
def restore_config():
    saved = {k: v for k, v in vars(config).items() if k.isupper()}
    yield
    for k in [k for k in vars(config) if k.isupper() and k not in saved]:
        delattr(config, k)
    for k, v in saved.items():
        setattr(config, k, v)


@pytest.fixture
def memory_store():
    return MemoryPropertyStore()


@pytest.fixture
def sql_store():
    engine = sa.create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield SQLPropertyStore(engine)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryPropertyStore()
    return request.getfixturevalue("sql_store")


class StunSecrets:
    """
    Secrets kept outside of the account properties, by STUN index key.
    """

    def __init__(self, **secrets: str):
        self.secrets = secrets
        self.asked: list[str] = []

    def load(self, account, index_key: str) -> Optional[str]:
        self.asked.append(index_key)
        return self.secrets.get(index_key)


def stun_properties(*addresses: str, prefix="STUN") -> dict[str, str]:
    props = {}
    for i, address in enumerate(addresses):
        props[f"{prefix}{i}.ADDRESS"] = address
        props[f"{prefix}{i}.PORT"] = "3478"
    return props


def stored_account(store, user_id="alice@example.com", **extra) -> StoredAccount:
    props = {"USER_ID": user_id, "PASSWORD": "hunter2"}
    props.update(extra)
    key = store.new(JABBER, f"{JABBER}:{user_id}", props)
    account = store.get_account(key)
    assert account is not None
    return account
