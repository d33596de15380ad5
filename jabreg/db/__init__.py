from .memory import MemoryPropertyStore
from .meta import get_engine
from .models import Account, AccountProperty
from .store import (
    SQLPropertyStore,
    StoredAccount,
    StoredPasswordLoader,
    StoredStunPasswordLoader,
)

__all__ = (
    "Account",
    "AccountProperty",
    "MemoryPropertyStore",
    "SQLPropertyStore",
    "StoredAccount",
    "StoredPasswordLoader",
    "StoredStunPasswordLoader",
    "get_engine",
)
