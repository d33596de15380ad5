import logging
from typing import Mapping, Optional

from .store import StoredAccount, new_account_key


class MemoryPropertyStore:
    """
    A property store that lives in a dict, with the same interface as
    :class:`~jabreg.db.store.SQLPropertyStore`. Handy for tests and dry runs.
    """

    def __init__(self):
        self._accounts: dict[str, StoredAccount] = {}

    def new(
        self,
        factory: str,
        account_uid: str,
        properties: Optional[Mapping[str, str]] = None,
        password_persistent: bool = True,
    ) -> str:
        if (key := self.resolve(factory, account_uid)) is not None:
            return key
        key = new_account_key()
        self._accounts[key] = StoredAccount(
            key=key,
            factory=factory,
            account_uid=account_uid,
            properties=dict(properties or {}),
            password_persistent=password_persistent,
        )
        return key

    def resolve(self, factory: str, account_uid: str) -> Optional[str]:
        for key, account in self._accounts.items():
            if account.factory == factory and account.account_uid == account_uid:
                return key
        return None

    def list_accounts(self) -> list[StoredAccount]:
        return [self._copy(a) for a in self._accounts.values()]

    def get_account(self, account_key: str) -> Optional[StoredAccount]:
        account = self._accounts.get(account_key)
        return None if account is None else self._copy(account)

    def delete_account(self, account_key: str) -> None:
        self._accounts.pop(account_key, None)

    def list_names(self, account_key: str) -> list[str]:
        return sorted(self.get_all(account_key))

    def get(self, account_key: str, name: str) -> Optional[str]:
        return self.get_all(account_key).get(name)

    def get_all(self, account_key: str) -> dict[str, str]:
        account = self._accounts.get(account_key)
        return {} if account is None else dict(account.properties)

    def set(self, account_key: str, name: str, value: str) -> None:
        self._props(account_key)[name] = value

    def update(self, account_key: str, properties: Mapping[str, str]) -> None:
        self._props(account_key).update(properties)

    def delete(self, account_key: str, name: str) -> None:
        self._props(account_key).pop(name, None)

    def delete_many(self, account_key: str, names: list[str]) -> None:
        props = self._props(account_key)
        for name in names:
            props.pop(name, None)
        log.debug("Deleted %s properties of %s", len(names), account_key)

    def _props(self, account_key: str) -> dict[str, str]:
        try:
            return self._accounts[account_key].properties
        except KeyError:
            raise KeyError("No such account", account_key)

    @staticmethod
    def _copy(account: StoredAccount) -> StoredAccount:
        return StoredAccount(
            key=account.key,
            factory=account.factory,
            account_uid=account.account_uid,
            properties=dict(account.properties),
            password_persistent=account.password_persistent,
        )


log = logging.getLogger(__name__)
