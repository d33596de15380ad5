import logging
from typing import Mapping, MutableMapping, Optional

from ..util.util import bool_to_str, str_to_bool

USER_ID = "USER_ID"
PASSWORD = "PASSWORD"
PROTOCOL_ICON_PATH = "PROTOCOL_ICON_PATH"
ACCOUNT_ICON_PATH = "ACCOUNT_ICON_PATH"
SERVER_ADDRESS = "SERVER_ADDRESS"
IS_SERVER_OVERRIDDEN = "IS_SERVER_OVERRIDDEN"


def merge_properties(
    source: Mapping[str, str], destination: MutableMapping[str, str]
) -> None:
    """
    Copy the entries of ``source`` whose key is not already in ``destination``.

    Existing entries in ``destination`` are never overwritten.
    """
    for key, value in source.items():
        if key not in destination:
            destination[key] = value


class AccountIdentity:
    """
    The base configuration of an account: a flat property map with typed
    accessors.
    """

    def __init__(self, properties: Optional[dict[str, str]] = None):
        self.properties: dict[str, str] = {} if properties is None else properties

    def __repr__(self):
        return f"<AccountIdentity {self.get(USER_ID)!r}>"

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        return str_to_bool(self.properties.get(key), default)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.properties.get(key)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            log.warning("Property %s is not an integer: %r", key, value)
            return default

    def set_bool(self, key: str, value: bool) -> None:
        self.properties[key] = bool_to_str(value)

    def set_or_remove_if_empty(self, key: str, value: Optional[str]) -> None:
        if value:
            self.properties[key] = value
        else:
            self.properties.pop(key, None)

    @property
    def password(self) -> Optional[str]:
        return self.get(PASSWORD)

    @password.setter
    def password(self, value: Optional[str]):
        self.set_or_remove_if_empty(PASSWORD, value)

    def clear(self) -> None:
        self.properties.clear()

    def store_properties(
        self,
        protocol_icon_path: Optional[str],
        account_icon_path: Optional[str],
        account_properties: MutableMapping[str, str],
    ) -> MutableMapping[str, str]:
        """
        Merge this identity into ``account_properties``: icon paths first,
        then every property of this identity on top.
        """
        if protocol_icon_path is not None:
            account_properties[PROTOCOL_ICON_PATH] = protocol_icon_path
        if account_icon_path is not None:
            account_properties[ACCOUNT_ICON_PATH] = account_icon_path
        account_properties.update(self.properties)
        return account_properties


log = logging.getLogger(__name__)
