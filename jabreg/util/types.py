"""
Typing stuff, mostly the interfaces of the collaborators an
:class:`~jabreg.account.registration.AccountRegistrationModel` talks to.
"""

from typing import Any, Mapping, MutableMapping, Optional, Protocol, TypeVar

PropertyMap = MutableMapping[str, str]
"""
Flat account properties, keyed by dotted names such as ``STUN0.ADDRESS``.
"""

MEDIA_SERVICE = "media"
"""
Tag used to look up the optional :class:`MediaService`.
"""

SAVP_OFF = 0
SAVP_MANDATORY = 1
SAVP_OPTIONAL = 2


class Descriptor(Protocol):
    """
    A record that can be written under, and read back from, a key prefix
    such as ``STUN3``.
    """

    def store_descriptor(self, props: PropertyMap, name_prefix: str) -> None: ...

    @classmethod
    def load_descriptor(
        cls, props: Mapping[str, str], name_prefix: str
    ) -> Optional["Descriptor"]: ...

    def validate(self, name_prefix: str) -> None: ...


DescriptorType = TypeVar("DescriptorType", bound=Descriptor)


class PersistedAccount(Protocol):
    def get_properties(self) -> Mapping[str, str]: ...

    def get_user_id(self) -> Optional[str]: ...

    def get_account_unique_id(self) -> Optional[str]: ...

    def is_password_persistent(self) -> bool: ...


class AccountLookup(Protocol):
    def resolve(self, factory: str, account_uid: str) -> Optional[str]:
        """
        :return: the key under which the account is persisted, or ``None``
            if the account has never been stored.
        """
        ...


class PropertyStore(Protocol):
    def list_names(self, account_key: str) -> list[str]: ...

    def get(self, account_key: str, name: str) -> Optional[str]: ...

    def set(self, account_key: str, name: str, value: str) -> None: ...

    def delete(self, account_key: str, name: str) -> None: ...

    def delete_many(self, account_key: str, names: list[str]) -> None: ...


class PasswordLoader(Protocol):
    def load(self, account: PersistedAccount) -> Optional[str]: ...


class StunPasswordLoader(Protocol):
    def load(self, account: PersistedAccount, index_key: str) -> Optional[str]: ...


class MediaService(Protocol):
    def get_encoding_configuration(self) -> Mapping[str, str]: ...


class ServiceLocator(Protocol):
    def lookup(self, tag: str) -> Optional[Any]: ...


class SecurityRegistration(Protocol):
    def load(self, account: PersistedAccount) -> None: ...

    def store(self, props: PropertyMap) -> None: ...


class EncodingsRegistrationProtocol(Protocol):
    def load(
        self, account: PersistedAccount, media_service: Optional[MediaService]
    ) -> None: ...

    def store(self, props: PropertyMap) -> None: ...
