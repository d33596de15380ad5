"""
The data entered in the account setup flow of an XMPP account, and its
reconciliation with the persisted account properties.

A typical edit session::

    model = AccountRegistrationModel(account_lookup=store, persisted_store=store)
    model.load_account(stored_account)
    model.stun_servers = [StunServerDescriptor("stun.example.com")]
    props = model.store_properties(
        "Jabber", password, is_modification=True,
        account_properties=dict(stored_account.get_properties()),
    )

One instance must be used for one session only: :meth:`load_account` merges
the persisted properties into the scratch buffer without overwriting what is
already there, so a reused instance may carry stale values forward unless
:meth:`reset` is called first.
"""

import logging
from typing import MutableMapping, Optional

from slixmpp import JID
from slixmpp.jid import InvalidJID

from ..core import config
from ..descriptor import JingleNodeDescriptor, StunServerDescriptor, codec
from ..util.error import ConfigurationError
from ..util.types import (
    MEDIA_SERVICE,
    AccountLookup,
    PasswordLoader,
    PersistedAccount,
    PropertyMap,
    PropertyStore,
    ServiceLocator,
    StunPasswordLoader,
)
from ..util.util import names_with_prefixes
from .encodings import EncodingsRegistration
from .identity import (
    IS_SERVER_OVERRIDDEN,
    PASSWORD,
    SERVER_ADDRESS,
    USER_ID,
    AccountIdentity,
    merge_properties,
)
from .security import JabberSecurityRegistration

INTEGER_KEYS = ("SAVP_OPTION",)


def get_server_from_user_name(user_name: Optional[str]) -> Optional[str]:
    """
    Guess the server to connect to from a full or bare JID.

    >>> get_server_from_user_name("alice@example.com/res")
    'example.com'

    :return: the domain part of ``user_name``, or the canonical server if
        this domain is the reserved alias, or ``None`` if there is no domain.
    """
    if not user_name or "@" not in user_name:
        return None
    local, _, rest = user_name.partition("@")
    if not local or not rest:
        return None
    try:
        domain = JID(user_name).domain
    except InvalidJID:
        log.debug("Cannot parse %r as a JID", user_name)
        return None
    if not domain:
        return None
    if domain == config.RESERVED_ALIAS_DOMAIN:
        return config.CANONICAL_SERVER
    return domain


class AccountRegistrationModel:
    """
    Everything the user entered for an XMPP account: identity, password,
    additional STUN servers and Jingle Nodes, security and encodings
    settings.

    External collaborators are injected and only used when needed:

    - ``account_lookup`` and ``persisted_store`` when storing a modification,
    - ``password_loader``, ``stun_password_loader`` and ``service_locator``
      when loading an account.
    """

    def __init__(
        self,
        account_lookup: Optional[AccountLookup] = None,
        persisted_store: Optional[PropertyStore] = None,
        password_loader: Optional[PasswordLoader] = None,
        stun_password_loader: Optional[StunPasswordLoader] = None,
        service_locator: Optional[ServiceLocator] = None,
        default_user_suffix: Optional[str] = None,
    ):
        self.account_lookup = account_lookup
        self.persisted_store = persisted_store
        self.password_loader = password_loader
        self.stun_password_loader = stun_password_loader
        self.service_locator = service_locator
        if default_user_suffix is None:
            default_user_suffix = config.DEFAULT_USER_SUFFIX
        self.default_user_suffix = default_user_suffix

        self.identity = AccountIdentity()
        self.security_registration = JabberSecurityRegistration()
        self.encodings_registration: Optional[EncodingsRegistration] = (
            EncodingsRegistration()
        )
        self.reset()

    def __repr__(self):
        return f"<AccountRegistrationModel {self.user_id!r} uid={self.edited_account_uid!r}>"

    def reset(self) -> None:
        """
        Forget everything about the previous session.
        """
        self.identity.clear()
        self._user_id: Optional[str] = None
        self._password: Optional[str] = None
        self._remember_password = True
        self.server_address: Optional[str] = None
        self.server_overridden = False
        self.edited_account_uid: Optional[str] = None
        self.stun_servers: list[StunServerDescriptor] = []
        self.jingle_nodes: list[JingleNodeDescriptor] = []

    @property
    def properties(self) -> dict[str, str]:
        """
        The scratch buffer: persisted properties merged in by
        :meth:`load_account`, replaced by the staged properties after a
        successful :meth:`store_properties`.
        """
        return self.identity.properties

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @user_id.setter
    def user_id(self, user_id: Optional[str]):
        if user_id and "@" not in user_id and self.default_user_suffix:
            user_id = f"{user_id}@{self.default_user_suffix}"
        self._user_id = user_id or None
        if self.server_overridden:
            return
        if server := get_server_from_user_name(user_id):
            self.server_address = server

    @property
    def password(self) -> Optional[str]:
        return self._password

    @password.setter
    def password(self, password: Optional[str]):
        if password and not self._remember_password:
            log.debug("Password is not remembered for %s, ignoring it", self)
            password = None
        self._password = password or None

    @property
    def remember_password(self) -> bool:
        return self._remember_password

    @remember_password.setter
    def remember_password(self, remember: bool):
        self._remember_password = remember
        if not remember:
            self._password = None

    def add_stun_server(self, stun_server: StunServerDescriptor) -> None:
        self.stun_servers.append(stun_server)

    def add_jingle_node(self, node: JingleNodeDescriptor) -> None:
        self.jingle_nodes.append(node)

    def load_account(
        self, account: PersistedAccount, media_disabled: Optional[bool] = None
    ) -> None:
        """
        Fill this model from a persisted account.

        :param account: The account being edited.
        :param media_disabled: Skip the media service lookup, leaving the
            encodings at their defaults. Defaults to the
            ``DISABLE_MEDIA_SERVICE`` option.
        """
        if media_disabled is None:
            media_disabled = config.DISABLE_MEDIA_SERVICE

        merge_properties(account.get_properties(), self.properties)

        self.server_overridden = self.identity.get_bool(IS_SERVER_OVERRIDDEN)
        self.server_address = self.identity.get(SERVER_ADDRESS)
        self.user_id = account.get_user_id()
        self.edited_account_uid = account.get_account_unique_id()
        self.remember_password = account.is_password_persistent()
        if self.password_loader is not None:
            self.password = self.password_loader.load(account)

        self.security_registration.load(account)

        self.stun_servers = self._load_stun_servers(account)
        self.jingle_nodes = codec.decode(
            self.properties,
            config.JN_PREFIX,
            config.MAX_JN_RELAY_COUNT,
            JingleNodeDescriptor.load_descriptor,
        )
        log.debug(
            "Loaded %s STUN servers and %s Jingle Nodes for %s",
            len(self.stun_servers),
            len(self.jingle_nodes),
            self.edited_account_uid,
        )

        if media_disabled:
            log.debug("Media service disabled, keeping default encodings")
        elif self.encodings_registration is not None:
            media_service = None
            if self.service_locator is not None:
                media_service = self.service_locator.lookup(MEDIA_SERVICE)
            self.encodings_registration.load(account, media_service)

    def _load_stun_servers(
        self, account: PersistedAccount
    ) -> list[StunServerDescriptor]:
        servers: list[StunServerDescriptor] = codec.decode(
            self.properties,
            config.STUN_PREFIX,
            config.MAX_STUN_SERVER_COUNT,
            StunServerDescriptor.load_descriptor,
        )
        if self.stun_password_loader is None:
            return servers
        for i, server in enumerate(servers):
            index_key = codec.index_prefix(config.STUN_PREFIX, i)
            stun_password = self.stun_password_loader.load(account, index_key)
            if stun_password is not None:
                server.password = stun_password
        return servers

    def store_properties(
        self,
        factory: str,
        password: Optional[str],
        protocol_icon_path: Optional[str] = None,
        account_icon_path: Optional[str] = None,
        is_modification: bool = False,
        account_properties: Optional[MutableMapping[str, str]] = None,
    ) -> MutableMapping[str, str]:
        """
        Merge the account configuration held by this model into
        ``account_properties``.

        When modifying a stored account, its previous STUN servers and Jingle
        Nodes are deleted from the persisted store and from
        ``account_properties`` before both lists are written again from
        index 0. Everything is staged and validated before anything is
        deleted.

        :param factory: Protocol name used to look up the stored account.
        :param password: Stored only if :attr:`remember_password` is set.
        :param protocol_icon_path: Path to the protocol icon, if any.
        :param account_icon_path: Path to the account icon, if any.
        :param is_modification: Whether this session edits a stored account.
        :param account_properties: The map to fill. A new dict is used if
            not given.
        :raises ConfigurationError: if a staged property is invalid.
        :return: ``account_properties``
        """
        if account_properties is None:
            account_properties = {}

        self.password = password if self.remember_password else None
        staged = AccountIdentity()
        self._stage_identity(staged)

        cleanup = None
        if is_modification:
            cleanup = self._stage_lists(factory, staged.properties)

        self.security_registration.store(staged.properties)
        if self.encodings_registration is not None:
            self.encodings_registration.store(staged.properties)

        _validate_staged(staged.properties)

        if cleanup is not None:
            account_key, stale_names = cleanup
            if stale_names:
                log.debug(
                    "Deleting %s stale properties of %s", len(stale_names), account_key
                )
                self.persisted_store.delete_many(account_key, stale_names)  # type:ignore
            codec.clear_prefixes(account_properties, *self._list_prefixes())
        if not self.remember_password:
            account_properties.pop(PASSWORD, None)

        self.identity.clear()
        self.properties.update(staged.properties)
        return self.identity.store_properties(
            protocol_icon_path, account_icon_path, account_properties
        )

    def _stage_identity(self, staged: AccountIdentity) -> None:
        staged.set_or_remove_if_empty(USER_ID, self.user_id)
        staged.password = self.password
        staged.set_or_remove_if_empty(SERVER_ADDRESS, self.server_address)
        if self.server_overridden:
            staged.set_bool(IS_SERVER_OVERRIDDEN, True)

    def _stage_lists(
        self, factory: str, staged: PropertyMap
    ) -> Optional[tuple[str, list[str]]]:
        """
        Encode both lists if the edited account has been stored before.

        :return: the stored account key and the persisted property names to
            delete, including a password that is no longer remembered, or
            ``None`` if there is nothing to clean up.
        """
        if not self.edited_account_uid:
            log.debug("No edited account UID, skipping cleanup")
            return None
        if self.account_lookup is None or self.persisted_store is None:
            raise RuntimeError(
                "Storing a modification requires an account lookup and a property store"
            )

        account_key = self.account_lookup.resolve(factory, self.edited_account_uid)
        if account_key is None:
            log.debug(
                "%s has not been stored yet, skipping cleanup", self.edited_account_uid
            )
            return None

        codec.validate(
            self.stun_servers, config.STUN_PREFIX, config.MAX_STUN_SERVER_COUNT
        )
        codec.validate(self.jingle_nodes, config.JN_PREFIX, config.MAX_JN_RELAY_COUNT)
        codec.encode(self.stun_servers, config.STUN_PREFIX, staged)
        codec.encode(self.jingle_nodes, config.JN_PREFIX, staged)

        names = self.persisted_store.list_names(account_key)
        stale_names = names_with_prefixes(names, self._list_prefixes())
        if not self.remember_password and PASSWORD in names:
            stale_names.append(PASSWORD)
        return account_key, stale_names

    @staticmethod
    def _list_prefixes() -> tuple[str, str]:
        return config.STUN_PREFIX, config.JN_PREFIX


def _validate_staged(staged: PropertyMap) -> None:
    for key, value in staged.items():
        if not isinstance(key, str) or not key:
            raise ConfigurationError("invalid-value", repr(key), "Invalid key")
        if not isinstance(value, str):
            raise ConfigurationError(
                "invalid-value", key, f"Expected a string, got {value!r}"
            )
    for key in INTEGER_KEYS:
        value = staged.get(key)
        if value is not None and not value.lstrip("-").isdigit():
            raise ConfigurationError("invalid-value", key, "Expected an integer")


log = logging.getLogger(__name__)
