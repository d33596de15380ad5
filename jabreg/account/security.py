import logging
from typing import Mapping, Optional

from ..util import bool_to_str, str_to_bool, sub_properties
from ..util.types import SAVP_OFF, PersistedAccount, PropertyMap

DEFAULT_ENCRYPTION = "DEFAULT_ENCRYPTION"
DEFAULT_SIPZRTP_ATTRIBUTE = "DEFAULT_SIPZRTP_ATTRIBUTE"
SAVP_OPTION = "SAVP_OPTION"
SDES_CIPHER_SUITES = "SDES_CIPHER_SUITES"
ENCRYPTION_PROTOCOL = "ENCRYPTION_PROTOCOL"
ENCRYPTION_PROTOCOL_STATUS = "ENCRYPTION_PROTOCOL_STATUS"

DEFAULT_ENCRYPTION_PROTOCOLS = ("ZRTP", "SDES", "DTLS_SRTP")


class SecurityAccountRegistration:
    """
    Call encryption settings of an account (ZRTP, SDES, DTLS-SRTP).

    Owns the ``DEFAULT_ENCRYPTION``, ``SAVP_OPTION``, ``SDES_CIPHER_SUITES``
    and ``ENCRYPTION_PROTOCOL*`` properties.
    """

    def __init__(self):
        self.default_encryption = True
        self.sip_zrtp_attribute = True
        self._savp_option = SAVP_OFF
        self.sdes_cipher_suites: Optional[str] = None
        # name -> priority, lowest first
        self.encryption_protocols: dict[str, int] = {
            name: i for i, name in enumerate(DEFAULT_ENCRYPTION_PROTOCOLS)
        }
        self.encryption_protocol_status: dict[str, bool] = {
            name: name == "ZRTP" for name in DEFAULT_ENCRYPTION_PROTOCOLS
        }

    @property
    def savp_option(self) -> int:
        return self._savp_option

    @savp_option.setter
    def savp_option(self, value: int):
        self._savp_option = value

    def sorted_protocols(self) -> list[str]:
        return sorted(self.encryption_protocols, key=self.encryption_protocols.get)  # type:ignore

    def load(self, account: PersistedAccount) -> None:
        self._load_properties(account.get_properties())

    def _load_properties(self, props: Mapping[str, str]) -> None:
        self.default_encryption = str_to_bool(props.get(DEFAULT_ENCRYPTION), True)
        self.sip_zrtp_attribute = str_to_bool(
            props.get(DEFAULT_SIPZRTP_ATTRIBUTE), True
        )
        try:
            self.savp_option = int(props.get(SAVP_OPTION) or SAVP_OFF)
        except ValueError:
            log.warning("Invalid %s: %r", SAVP_OPTION, props.get(SAVP_OPTION))
            self.savp_option = SAVP_OFF
        self.sdes_cipher_suites = props.get(SDES_CIPHER_SUITES) or None

        priorities = sub_properties(props, ENCRYPTION_PROTOCOL)
        if priorities:
            self.encryption_protocols = {}
            for name, priority in priorities.items():
                try:
                    self.encryption_protocols[name] = int(priority)
                except ValueError:
                    log.warning("Invalid priority for %s: %r", name, priority)
        statuses = sub_properties(props, ENCRYPTION_PROTOCOL_STATUS)
        if statuses:
            self.encryption_protocol_status = {
                name: str_to_bool(status) for name, status in statuses.items()
            }
        log.debug("Loaded encryption protocols: %s", self.sorted_protocols())

    def store(self, props: PropertyMap) -> None:
        props[DEFAULT_ENCRYPTION] = bool_to_str(self.default_encryption)
        props[DEFAULT_SIPZRTP_ATTRIBUTE] = bool_to_str(self.sip_zrtp_attribute)
        props[SAVP_OPTION] = str(self.savp_option)
        if self.sdes_cipher_suites:
            props[SDES_CIPHER_SUITES] = self.sdes_cipher_suites
        for name, priority in self.encryption_protocols.items():
            props[f"{ENCRYPTION_PROTOCOL}.{name}"] = str(priority)
        for name, enabled in self.encryption_protocol_status.items():
            props[f"{ENCRYPTION_PROTOCOL_STATUS}.{name}"] = bool_to_str(enabled)


class JabberSecurityRegistration(SecurityAccountRegistration):
    """
    RTP/SAVP indication is meaningless for XMPP accounts: it is always off.
    """

    @property
    def savp_option(self) -> int:
        return SAVP_OFF

    @savp_option.setter
    def savp_option(self, value: int):
        pass


log = logging.getLogger(__name__)
