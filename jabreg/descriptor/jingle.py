from dataclasses import dataclass
from typing import Mapping, Optional

from slixmpp import JID
from slixmpp.jid import InvalidJID

from ..util.error import ConfigurationError
from ..util.types import PropertyMap
from ..util.util import bool_to_str, str_to_bool

ADDRESS = "ADDRESS"
IS_RELAY_SUPPORTED = "IS_RELAY_SUPPORTED"


@dataclass
class JingleNodeDescriptor:
    """
    A Jingle Nodes (XEP-0278) tracker or relay, identified by its JID.
    """

    address: str
    is_relay_supported: bool = False

    def store_descriptor(self, props: PropertyMap, name_prefix: str) -> None:
        props[f"{name_prefix}.{ADDRESS}"] = self.address
        props[f"{name_prefix}.{IS_RELAY_SUPPORTED}"] = bool_to_str(
            self.is_relay_supported
        )

    @classmethod
    def load_descriptor(
        cls, props: Mapping[str, str], name_prefix: str
    ) -> Optional["JingleNodeDescriptor"]:
        address = props.get(f"{name_prefix}.{ADDRESS}")
        if not address:
            return None
        return cls(
            address=address,
            is_relay_supported=str_to_bool(
                props.get(f"{name_prefix}.{IS_RELAY_SUPPORTED}")
            ),
        )

    def validate(self, name_prefix: str) -> None:
        key = f"{name_prefix}.{ADDRESS}"
        if not self.address or not self.address.strip():
            raise ConfigurationError("missing-field", key)
        try:
            JID(self.address)
        except InvalidJID as e:
            raise ConfigurationError("invalid-value", key, str(e))
