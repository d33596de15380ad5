import logging
from dataclasses import dataclass
from typing import Literal, Mapping, Optional, get_args

from ..util.error import ConfigurationError
from ..util.types import PropertyMap
from ..util.util import bool_to_str, str_to_bool

TurnProtocol = Literal["udp", "tcp", "tls"]

DEFAULT_STUN_PORT = 3478

ADDRESS = "ADDRESS"
PORT = "PORT"
USERNAME = "USERNAME"
PASSWORD = "PASSWORD"
IS_TURN_SUPPORTED = "IS_TURN_SUPPORTED"
PROTOCOL = "PROTOCOL"


@dataclass
class StunServerDescriptor:
    """
    A STUN (or TURN) server entered by the user for an account.
    """

    address: str
    port: int = DEFAULT_STUN_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    is_turn_supported: bool = False
    protocol: TurnProtocol = "udp"

    def store_descriptor(self, props: PropertyMap, name_prefix: str) -> None:
        """
        Write this server under ``<name_prefix>.<FIELD>`` keys.

        :param props: Where to write.
        :param name_prefix: eg ``STUN2``
        """
        props[f"{name_prefix}.{ADDRESS}"] = self.address
        props[f"{name_prefix}.{PORT}"] = str(self.port)
        if self.username:
            props[f"{name_prefix}.{USERNAME}"] = self.username
        if self.password:
            props[f"{name_prefix}.{PASSWORD}"] = self.password
        props[f"{name_prefix}.{IS_TURN_SUPPORTED}"] = bool_to_str(
            self.is_turn_supported
        )
        props[f"{name_prefix}.{PROTOCOL}"] = self.protocol

    @classmethod
    def load_descriptor(
        cls, props: Mapping[str, str], name_prefix: str
    ) -> Optional["StunServerDescriptor"]:
        """
        Read the server stored under ``name_prefix``.

        :return: ``None`` if there is no server at this prefix.
        """
        address = props.get(f"{name_prefix}.{ADDRESS}")
        if not address:
            return None

        raw_port = props.get(f"{name_prefix}.{PORT}")
        try:
            port = int(raw_port) if raw_port else DEFAULT_STUN_PORT
        except ValueError:
            log.warning(
                "Ignoring invalid port %r for %s, using %s",
                raw_port,
                name_prefix,
                DEFAULT_STUN_PORT,
            )
            port = DEFAULT_STUN_PORT

        protocol = props.get(f"{name_prefix}.{PROTOCOL}", "udp").lower()
        if protocol not in get_args(TurnProtocol):
            log.warning("Unknown TURN protocol %r for %s", protocol, name_prefix)
            protocol = "udp"

        return cls(
            address=address,
            port=port,
            username=props.get(f"{name_prefix}.{USERNAME}") or None,
            password=props.get(f"{name_prefix}.{PASSWORD}") or None,
            is_turn_supported=str_to_bool(
                props.get(f"{name_prefix}.{IS_TURN_SUPPORTED}")
            ),
            protocol=protocol,  # type:ignore
        )

    def validate(self, name_prefix: str) -> None:
        if not self.address or not self.address.strip():
            raise ConfigurationError("missing-field", f"{name_prefix}.{ADDRESS}")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ConfigurationError("invalid-port", f"{name_prefix}.{PORT}")
        if self.protocol not in get_args(TurnProtocol):
            raise ConfigurationError(
                "invalid-value",
                f"{name_prefix}.{PROTOCOL}",
                f"Unknown TURN protocol: {self.protocol}",
            )


log = logging.getLogger(__name__)
