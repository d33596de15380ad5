"""
The main jabreg package.

Contains the account registration model of XMPP accounts and the codec that
flattens its STUN servers and Jingle Nodes into account properties.
"""

from .account import (  # noqa: F401
    AccountIdentity,
    AccountRegistrationModel,
    EncodingsRegistration,
    JabberSecurityRegistration,
    get_server_from_user_name,
)
from .core import config as global_config  # noqa: F401
from .descriptor import JingleNodeDescriptor, StunServerDescriptor  # noqa: F401
from .util.error import ConfigurationError  # noqa: F401
from .util.util import addLoggingLevel

__all__ = [
    "AccountIdentity",
    "AccountRegistrationModel",
    "ConfigurationError",
    "EncodingsRegistration",
    "JabberSecurityRegistration",
    "JingleNodeDescriptor",
    "StunServerDescriptor",
    "get_server_from_user_name",
    "global_config",
]

addLoggingLevel()
