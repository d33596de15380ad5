from .encodings import EncodingsRegistration
from .identity import AccountIdentity, merge_properties
from .registration import AccountRegistrationModel, get_server_from_user_name
from .security import JabberSecurityRegistration, SecurityAccountRegistration

__all__ = [
    "AccountIdentity",
    "AccountRegistrationModel",
    "EncodingsRegistration",
    "JabberSecurityRegistration",
    "SecurityAccountRegistration",
    "get_server_from_user_name",
    "merge_properties",
]
