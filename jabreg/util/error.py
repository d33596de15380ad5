import logging
from typing import Literal, Optional

Reasons = Literal[
    "missing-field",
    "invalid-value",
    "invalid-port",
]

TEXT_BY_REASON: dict[Reasons, str] = {
    "missing-field": "A required property is missing",
    "invalid-value": "A property has an invalid value",
    "invalid-port": "A port must be an integer between 1 and 65535",
}


class ConfigurationError(Exception):
    """
    Raised when the properties staged for an account are structurally
    invalid, eg a STUN server without an address.

    Nothing has been written to, or deleted from, the persisted store when
    this is raised: callers should simply discard the attempt.
    """

    def __init__(
        self,
        reason: Reasons = "invalid-value",
        key: Optional[str] = None,
        text: str = "",
    ):
        self.reason = reason
        self.key = key
        self.text = text or TEXT_BY_REASON[reason]
        super().__init__(reason, key, self.text)

    def __str__(self):
        if self.key is None:
            return f"{self.reason}: {self.text}"
        return f"{self.reason} ({self.key}): {self.text}"


class AccountNotFound(LookupError):
    """
    Raised by the command line interface when an account UID does not match
    any stored account.
    """


log = logging.getLogger(__name__)
