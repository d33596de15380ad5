from pathlib import Path
from typing import Optional

# Dynamic default (depends on other values)

DB_URL: str
DB_URL__DOC = (
    "Database URL of the account property store, see "
    "<https://docs.sqlalchemy.org/en/20/core/engines.html#database-urls>. "
    "Defaults to sqlite:///${HOME_DIR}/accounts.sqlite"
)
DB_URL__DYNAMIC_DEFAULT = True

HOME_DIR: Path
HOME_DIR__DOC = (
    "Directory where jabreg keeps its persistent data. "
    "Defaults to ~/.local/share/jabreg"
)
HOME_DIR__DYNAMIC_DEFAULT = True

# Optional, so default value + type hint if default is None

STUN_PREFIX = "STUN"
STUN_PREFIX__DOC = (
    "Prefix of the account properties holding the user-supplied STUN/TURN "
    "servers, eg STUN0.ADDRESS"
)

JN_PREFIX = "JINGLENODES"
JN_PREFIX__DOC = (
    "Prefix of the account properties holding the user-supplied Jingle "
    "Nodes trackers and relays, eg JINGLENODES0.ADDRESS"
)

MAX_STUN_SERVER_COUNT = 100
MAX_STUN_SERVER_COUNT__DOC = "Maximum number of STUN servers read from an account"

MAX_JN_RELAY_COUNT = 100
MAX_JN_RELAY_COUNT__DOC = "Maximum number of Jingle Nodes read from an account"

RESERVED_ALIAS_DOMAIN = "gmail.com"
RESERVED_ALIAS_DOMAIN__DOC = (
    "User domain that must not be used as the connect server. Accounts on "
    "this domain connect to CANONICAL_SERVER instead."
)

CANONICAL_SERVER = "talk.google.com"
CANONICAL_SERVER__DOC = "Connect server used for RESERVED_ALIAS_DOMAIN accounts"

DEFAULT_USER_SUFFIX: Optional[str] = None
DEFAULT_USER_SUFFIX__DOC = (
    "Domain appended to user IDs that are entered without '@domain'"
)

DISABLE_MEDIA_SERVICE = False
DISABLE_MEDIA_SERVICE__DOC = (
    "Do not query the media service when loading an account. Encodings then "
    "keep their default configuration."
)

LOG_FILE: Optional[Path] = None
LOG_FILE__DOC = "Log to a file instead of stdout/err"

LOG_FORMAT: str = "%(levelname)s:%(name)s:%(message)s"
LOG_FORMAT__DOC = (
    "Optionally, a format string for logging messages. Refer to "
    "https://docs.python.org/3/library/logging.html#logrecord-attributes "
    "for available options."
)
