import logging
from typing import Iterable, Mapping, Optional

TRUE = "true"
FALSE = "false"


def bool_to_str(value: bool) -> str:
    return TRUE if value else FALSE


def str_to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"true", "1", "yes", "on"}


def names_with_prefixes(names: Iterable[str], prefixes: Iterable[str]) -> list[str]:
    """
    Filter property names that start with any of the given prefixes.

    >>> names_with_prefixes(["STUN0.PORT", "USER_ID", "JINGLENODES1.ADDRESS"], ["STUN", "JINGLENODES"])
    ['STUN0.PORT', 'JINGLENODES1.ADDRESS']
    """
    prefixes = tuple(prefixes)
    return [n for n in names if n.startswith(prefixes)]


def sub_properties(props: Mapping[str, str], prefix: str) -> dict[str, str]:
    """
    Extract ``prefix.<name>`` entries, keyed by ``<name>``.
    """
    dotted = prefix + "."
    return {k[len(dotted) :]: v for k, v in props.items() if k.startswith(dotted)}


# from https://stackoverflow.com/a/35804945/5902284
def addLoggingLevel(
    levelName: str = "TRACE", levelNum: int = logging.DEBUG - 5, methodName=None
):
    """
    Adds a new logging level to the `logging` module and to the currently
    configured logger class.

    Does nothing if the level or the method name is already defined.
    """
    if not methodName:
        methodName = levelName.lower()

    for owner, attr in (
        (logging, levelName),
        (logging, methodName),
        (logging.getLoggerClass(), methodName),
    ):
        if hasattr(owner, attr):
            log.debug("%s already defined in %s", attr, owner)
            return

    def logForLevel(self, message, *args, **kwargs):
        if self.isEnabledFor(levelNum):
            self._log(levelNum, message, args, **kwargs)

    def logToRoot(message, *args, **kwargs):
        logging.log(levelNum, message, *args, **kwargs)

    logging.addLevelName(levelNum, levelName)
    setattr(logging, levelName, levelNum)
    setattr(logging.getLoggerClass(), methodName, logForLevel)
    setattr(logging, methodName, logToRoot)


log = logging.getLogger(__name__)
