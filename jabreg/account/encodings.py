import logging
from typing import Mapping, Optional

from ..util import bool_to_str, str_to_bool, sub_properties
from ..util.types import MediaService, PersistedAccount, PropertyMap

OVERRIDE_ENCODINGS = "OVERRIDE_ENCODINGS"
ENCODINGS_PREFIX = "Encodings"


class EncodingsRegistration:
    """
    Per-account audio/video codec preferences.

    ``encoding_properties`` holds the ``Encodings.*`` entries, eg
    ``{"Encodings.opus/48000": "750"}``. They are only meaningful to the
    media service when ``override_encodings`` is set.
    """

    def __init__(self):
        self.override_encodings = False
        self.encoding_properties: dict[str, str] = {}

    def load(
        self, account: PersistedAccount, media_service: Optional[MediaService]
    ) -> None:
        props = account.get_properties()
        self.override_encodings = str_to_bool(props.get(OVERRIDE_ENCODINGS))
        self.encoding_properties = {
            f"{ENCODINGS_PREFIX}.{name}": value
            for name, value in sub_properties(props, ENCODINGS_PREFIX).items()
        }
        if self.encoding_properties:
            return
        if media_service is None:
            log.debug("No media service, keeping default encodings")
            return
        self.encoding_properties = _prefixed(
            media_service.get_encoding_configuration()
        )
        log.debug(
            "Seeded %s encodings from the media service",
            len(self.encoding_properties),
        )

    def store(self, props: PropertyMap) -> None:
        props[OVERRIDE_ENCODINGS] = bool_to_str(self.override_encodings)
        props.update(self.encoding_properties)


def _prefixed(config: Mapping[str, str]) -> dict[str, str]:
    dotted = ENCODINGS_PREFIX + "."
    return {
        (k if k.startswith(dotted) else dotted + k): str(v) for k, v in config.items()
    }


log = logging.getLogger(__name__)
