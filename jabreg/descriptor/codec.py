"""
Ordered lists of descriptors, flattened into account properties.

Element ``i`` of a list stored under ``prefix`` lives in the
``<prefix><i>.<FIELD>`` keys. Indices are contiguous and start at 0, so
reading stops at the first index that does not hold a descriptor.
"""

import logging
from typing import Callable, Iterable, Mapping, MutableMapping, Optional, Sequence

from ..util.error import ConfigurationError
from ..util.types import DescriptorType, PropertyMap
from ..util.util import names_with_prefixes

Loader = Callable[[Mapping[str, str], str], Optional[DescriptorType]]


def index_prefix(prefix: str, index: int) -> str:
    """
    >>> index_prefix("STUN", 3)
    'STUN3'
    """
    if index < 0:
        raise ValueError("Negative index", index)
    return f"{prefix}{index}"


def encode(
    descriptors: Iterable[DescriptorType], prefix: str, store: PropertyMap
) -> None:
    """
    Write ``descriptors`` in order, starting at index 0.

    Entries already present beyond the last written index are left alone:
    use :func:`clear_prefixes` first if the list may have shrunk.
    """
    count = 0
    for i, descriptor in enumerate(descriptors):
        descriptor.store_descriptor(store, index_prefix(prefix, i))
        count += 1
    log.trace("Encoded %s descriptors under %s", count, prefix)  # type:ignore


def decode_one(
    store: Mapping[str, str], prefix: str, index: int, loader: Loader
) -> Optional[DescriptorType]:
    """
    :return: the descriptor at ``index``, or ``None`` when there is none,
        which marks the end of the list.
    """
    return loader(store, index_prefix(prefix, index))


def decode(
    store: Mapping[str, str], prefix: str, max_count: int, loader: Loader
) -> list[DescriptorType]:
    result: list[DescriptorType] = []
    for i in range(max_count):
        descriptor = decode_one(store, prefix, i, loader)
        if descriptor is None:
            return result
        result.append(descriptor)
    if decode_one(store, prefix, max_count, loader) is not None:
        log.debug(
            "Ignoring descriptors beyond the maximum of %s for %s", max_count, prefix
        )
    return result


def validate(
    descriptors: Sequence[DescriptorType],
    prefix: str,
    max_count: Optional[int] = None,
) -> None:
    """
    Raise :class:`~jabreg.util.error.ConfigurationError` for the first
    invalid descriptor, or if there are more than ``max_count`` of them.
    """
    if max_count is not None and len(descriptors) > max_count:
        raise ConfigurationError(
            "invalid-value",
            prefix,
            f"At most {max_count} entries can be stored, got {len(descriptors)}",
        )
    for i, descriptor in enumerate(descriptors):
        descriptor.validate(index_prefix(prefix, i))


def clear_prefixes(store: MutableMapping[str, str], *prefixes: str) -> list[str]:
    """
    Remove every key starting with any of ``prefixes``.

    :return: the removed keys
    """
    removed = names_with_prefixes(list(store), prefixes)
    for key in removed:
        del store[key]
    if removed:
        log.debug("Removed %s stale keys for %s", len(removed), prefixes)
    return removed


log = logging.getLogger(__name__)
