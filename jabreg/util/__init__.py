from .util import bool_to_str, names_with_prefixes, str_to_bool, sub_properties

__all__ = [
    "bool_to_str",
    "names_with_prefixes",
    "str_to_bool",
    "sub_properties",
]
