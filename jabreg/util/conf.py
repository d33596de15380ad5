"""
Turn a plain python module (or class) holding UPPER_CASE constants into
command line, environment variable and INI file options.

For each option ``NAME``:

- ``NAME__DOC`` is mandatory and becomes the help text,
- ``NAME__SHORT`` optionally adds a one-letter flag,
- ``NAME__DYNAMIC_DEFAULT`` marks an option without a static default that
  :meth:`ConfigModule.update_dynamic_defaults` fills in after parsing.

Options without a default value and without a dynamic default are required.
"""

import logging
from functools import cached_property
from types import GenericAlias
from typing import Any, Optional, Union, get_args, get_origin, get_type_hints

import configargparse


class Option:
    DOC_SUFFIX = "__DOC"
    DYNAMIC_DEFAULT_SUFFIX = "__DYNAMIC_DEFAULT"
    SHORT_SUFFIX = "__SHORT"

    def __init__(self, parent: "ConfigModule", name: str):
        self.parent = parent
        self.config_obj = parent.config_obj
        self.name = name

    @cached_property
    def doc(self) -> str:
        return getattr(self.config_obj, self.name + self.DOC_SUFFIX)

    @cached_property
    def required(self) -> bool:
        return not hasattr(
            self.config_obj, self.name + self.DYNAMIC_DEFAULT_SUFFIX
        ) and not hasattr(self.config_obj, self.name)

    @cached_property
    def default(self) -> Any:
        return getattr(self.config_obj, self.name, None)

    @cached_property
    def short(self) -> Optional[str]:
        return getattr(self.config_obj, self.name + self.SHORT_SUFFIX, None)

    @cached_property
    def _hint(self):
        return get_type_hints(self.config_obj).get(self.name, type(self.default))

    @cached_property
    def nargs(self):
        if isinstance(self._hint, GenericAlias):
            args = get_args(self._hint)
            return "*" if args[-1] is Ellipsis else len(args)
        return None

    @cached_property
    def type(self):
        hint = self._hint
        if _is_optional(hint) or isinstance(hint, GenericAlias):
            return get_args(hint)[0]
        return hint

    @cached_property
    def names(self) -> list[str]:
        res = ["--" + self.name.lower().replace("_", "-")]
        if s := self.short:
            res.append("-" + s)
        return res

    @cached_property
    def kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = dict(
            required=self.required,
            help=self.doc,
            env_var=self.parent.ENV_VAR_PREFIX + self.name,
        )
        if self.type is bool:
            kwargs["action"] = "store_false" if self.default else "store_true"
        else:
            kwargs["type"] = self.type
            if not self.required:
                kwargs["default"] = self.default
        if n := self.nargs:
            kwargs["nargs"] = n
        return kwargs


class ConfigModule:
    ENV_VAR_PREFIX = "JABREG_"

    def __init__(
        self, config_obj, parser: Optional[configargparse.ArgumentParser] = None
    ):
        self.config_obj = config_obj
        if parser is None:
            parser = configargparse.ArgumentParser()
        self.parser = parser

        self.add_options_to_parser()

    def _list_options(self) -> set[str]:
        return {
            o
            for o in (set(dir(self.config_obj)) | set(get_type_hints(self.config_obj)))
            if o.upper() == o and not o.startswith("_") and "__" not in o
        }

    @cached_property
    def options(self) -> list[Option]:
        return [Option(self, name) for name in self._list_options()]

    def add_options_to_parser(self):
        for o in sorted(self.options, key=lambda x: (not x.required, x.name)):
            self.parser.add_argument(*o.names, **o.kwargs)

    def set_conf(self, argv: Optional[list[str]] = None):
        if argv is not None:
            argv = self._normalize_bool_argv(argv)
        args, rest = self.parser.parse_known_args(argv)
        self.update_dynamic_defaults(args)
        for name in self._list_options():
            value = getattr(args, name.lower())
            log.debug("Setting '%s' to %r", name, value)
            setattr(self.config_obj, name, value)
        return args, rest

    def update_dynamic_defaults(self, args):
        pass

    def _normalize_bool_argv(self, argv: list[str]) -> list[str]:
        # INI files end up as pseudo-argv such as --some-bool=true, but
        # store_true/store_false actions only understand the bare flag.
        bool_options = {o.name: o for o in self.options if o.type is bool}
        result = []
        for arg in argv:
            name, sep, value = arg.partition("=")
            opt = bool_options.get(_argv_to_option_name(name))
            if opt is None:
                result.append(arg)
                continue
            wanted = value in _TRUEISH if sep else True
            # the flag flips the default, so only keep it when it changes
            # something
            if wanted != bool(opt.default):
                result.append(name)
        log.debug("Normalized boolean flags from %s to %s", argv, result)
        return result


def _is_optional(t) -> bool:
    if get_origin(t) is Union:
        args = get_args(t)
        if len(args) == 2 and isinstance(None, args[1]):
            return True
    return False


def _argv_to_option_name(arg: str) -> str:
    return arg.upper().removeprefix("--").replace("-", "_")


_TRUEISH = {"true", "True", "1", "on", "enabled"}


log = logging.getLogger(__name__)
