"""
Inspect and edit the connectivity settings of stored XMPP accounts.

jabreg can be configured via CLI args, environment variables and/or INI files.

To use env vars, use this convention: ``--db-url`` becomes ``JABREG_DB_URL``.

Everything in ``/etc/jabreg/conf.d/*`` is automatically used.
Use the long version of the CLI arg without the double dash prefix inside an
INI file, eg ``debug=true``.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional

import configargparse

from jabreg.__version__ import __version__
from jabreg.account import AccountRegistrationModel
from jabreg.core import config
from jabreg.db import (
    SQLPropertyStore,
    StoredPasswordLoader,
    StoredStunPasswordLoader,
    get_engine,
)
from jabreg.descriptor import JingleNodeDescriptor, StunServerDescriptor
from jabreg.descriptor.stun import DEFAULT_STUN_PORT
from jabreg.util.conf import ConfigModule
from jabreg.util.error import AccountNotFound, ConfigurationError

JABBER = "Jabber"
MASKED = "********"


class MainConfig(ConfigModule):
    def update_dynamic_defaults(self, args):
        # force=True is needed in case we call a logger before this is reached,
        # or basicConfig has no effect
        logging.basicConfig(
            level=args.loglevel,
            filename=args.log_file,
            force=True,
            format=args.log_format,
        )

        if args.home_dir is None:
            args.home_dir = Path.home() / ".local" / "share" / "jabreg"

        if args.db_url is None:
            args.db_url = f"sqlite:///{args.home_dir}/accounts.sqlite"


def get_configurator():
    p = configargparse.ArgumentParser(
        default_config_files=os.getenv(
            "JABREG_CONF_DIR", "/etc/jabreg/conf.d/*.conf"
        ).split(":"),
        description=__doc__,
    )
    p.add_argument(
        "-c",
        "--config",
        help="Path to a INI config file.",
        env_var="JABREG_CONFIG",
        is_config_file=True,
    )
    p.add_argument(
        "-q",
        "--quiet",
        help="loglevel=WARNING",
        action="store_const",
        dest="loglevel",
        const=logging.WARNING,
        default=logging.INFO,
        env_var="JABREG_QUIET",
    )
    p.add_argument(
        "-d",
        "--debug",
        help="loglevel=DEBUG",
        action="store_const",
        dest="loglevel",
        const=logging.DEBUG,
        env_var="JABREG_DEBUG",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.add_argument(
        "--factory",
        default=JABBER,
        help="Protocol name of the accounts",
    )

    p.add_argument(
        "command",
        choices=sorted(COMMANDS),
        help="list: list stored accounts. "
        "show: show the properties of an account. "
        "set-stun: replace the additional STUN servers of an account. "
        "set-jingle-nodes: replace the additional Jingle Nodes of an account.",
    )
    p.add_argument("account_uid", nargs="?", help="Unique ID of the account")
    p.add_argument(
        "items",
        nargs="*",
        metavar="ITEM",
        help="HOST[:PORT] for set-stun, JID for set-jingle-nodes",
    )
    p.add_argument("--turn", action="store_true", help="STUN servers support TURN")
    p.add_argument("--username", help="TURN username")
    p.add_argument("--relay", action="store_true", help="Jingle Nodes support relaying")

    return MainConfig(config, p)


def get_parser():
    return get_configurator().parser


def parse_stun_server(
    value: str, turn: bool = False, username: Optional[str] = None
) -> StunServerDescriptor:
    host, sep, port = value.rpartition(":")
    if not sep:
        host, port = value, ""
    try:
        port_number = int(port) if port else DEFAULT_STUN_PORT
    except ValueError:
        raise ConfigurationError("invalid-port", value)
    return StunServerDescriptor(
        address=host, port=port_number, is_turn_supported=turn, username=username
    )


def edit_account(
    store: SQLPropertyStore,
    factory: str,
    account_uid: str,
    edit: Callable[[AccountRegistrationModel], None],
) -> dict[str, str]:
    """
    Run a modification session on a stored account and persist the result.
    """
    account_key = store.resolve(factory, account_uid)
    if account_key is None:
        raise AccountNotFound(account_uid)
    account = store.get_account(account_key)
    assert account is not None

    model = AccountRegistrationModel(
        account_lookup=store,
        persisted_store=store,
        password_loader=StoredPasswordLoader(store),
        stun_password_loader=StoredStunPasswordLoader(store),
    )
    model.load_account(account, media_disabled=True)
    edit(model)
    props = model.store_properties(
        factory,
        model.password,
        is_modification=True,
        account_properties=dict(account.properties),
    )
    store.update(account_key, props)
    log.info("Updated %s", account_uid)
    return dict(props)


def list_accounts(store: SQLPropertyStore, args) -> int:
    for account in store.list_accounts():
        print(f"{account.key}\t{account.factory}\t{account.account_uid}")
    return 0


def show_account(store: SQLPropertyStore, args) -> int:
    account_key = store.resolve(args.factory, args.account_uid)
    if account_key is None:
        raise AccountNotFound(args.account_uid)
    for name, value in sorted(store.get_all(account_key).items()):
        if name.endswith("PASSWORD"):
            value = MASKED
        print(f"{name}={value}")
    return 0


def set_stun(store: SQLPropertyStore, args) -> int:
    servers = [parse_stun_server(s, args.turn, args.username) for s in args.items]

    def edit(model: AccountRegistrationModel):
        model.stun_servers = servers

    edit_account(store, args.factory, args.account_uid, edit)
    return 0


def set_jingle_nodes(store: SQLPropertyStore, args) -> int:
    nodes = [JingleNodeDescriptor(n, is_relay_supported=args.relay) for n in args.items]

    def edit(model: AccountRegistrationModel):
        model.jingle_nodes = nodes

    edit_account(store, args.factory, args.account_uid, edit)
    return 0


def _sqlite_dir(db_url: str) -> Optional[Path]:
    if not db_url.startswith("sqlite:///"):
        return None
    path = db_url.removeprefix("sqlite:///")
    if not path or path == ":memory:":
        return None
    return Path(path).parent


COMMANDS = {
    "list": list_accounts,
    "show": show_account,
    "set-stun": set_stun,
    "set-jingle-nodes": set_jingle_nodes,
}


def main(argv: Optional[list[str]] = None) -> int:
    configurator = get_configurator()
    args, unknown_argv = configurator.set_conf(argv)
    if unknown_argv:
        configurator.parser.error(f"unrecognized arguments: {' '.join(unknown_argv)}")
    if args.command != "list" and not args.account_uid:
        configurator.parser.error(f"{args.command} requires an account UID")

    if db_dir := _sqlite_dir(config.DB_URL):
        if not db_dir.exists():
            logging.info("Creating directory '%s'", db_dir)
            os.makedirs(db_dir)

    store = SQLPropertyStore(get_engine(config.DB_URL))
    try:
        return COMMANDS[args.command](store, args)
    except AccountNotFound as e:
        log.error("No such account: %s", e.args[0])
        return 1
    except ConfigurationError as e:
        log.error("Invalid configuration: %s", e)
        return 2


log = logging.getLogger(__name__)


if __name__ == "__main__":
    sys.exit(main())
