import logging
from pathlib import Path
from typing import Optional

import pytest

from jabreg import main
from jabreg.core import config
from jabreg.util.conf import ConfigModule


@pytest.fixture(autouse=True)
def no_system_conf(monkeypatch, tmp_path):
    monkeypatch.setenv("JABREG_CONF_DIR", str(tmp_path / "conf.d" / "*.conf"))


def test_get_parser(monkeypatch):
    class Config:
        REQUIRED: str
        REQUIRED__DOC = "some doc"
        REQUIRED__SHORT = "r"

        REQUIRED_INT: int
        REQUIRED_INT__DOC = "some doc"

        MULTIPLE: tuple[str, ...] = ()
        MULTIPLE__DOC = "some more doc"

        OPTIONAL: Optional[str] = None
        OPTIONAL__DOC = "not required"

        SOME_BOOL = False
        SOME_BOOL__DOC = "a bool"

    monkeypatch.setattr(main, "config", Config)
    parser = main.get_parser()
    with pytest.raises(SystemExit) as e:
        parser.parse_known_args(["list"])
    assert e.value.args[0] == 2  # Exit code 2

    args = parser.parse_args(["--required", "some_value", "--required-int", "45", "list"])
    assert args.required == "some_value"
    assert args.required_int == 45
    assert args.multiple == tuple()
    assert args.optional is None
    assert not args.some_bool

    args = parser.parse_args(
        [
            "-r",
            "some_value",
            "--required-int",
            "45",
            "--multiple",
            "a",
            "b",
            "--optional",
            "prout",
            "--some-bool",
            "list",
        ]
    )
    assert args.required == "some_value"
    assert args.multiple == ["a", "b"]
    assert args.optional == "prout"
    assert args.some_bool
    assert args.command == "list"


def test_bool():
    class Config:
        SOME_BOOL = False
        SOME_BOOL__DOC = "a bool"

        TRUE = True
        TRUE__DOC = "true by default"

    configurator = ConfigModule(Config)

    configurator.set_conf([])
    assert not Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--some-bool"])
    assert Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--true"])
    assert not Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--true=false"])
    assert not Config.SOME_BOOL
    assert not Config.TRUE

    configurator.set_conf(["--true=true"])
    assert Config.TRUE

    configurator.set_conf(["--some-bool=true"])
    assert Config.SOME_BOOL

    configurator.set_conf(["--some-bool=false"])
    assert not Config.SOME_BOOL


def test_rest_from_conf_file(tmp_path):
    class Config1:
        SOME_BOOL = False
        SOME_BOOL__DOC = "a bool"

    class Config2:
        OTHER_BOOL = False
        OTHER_BOOL__DOC = "a bool"

        TRUE2 = True
        TRUE2__DOC = "true by default"

        NAME: Optional[str] = None
        NAME__DOC = "?"

    configurator = ConfigModule(Config1)
    configurator.parser.add_argument("-c", is_config_file=True)
    configurator2 = ConfigModule(Config2)
    conf_file = tmp_path / "conf.conf"

    conf_file.write_text("other-bool=true\nname=something", "utf-8")
    args, rest = configurator.set_conf(["-c", str(conf_file)])
    assert rest
    configurator2.set_conf(rest)
    assert Config2.OTHER_BOOL
    assert Config2.TRUE2
    assert Config2.NAME == "something"

    conf_file.write_text("true2=false", "utf-8")
    args, rest = configurator.set_conf(["-c", str(conf_file)])
    configurator2.set_conf(rest)
    assert not Config2.OTHER_BOOL
    assert not Config2.TRUE2

    conf_file.write_text("", "utf-8")
    args, rest = configurator.set_conf(["-c", str(conf_file)])
    assert not rest
    assert not Config1.SOME_BOOL


def test_set_conf(monkeypatch, tmp_path):
    monkeypatch.setenv("JABREG_STUN_PREFIX", "TURN")
    conf_file = tmp_path / "jabreg.conf"
    conf_file.write_text("debug=true\nmax-stun-server-count=5\n", "utf-8")
    main.get_configurator().set_conf(
        [
            "-c",
            str(conf_file),
            f"--home-dir={tmp_path}",
            "--default-user-suffix=example.com",
            "--disable-media-service",
            "list",
        ]
    )
    assert config.STUN_PREFIX == "TURN"
    assert config.JN_PREFIX == "JINGLENODES"
    assert config.MAX_STUN_SERVER_COUNT == 5
    assert config.DEFAULT_USER_SUFFIX == "example.com"
    assert config.DISABLE_MEDIA_SERVICE
    assert config.HOME_DIR == tmp_path
    assert isinstance(config.HOME_DIR, Path)
    assert config.DB_URL == f"sqlite:///{tmp_path}/accounts.sqlite"
    assert logging.getLogger().level == logging.DEBUG
