from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from ..account.identity import PASSWORD, USER_ID
from ..util.types import PropertyStore
from .models import Account, AccountProperty

_session: Optional[Session] = None


def new_account_key() -> str:
    return "acc" + uuid.uuid4().hex


@dataclass
class StoredAccount:
    """
    A snapshot of an account read from a property store.
    """

    key: str
    factory: str
    account_uid: str
    properties: dict[str, str] = field(default_factory=dict)
    password_persistent: bool = True

    def get_properties(self) -> Mapping[str, str]:
        return self.properties

    def get_user_id(self) -> Optional[str]:
        return self.properties.get(USER_ID)

    def get_account_unique_id(self) -> Optional[str]:
        return self.account_uid

    def is_password_persistent(self) -> bool:
        return self.password_persistent


class EngineMixin:
    def __init__(self, engine: Engine):
        self._engine = engine

    @contextmanager
    def session(self, **session_kwargs) -> Iterator[Session]:
        global _session
        if _session is not None:
            yield _session
            return
        with Session(self._engine, **session_kwargs) as session:
            _session = session
            try:
                yield session
            finally:
                _session = None


class SQLPropertyStore(EngineMixin):
    """
    Account properties in a SQL database.

    Property names are relative to the account, eg ``STUN0.ADDRESS``.
    """

    def new(
        self,
        factory: str,
        account_uid: str,
        properties: Optional[Mapping[str, str]] = None,
        password_persistent: bool = True,
    ) -> str:
        """
        Create an account, or return the key of the existing one.
        """
        with self.session() as orm:
            existing = self._get_account(orm, factory, account_uid)
            if existing is not None:
                return existing.key
            account = Account(
                key=new_account_key(),
                factory=factory,
                account_uid=account_uid,
                password_persistent=password_persistent,
            )
            account.properties = [
                AccountProperty(name=k, value=v) for k, v in (properties or {}).items()
            ]
            orm.add(account)
            orm.commit()
            log.debug("Created %s", account)
            return account.key

    def resolve(self, factory: str, account_uid: str) -> Optional[str]:
        with self.session() as orm:
            account = self._get_account(orm, factory, account_uid)
            return None if account is None else account.key

    def list_accounts(self) -> list[StoredAccount]:
        with self.session() as orm:
            return [
                self._to_stored(a) for a in orm.execute(select(Account)).scalars()
            ]

    def get_account(self, account_key: str) -> Optional[StoredAccount]:
        with self.session() as orm:
            account = self._get_by_key(orm, account_key)
            return None if account is None else self._to_stored(account)

    def delete_account(self, account_key: str) -> None:
        with self.session() as orm:
            account = self._get_by_key(orm, account_key)
            if account is None:
                return
            orm.delete(account)
            orm.commit()

    def list_names(self, account_key: str) -> list[str]:
        with self.session() as orm:
            return list(
                orm.execute(
                    select(AccountProperty.name)
                    .join(Account)
                    .where(Account.key == account_key)
                    .order_by(AccountProperty.name)
                ).scalars()
            )

    def get(self, account_key: str, name: str) -> Optional[str]:
        with self.session() as orm:
            return orm.execute(
                select(AccountProperty.value)
                .join(Account)
                .where(Account.key == account_key)
                .where(AccountProperty.name == name)
            ).scalar()

    def get_all(self, account_key: str) -> dict[str, str]:
        with self.session() as orm:
            rows = orm.execute(
                select(AccountProperty.name, AccountProperty.value)
                .join(Account)
                .where(Account.key == account_key)
            )
            return {name: value for name, value in rows}

    def set(self, account_key: str, name: str, value: str) -> None:
        self.update(account_key, {name: value})

    def update(self, account_key: str, properties: Mapping[str, str]) -> None:
        """
        Insert or replace several properties in a single transaction.
        """
        with self.session() as orm:
            account = self._require(orm, account_key)
            by_name = {p.name: p for p in account.properties}
            for name, value in properties.items():
                if (prop := by_name.get(name)) is None:
                    account.properties.append(AccountProperty(name=name, value=value))
                else:
                    prop.value = value
            orm.commit()

    def delete(self, account_key: str, name: str) -> None:
        self.delete_many(account_key, [name])

    def delete_many(self, account_key: str, names: list[str]) -> None:
        if not names:
            return
        with self.session() as orm:
            account = self._require(orm, account_key)
            orm.execute(
                delete(AccountProperty)
                .where(AccountProperty.account_id == account.id)
                .where(AccountProperty.name.in_(names))
            )
            orm.commit()
        log.debug("Deleted %s properties of %s", len(names), account_key)

    @staticmethod
    def _get_account(orm: Session, factory: str, account_uid: str) -> Optional[Account]:
        return orm.execute(
            select(Account)
            .where(Account.factory == factory)
            .where(Account.account_uid == account_uid)
        ).scalar()

    @staticmethod
    def _get_by_key(orm: Session, account_key: str) -> Optional[Account]:
        return orm.execute(select(Account).where(Account.key == account_key)).scalar()

    def _require(self, orm: Session, account_key: str) -> Account:
        account = self._get_by_key(orm, account_key)
        if account is None:
            raise KeyError("No such account", account_key)
        return account

    @staticmethod
    def _to_stored(account: Account) -> StoredAccount:
        return StoredAccount(
            key=account.key,
            factory=account.factory,
            account_uid=account.account_uid,
            properties={p.name: p.value for p in account.properties},
            password_persistent=account.password_persistent,
        )


class StoredPasswordLoader:
    """
    Read passwords kept as plain properties of the stored account.
    """

    def __init__(self, store: PropertyStore):
        self.store = store

    def load(self, account: StoredAccount) -> Optional[str]:
        return self.store.get(account.key, PASSWORD)


class StoredStunPasswordLoader(StoredPasswordLoader):
    def load(self, account: StoredAccount, index_key: str) -> Optional[str]:  # type:ignore[override]
        return self.store.get(account.key, f"{index_key}.{PASSWORD}")


log = logging.getLogger(__name__)
