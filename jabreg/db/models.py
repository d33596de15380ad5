from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .meta import Base


class Account(Base):
    """
    A stored account, identified by its key in the property store.
    """

    __tablename__ = "account"
    __table_args__ = (UniqueConstraint("factory", "account_uid"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(unique=True)
    factory: Mapped[str]
    """
    Protocol name, eg "Jabber"
    """
    account_uid: Mapped[str]
    """
    Unique ID of the account for this protocol, eg "Jabber:alice@example.com"
    """
    password_persistent: Mapped[bool] = mapped_column(default=True)
    creation_date: Mapped[datetime] = mapped_column(
        sa.DateTime, server_default=sa.func.now()
    )

    properties: Mapped[list["AccountProperty"]] = relationship(
        back_populates="account", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"Account(key={self.key!r}, uid={self.account_uid!r})"


class AccountProperty(Base):
    """
    A single ``name = value`` property of an account.
    """

    __tablename__ = "account_property"
    __table_args__ = (UniqueConstraint("account_id", "name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("account.id"))
    account: Mapped[Account] = relationship(back_populates="properties")
    name: Mapped[str]
    value: Mapped[str]
