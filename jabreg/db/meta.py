import sqlalchemy as sa


class Base(sa.orm.DeclarativeBase):
    naming_convention = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


def get_engine(path: str, create: bool = True) -> sa.Engine:
    engine = sa.create_engine(path)
    if create:
        Base.metadata.create_all(engine)
    return engine
