from sqlalchemy import Integer, String, create_engine, func
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, column_property, mapped_column
from sqlalchemy.pool import StaticPool

from queryfilter.models.common import filter_tag


class _Base(DeclarativeBase):
    pass


class SampleUser(_Base):
    __tablename__ = "sample_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, info=filter_tag("filterable"))
    username: Mapped[str] = mapped_column(String(50), info=filter_tag("param:login;searchable;filterable"))
    full_name: Mapped[str] = mapped_column("fullname", String(100), info=filter_tag("param:name;searchable"))
    email: Mapped[str] = mapped_column(String(100), info=filter_tag("filterable"))
    # This field is not filtered.
    password: Mapped[str] = mapped_column(String(100))


class Untagged(_Base):
    __tablename__ = "untagged"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(50))


class WithExpression(_Base):
    __tablename__ = "with_expression"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, info=filter_tag("filterable"))
    name: Mapped[str] = mapped_column(String(50), info=filter_tag("searchable"))
    name_len: Mapped[int] = column_property(func.length(name))


SAMPLE_ROWS = [
    dict(id=1, username="sampleUser", full_name="John Smith", email="john@example.com", password="secret-1"),
    dict(id=2, username="jdoe", full_name="Jane Doe", email="jane@example.com", password="secret-2"),
    dict(id=3, username="johnny", full_name="Johnny Walker", email="walker@example.com", password="x"),
    dict(id=99, username="admin", full_name="Root Admin", email="root@example.com", password="x"),
    dict(id=120, username="guest", full_name="Guest User", email="john@example.com", password="x"),
]


def make_engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([SampleUser(**row) for row in SAMPLE_ROWS])
        session.add_all([Untagged(id=i, title=f"t{i}") for i in range(1, 4)])
        session.add_all([WithExpression(id=1, name="alpha"), WithExpression(id=2, name="be")])
        session.commit()
    return engine


def sql(statement) -> str:
    if hasattr(statement, "statement"):
        statement = statement.statement
    return str(statement.compile(compile_kwargs={"literal_binds": True}))
