from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from queryfilter.db.session import Base
from queryfilter.models.common import TimestampMixin, filter_tag


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, info=filter_tag("filterable"))
    username: Mapped[str] = mapped_column(
        String(150), unique=True, nullable=False, info=filter_tag("param:login;searchable;filterable")
    )
    full_name: Mapped[str | None] = mapped_column(
        "fullname", String(300), nullable=True, info=filter_tag("param:name;searchable")
    )
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, info=filter_tag("filterable"))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, info=filter_tag("param:active;filterable"))
    # Never exposed to search or filter.
    password: Mapped[str] = mapped_column(String(255), nullable=False, default="")
