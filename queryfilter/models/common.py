from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from queryfilter.core.config import settings


def utcnow():
    return datetime.now(timezone.utc)


def filter_tag(tag: str) -> dict:
    """Column `info` carrying a capability tag, e.g. ``"param:login;searchable;filterable"``."""
    return {settings.FILTER_TAG_KEY: tag}


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, info=filter_tag("filterable")
    )
