from datetime import datetime, timezone
from sqlalchemy import Column
from rallypoint.core.utils.db_fields import TZAwareDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampsMixin:
    created_at = Column(
        TZAwareDateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at = Column(
        TZAwareDateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
