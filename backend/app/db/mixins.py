from datetime import datetime, timezone
from sqlalchemy import Column
from app.core.utils.db_fields import TZAwareDateTime


class TimestampsMixin:
    created_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
