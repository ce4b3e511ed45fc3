from datetime import timezone
from sqlalchemy.types import TypeDecorator, DateTime


class TZAwareDateTime(TypeDecorator):
    """
    Custom SQLAlchemy DateTime type that ensures timezone handling

    Handles:
    - Preserving existing timezones
    - Adding UTC timezone to naive datetimes
    - Backends without timezone support (SQLite) round-trip as UTC
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None

        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)

        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None

        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
