from datetime import timezone
from sqlalchemy.types import TypeDecorator, DateTime


class TZAwareDateTime(TypeDecorator):
    """
    DateTime column that always round-trips timezone-aware UTC values.

    Handles:
    - Naive datetimes (assumed to already be UTC)
    - Datetimes in other timezones (converted to UTC before binding)
    - Backends without native timezone support, which hand back naive values
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

        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
