import datetime as _dt

from sqlalchemy.types import TypeDecorator, DateTime


def _as_utc(value: _dt.datetime | str) -> _dt.datetime:
    if isinstance(value, str):
        # ISO strings, SQLite may hand them back as text
        value = _dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=_dt.timezone.utc)
    return value.astimezone(_dt.timezone.utc)


class UtcAwareDateTime(TypeDecorator):
    """Timestamps are stored in UTC and always read back tz-aware.

    Edge ordering (newest requests first) compares these values, so a naive
    datetime must never leak out of the database layer.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return _as_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return _as_utc(value)
