from datetime import datetime, timezone

utc_now = lambda: datetime.now(timezone.utc)  # noqa: E731


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
