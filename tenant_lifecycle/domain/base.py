from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC, the form every timestamp column stores"""
    return datetime.now(UTC).replace(tzinfo=None)
