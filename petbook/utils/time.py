from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Naive UTC timestamp. Columns are stored without tzinfo,
    so every comparison in the core uses this.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
