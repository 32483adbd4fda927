from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC now. SQLite drops tzinfo, so every stored timestamp is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
