from datetime import datetime, timezone


def get_now() -> datetime:
    """Current instant; routes depend on this so tests can freeze time."""
    return datetime.now(timezone.utc)
