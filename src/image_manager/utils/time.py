"""
Time helpers.

Wall-clock values are UTC. Error payload timestamps use ISO-8601 with an
explicit offset; cache expiry uses integer epoch seconds, which is the
format DynamoDB's TTL feature reads.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return utc_now().isoformat()


def epoch_seconds() -> int:
    """Current UTC time as whole seconds since the epoch."""
    return int(utc_now().timestamp())
