"""Clock helpers.

All pipeline timestamps are naive UTC, matching how SQLite's DateTime
column round-trips them.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
