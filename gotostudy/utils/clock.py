"""Timestamp helpers for entity mutations."""

from datetime import datetime, timedelta


def next_timestamp(previous: datetime | None = None) -> datetime:
    """Return the current time, strictly later than ``previous``.

    Coarse clocks can return the same reading twice; ``updated_at`` must
    still advance on every mutation, so the result is bumped by one
    microsecond past ``previous`` when needed.
    """
    now = datetime.now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
