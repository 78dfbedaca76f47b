"""
Display formatting for on-chain values.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def format_timestamp(seconds: int, tz: Optional[str] = None) -> str:
    """
    Format a block timestamp (seconds since epoch) for display.

    Produces the en-US locale shape, e.g. "1/5/2024, 3:04:05 PM".
    With tz=None the server's local time zone is used. Raises ValueError
    for timestamps outside the range datetime can represent.
    """
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Timestamp out of range: {seconds}") from e
    moment = moment.astimezone(ZoneInfo(tz)) if tz else moment.astimezone()

    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )
