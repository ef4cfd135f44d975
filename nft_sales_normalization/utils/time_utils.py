"""Time utility functions for sale records."""

from datetime import datetime, timezone
from typing import Union


def to_utc_timestamp(timestamp: Union[int, float, str, datetime]) -> datetime:
    """Convert various timestamp formats to UTC datetime."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(timezone.utc)

    elif isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)

    elif isinstance(timestamp, str):
        text = timestamp.strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text), tz=timezone.utc)
        return parse_iso_timestamp(text)

    else:
        raise ValueError(f"Unsupported timestamp type: {type(timestamp)}")


def parse_iso_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc_timestamp(datetime.fromisoformat(text))
