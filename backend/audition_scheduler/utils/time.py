from datetime import date, datetime, time, timedelta, timezone


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def minutes_between(start: time, end: time) -> int:
    """Whole minutes from `start` to `end` on the same day (negative if end is earlier)."""
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return int(delta.total_seconds() // 60)


def add_minutes(value: time, minutes: int) -> time:
    if minutes < 0:
        raise ValueError("minutes must be non-negative")
    shifted = datetime.combine(date.min, value) + timedelta(minutes=minutes)
    if shifted.date() != date.min:
        raise ValueError("result crosses midnight")
    return shifted.time()
