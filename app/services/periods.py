from datetime import datetime, timedelta

Window = tuple[datetime | None, datetime | None]

PERIOD_LABELS = {
    "today": "امروز",
    "week": "هفت روز اخیر",
    "month": "این ماه",
    "all_time": "کل دوره",
}


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def period_window(period: str, now: datetime) -> Window:
    """Half-open ``[start, end)`` window for a period tag, in ``now``'s timezone.

    ``all_time`` is unbounded on both sides.
    """
    today = _midnight(now)
    if period == "today":
        return today, today + timedelta(days=1)
    if period == "week":
        return today - timedelta(days=6), today + timedelta(days=1)
    if period == "month":
        start = today.replace(day=1)
        end = (start.replace(day=28) + timedelta(days=4)).replace(day=1)
        return start, end
    if period == "all_time":
        return None, None
    raise ValueError(f"Unknown period: {period}")


def days_back(days: int, now: datetime) -> Window:
    """The last ``days`` local calendar days, today included."""
    today = _midnight(now)
    return today - timedelta(days=days - 1), today + timedelta(days=1)
