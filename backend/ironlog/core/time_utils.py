from datetime import date, datetime, timedelta


def as_date(value) -> date | None:
    """Coerce a date, datetime or ISO string into a `date`.

    Accepts 'YYYY-MM-DD' and full ISO timestamps (a trailing 'Z' is fine).
    Returns None for None/empty strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if s == "":
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()


def days_between(start, end) -> int:
    """Whole days from `start` to `end` (negative when end is earlier)."""
    return (as_date(end) - as_date(start)).days


def whole_weeks_between(start, end) -> int:
    """Floor of elapsed weeks, e.g. 13 days -> 1, 14 days -> 2."""
    return days_between(start, end) // 7


def monday_of(d: date) -> date:
    # Monday = 0, Sunday = 6
    return d - timedelta(days=d.weekday())


def iso_week_key(d) -> str:
    """'YYYY-Www' key used to bucket sessions by training week.

    Uses the ISO year so the last days of December can land in week 1.
    Zero-padded so keys sort chronologically as strings.
    """
    year, week, _ = as_date(d).isocalendar()
    return f"{year}-W{week:02d}"


def format_duration(seconds: int) -> str:
    """
    Seconds -> 'H:MM:SS' when an hour or more, else 'M:SS'.
    Example: 3725 -> '1:02:05', 95 -> '1:35'
    """
    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    remaining = seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{remaining:02d}"
    return f"{minutes}:{remaining:02d}"
