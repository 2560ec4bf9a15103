from core.imports import datetime, timezone


def utcnow():
    return datetime.now(timezone.utc)


def to_iso(value):
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


def parse_date(value):
    """Parse an ISO string (or pass a datetime through). Returns None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_date(value, default=None):
    """ISO string for anything parse_date accepts, else `default` (a datetime or None)."""
    return to_iso(parse_date(value) or default)
