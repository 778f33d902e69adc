"""Time helpers shared by sessions, recovery tokens and account blocks.

All timestamps are stored as ISO 8601 strings in UTC. Every expiry check in
the service goes through ``has_expired``. A block lifts at its own deadline
instant; sessions and recovery tokens are still valid at that instant and
expire once it has passed (``strict=True``).
"""

import math
from datetime import datetime, timedelta
from typing import Optional

import pytz

_SPANISH_MONTHS = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def to_iso(value: datetime) -> str:
    """Serialize an aware datetime as an ISO string in UTC."""
    return value.astimezone(pytz.utc).isoformat()


def parse_iso(value: str) -> datetime:
    """Parse an ISO string (``Z`` suffix accepted) into an aware datetime.

    Naive values are taken to be UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed


def iso_after(
    *,
    minutes: float = 0,
    hours: float = 0,
    start: Optional[datetime] = None,
) -> str:
    """ISO timestamp ``minutes``/``hours`` after ``start`` (default: now)."""
    start = start or utc_now()
    return to_iso(start + timedelta(minutes=minutes, hours=hours))


def has_expired(
    deadline: str,
    now: Optional[datetime] = None,
    strict: bool = False,
) -> bool:
    """Return True once ``now`` has reached ``deadline``.

    With ``strict`` the deadline instant itself still counts as valid.
    """
    now = now or utc_now()
    if strict:
        return now > parse_iso(deadline)
    return now >= parse_iso(deadline)


def minutes_until(deadline: str, now: Optional[datetime] = None) -> int:
    """Whole minutes left until ``deadline``, rounded up, never negative."""
    now = now or utc_now()
    remaining = (parse_iso(deadline) - now).total_seconds()
    if remaining <= 0:
        return 0
    return math.ceil(remaining / 60)


def format_datetime(value: str) -> str:
    """Format an ISO timestamp as long-form Spanish text.

    Example: ``"2026-10-19T14:05:00+00:00"`` -> ``"19 de octubre de 2026, 14:05"``.
    """
    parsed = parse_iso(value).astimezone(pytz.utc)
    month = _SPANISH_MONTHS[parsed.month - 1]
    return f"{parsed.day} de {month} de {parsed.year}, {parsed:%H:%M}"
