# app/utiles/custom_helpers.py
from datetime import datetime, timezone, date, time
from typing import Optional
from uuid import uuid4

# Time-of-day used when a booking carries no explicit pickup/drop time
DEFAULT_PICKUP_TIME = "00:00"
DEFAULT_DROP_TIME = "23:59"
# Effective time of an existing booking edge that carries no time of day
MIDNIGHT = "00:00"


# ----------------------------
# Helpers
# ----------------------------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _date_to_datetime(d: date) -> datetime:
    """Naive midnight datetime, the form booking dates are stored in."""
    if isinstance(d, datetime):
        d = d.date()
    return datetime(d.year, d.month, d.day)


def _parse_hhmm(value: str) -> time:
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


def _combine_date_time(d: date, hhmm: Optional[str], default: str) -> datetime:
    """Date plus an optional HH:MM time of day, falling back to ``default``."""
    if isinstance(d, datetime):
        d = d.date()
    return datetime.combine(d, _parse_hhmm(hhmm or default))


def _normalize_id(s: str) -> str:
    return s.strip()


def _gen_vehicle_id() -> str:
    return str(uuid4())


def _gen_booking_id() -> str:
    return str(uuid4())


def _format_booking_number(year: int, sequence: int) -> str:
    return f"BK{year}{sequence:05d}"
