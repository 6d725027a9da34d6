"""Company-local time.

All offset math lives here: instants go in as timezone-aware datetimes and come
out as (company date, minute of day), or the other way round. Nothing else in
the package adds or subtracts the company offset by hand.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from ..core.constants import DEFAULT_COMPANY_DAY_CUTOFF, DEFAULT_TIMEZONE_OFFSET, MINUTES_PER_DAY
from ..core.exceptions import ValidationError

_OFFSET_RE = re.compile(r"^([+-])?(\d{1,2})(?::?(\d{2}))?$")


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        raise ValidationError("Expected a date, got a datetime")
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: Union[str, time]) -> time:
    """Parse HH:MM string into time."""
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def parse_offset(value: str) -> int:
    """'+05:00' / '-0330' / '5' -> signed minutes east of UTC."""
    m = _OFFSET_RE.match(str(value or "").strip())
    if not m:
        raise ValidationError(f"Invalid timezone offset: {value!r}")
    sign = -1 if m.group(1) == "-" else 1
    hours = int(m.group(2))
    minutes = int(m.group(3) or 0)
    if hours > 14 or minutes >= 60:
        raise ValidationError(f"Invalid timezone offset: {value!r}")
    return sign * (hours * 60 + minutes)


def minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CompanyClock:
    """Wall-clock time in the company's fixed offset, independent of the server."""

    offset_minutes: int = 5 * 60
    day_cutoff: time = time(8, 55)

    @classmethod
    def from_settings(
        cls,
        offset: str = DEFAULT_TIMEZONE_OFFSET,
        day_cutoff: str = DEFAULT_COMPANY_DAY_CUTOFF,
    ) -> "CompanyClock":
        return cls(offset_minutes=parse_offset(offset), day_cutoff=parse_hhmm(day_cutoff))

    @property
    def tz(self) -> timezone:
        return timezone(timedelta(minutes=self.offset_minutes))

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise ValidationError("Instants must be timezone-aware")
        return instant.astimezone(self.tz)

    def to_local(self, instant: datetime) -> tuple[date, int]:
        local = self.localize(instant)
        return local.date(), local.hour * 60 + local.minute

    def to_instant(self, day: date, minute: int) -> datetime:
        """Inverse of to_local; minute may run past 1440 into following days."""
        return datetime.combine(day, time(0, 0), tzinfo=self.tz) + timedelta(minutes=int(minute))

    def minutes_since_anchor(self, instant: datetime, anchor: date) -> int:
        """Whole minutes from company-local midnight of ``anchor`` to ``instant``."""
        local_day, minute = self.to_local(instant)
        return (local_day - anchor).days * MINUTES_PER_DAY + minute

    def anchor_clock_time(self, anchor: date, clock_time: time, *, rollover_before: Optional[int] = None) -> datetime:
        """Turn an HR-entered clock time into an instant on the business day.

        Clock times earlier than ``rollover_before`` (minutes) belong to the
        morning after the anchor date.
        """
        minute = minute_of_day(clock_time)
        if rollover_before is not None and minute < rollover_before:
            minute += MINUTES_PER_DAY
        return self.to_instant(anchor, minute)

    def company_today(self, now: Optional[datetime] = None) -> date:
        """The company day closes at the cutoff (08:55 by default), not at midnight."""
        local = self.localize(now or now_utc())
        if local.time().replace(tzinfo=None) < self.day_cutoff:
            return local.date() - timedelta(days=1)
        return local.date()

    def is_future(self, day: date, now: Optional[datetime] = None) -> bool:
        return day > self.company_today(now)
