"""
Derivation of the canonical slot sequence for a meeting.

Pure domain logic: no I/O, no clock, no randomness. The same dates and
window always produce the same ordered list of slot identifiers.
"""

from datetime import date, datetime, time
from typing import Iterable, List, Set

import pendulum

from .exceptions import InvalidInputError
from .models import format_slot

SLOT_MINUTES = 30
DEFAULT_TIMEZONE = "America/Los_Angeles"


class SlotGenerator:
    """
    Builds half-hour slots for a set of dates and a daily time window.

    Algorithm:
    1. Normalize and sort the dates (duplicates collapse)
    2. For each date, walk wall-clock ticks from day_start in 30 minute steps
       while the tick is <= day_end (inclusive upper bound)
    3. Convert each tick to an absolute instant in the fixed timezone
    4. Drop ticks that map onto an instant already emitted (DST gaps)
    """

    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        self.timezone = timezone

    def generate(
        self,
        dates: Iterable[date | str],
        day_start: time | str,
        day_end: time | str
    ) -> List[str]:
        """
        Generate the ordered slot identifiers for a meeting.

        Args:
            dates: Candidate calendar dates (date objects or YYYY-MM-DD)
            day_start: First tick of each day (time or HH:MM)
            day_end: Last allowed tick of each day (time or HH:MM)

        Returns:
            Chronologically ordered, duplicate-free list of slot strings

        Raises:
            InvalidInputError: If dates is empty, a value does not parse,
                or day_end is before day_start
        """
        calendar_dates = sorted({self._parse_date(d) for d in dates})
        if not calendar_dates:
            raise InvalidInputError("dates", "at least one date is required")

        start = self._parse_time("start_time", day_start)
        end = self._parse_time("end_time", day_end)
        if end < start:
            raise InvalidInputError(
                "end_time",
                f"end time {end.strftime('%H:%M')} is before start time {start.strftime('%H:%M')}"
            )

        start_minute = start.hour * 60 + start.minute
        end_minute = end.hour * 60 + end.minute

        slots: List[str] = []
        seen: Set[str] = set()

        for day in calendar_dates:
            for minute in range(start_minute, end_minute + 1, SLOT_MINUTES):
                tick = pendulum.datetime(
                    day.year,
                    day.month,
                    day.day,
                    minute // 60,
                    minute % 60,
                    tz=self.timezone
                )
                slot = format_slot(tick)
                if slot in seen:
                    continue
                seen.add(slot)
                slots.append(slot)

        return slots

    @staticmethod
    def _parse_date(value: date | str) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            parsed = pendulum.from_format(str(value).strip(), "YYYY-MM-DD")
        except ValueError as exc:
            raise InvalidInputError("dates", f"invalid date {value!r}") from exc
        return parsed.date()

    @staticmethod
    def _parse_time(field_name: str, value: time | str) -> time:
        if isinstance(value, time):
            if value.second or value.microsecond:
                raise InvalidInputError(field_name, f"{value} is not a whole minute")
            return value

        try:
            parsed = pendulum.from_format(str(value).strip(), "H:mm")
        except ValueError as exc:
            raise InvalidInputError(field_name, f"invalid time {value!r}, expected HH:MM") from exc
        return parsed.time()
