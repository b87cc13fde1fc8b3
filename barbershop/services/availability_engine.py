"""
Slot availability for a barber's day.

Pure functions only: no database, no HTTP, no system clock. Callers pass the
policy (working hours, slot size, lead time, shop timezone), the busy
intervals for the barber and the current instant. The same functions back the
public read endpoints and the authoritative check in the reservation write
path.

All interval comparisons use aware datetimes, so mixing UTC instants from the
store with shop-local slot times is safe. "Which day" questions are always
answered in the policy's timezone.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Iterator, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

from barbershop.config import Settings

Interval = tuple[datetime, datetime]


class DayOverride(Protocol):
    is_available: bool
    working_hours_start: time
    working_hours_end: time


@dataclass(frozen=True)
class AvailabilityPolicy:
    opening_time: time = time(9, 0)
    closing_time: time = time(17, 0)
    slot_minutes: int = 30
    lead_time: timedelta = timedelta(hours=2)
    timezone: tzinfo = field(default_factory=lambda: ZoneInfo("Europe/Belgrade"))

    @classmethod
    def from_settings(cls, settings: Settings) -> "AvailabilityPolicy":
        return cls(
            opening_time=settings.opening_time,
            closing_time=settings.closing_time,
            slot_minutes=settings.slot_minutes,
            lead_time=settings.lead_time,
            timezone=settings.tz,
        )

    @property
    def slot_length(self) -> timedelta:
        return timedelta(minutes=self.slot_minutes)


@dataclass(frozen=True)
class DaySummary:
    day: date
    slots: list

    @property
    def slot_count(self) -> int:
        return len(self.slots)

    @property
    def offerable(self) -> bool:
        return bool(self.slots)


class BookingRejected(ValueError):
    """A candidate reservation may not be written."""


class DayUnavailableError(BookingRejected):
    pass


class SlotConflictError(BookingRejected):
    pass


class LeadTimeError(BookingRejected):
    pass


class OutsideWorkingHoursError(BookingRejected):
    pass


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test: [a_start, a_end) against [b_start, b_end)."""
    return b_start < a_end and b_end > a_start


def local_date(instant: datetime, tz: tzinfo) -> date:
    return instant.astimezone(tz).date()


def day_bounds(day: date, tz: tzinfo) -> Interval:
    """Half-open [local midnight, next local midnight) for ``day``."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def upcoming_weekdays(today: date, count: int) -> list:
    """The next ``count`` Monday-Friday dates strictly after ``today``."""
    days = []
    current = today
    while len(days) < count:
        current += timedelta(days=1)
        if current.weekday() < 5:
            days.append(current)
    return days


def working_window(
    day: date, policy: AvailabilityPolicy, override: Optional[DayOverride] = None
) -> Optional[Interval]:
    """Bookable hours for the day, or None when the day is marked unavailable."""
    if override is not None:
        if not override.is_available:
            return None
        opens, closes = override.working_hours_start, override.working_hours_end
    else:
        opens, closes = policy.opening_time, policy.closing_time
    return (
        datetime.combine(day, opens, tzinfo=policy.timezone),
        datetime.combine(day, closes, tzinfo=policy.timezone),
    )


def generate_slots(window_start: datetime, window_end: datetime, slot_length: timedelta) -> list:
    """Slot starts from window_start, keeping only slots that end by window_end."""
    if slot_length <= timedelta(0):
        raise ValueError("slot_length must be positive")
    slots = []
    current = window_start
    while current + slot_length <= window_end:
        slots.append(current)
        current += slot_length
    return slots


def available_slots(
    day: date,
    busy: Iterable[Interval],
    now: datetime,
    policy: AvailabilityPolicy,
    override: Optional[DayOverride] = None,
) -> list:
    """Chronological slot starts still bookable on ``day``."""
    window = working_window(day, policy, override)
    if window is None:
        return []

    busy = list(busy)
    slot_length = policy.slot_length
    # earlier days fall entirely before the cutoff
    cutoff = now + policy.lead_time

    remaining = []
    for slot_start in generate_slots(window[0], window[1], slot_length):
        slot_end = slot_start + slot_length
        if any(overlaps(slot_start, slot_end, b_start, b_end) for b_start, b_end in busy):
            continue
        if slot_start < cutoff:
            continue
        remaining.append(slot_start)
    return remaining


def summarize_days(
    days: Iterable[date],
    busy: Iterable[Interval],
    now: datetime,
    policy: AvailabilityPolicy,
    overrides: Optional[Mapping[date, DayOverride]] = None,
) -> list:
    overrides = overrides or {}
    busy = list(busy)
    summaries = []
    for day in days:
        day_start, day_end = day_bounds(day, policy.timezone)
        day_busy = [(s, e) for s, e in busy if overlaps(day_start, day_end, s, e)]
        slots = available_slots(day, day_busy, now, policy, overrides.get(day))
        summaries.append(DaySummary(day=day, slots=slots))
    return summaries


def check_booking(
    start: datetime,
    end: datetime,
    busy: Iterable[Interval],
    now: datetime,
    policy: AvailabilityPolicy,
    override: Optional[DayOverride] = None,
) -> None:
    """Raise BookingRejected if [start, end) may not be reserved.

    ``override`` is the barber's row for the local date of ``start``.
    """
    if end <= start:
        raise BookingRejected("End time must be after start time")
    window = working_window(local_date(start, policy.timezone), policy, override)
    if window is None:
        raise DayUnavailableError("Barber is not available on the selected day")
    if start < window[0] or end > window[1]:
        raise OutsideWorkingHoursError("The selected time is outside working hours")
    if start < now:
        raise LeadTimeError("The selected time has already passed")
    if start < now + policy.lead_time:
        raise LeadTimeError("Same-day bookings need more notice")
    for b_start, b_end in busy:
        if overlaps(start, end, b_start, b_end):
            raise SlotConflictError("The selected time is already booked")
