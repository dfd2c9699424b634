from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable

from .errors import (
    DateFormatError,
    DateOutOfRangeError,
    DegenerateReason,
    DegenerateSameDayError,
    InvertedRangeError,
    PeriodFormatError,
)
from .period import Period

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class ReservationInterval:
    """Half-day slots from a starting (date, period) to an ending (date, period), both included.

    Use :func:`build_interval` to create one from raw input. The constructor checks the
    ordering invariant again, so an invalid interval can never exist.
    """

    start_instant: datetime
    start_period: Period
    end_instant: datetime
    end_period: Period

    def __post_init__(self) -> None:
        _check_boundary("start", self.start_instant, self.start_period)
        _check_boundary("end", self.end_instant, self.end_period)
        _check_ordering(self.start_instant, self.start_period, self.end_instant, self.end_period)

    @property
    def start_date(self) -> date:
        return self.start_instant.date()

    @property
    def end_date(self) -> date:
        return self.end_instant.date()

    @property
    def half_days(self) -> int:
        return _slot_index(self.end_date, self.end_period) - _slot_index(self.start_date, self.start_period) + 1

    def to_dict(self) -> dict[str, str]:
        return {
            "start_date": self.start_date.isoformat(),
            "start_period": self.start_period.label,
            "end_date": self.end_date.isoformat(),
            "end_period": self.end_period.label,
        }

    def __str__(self) -> str:
        return (
            f"{self.start_date.isoformat()} {self.start_period.label}"
            f" to {self.end_date.isoformat()} {self.end_period.label}"
        )


def build_interval(
    start_date: str,
    end_date: str,
    start_period: Period | str = Period.MORNING,
    end_period: Period | str = Period.AFTERNOON,
) -> ReservationInterval:
    """Parse two YYYY-MM-DD dates and their periods into a validated interval.

    Defaults cover whole days: from the morning of ``start_date`` to the afternoon of
    ``end_date``. Raises a :class:`~vehicle_reservation.errors.ValidationError` subclass
    when the input is malformed or does not describe at least two half-day slots in order.
    """
    start_day = _parse_date(start_date, "start")
    end_day = _parse_date(end_date, "end")
    start_period = _parse_period(start_period, "start")
    end_period = _parse_period(end_period, "end")

    start_instant = _combine(start_day, start_period)
    end_instant = _combine(end_day, end_period)
    _check_ordering(start_instant, start_period, end_instant, end_period)

    return ReservationInterval(
        start_instant=start_instant,
        start_period=start_period,
        end_instant=end_instant,
        end_period=end_period,
    )


def interval_from_half_days(
    start_date: date | str,
    half_days: int,
    start_period: Period | str = Period.MORNING,
) -> ReservationInterval:
    """Return the interval covering ``half_days`` consecutive slots from the given start slot."""
    if half_days < 1:
        raise ValueError("half_days must be greater than zero")

    start_day = start_date if isinstance(start_date, date) else _parse_date(start_date, "start")
    start_period = _parse_period(start_period, "start")

    end_slot = _slot_index(start_day, start_period) + half_days - 1
    try:
        end_day = date.fromordinal(end_slot // 2)
    except (ValueError, OverflowError) as error:
        raise DateOutOfRangeError(start_day, half_days) from error
    end_period = Period(end_slot % 2)
    return build_interval(start_day.strftime(DATE_FORMAT), end_day.strftime(DATE_FORMAT), start_period, end_period)


def compatible(a: ReservationInterval, b: ReservationInterval) -> bool:
    """Return True when the two intervals claim no common half-day slot.

    Boundary instants are strictly increasing slot by slot (midnight for a morning,
    23:59:59 for an afternoon), so comparing instants compares slots. The result does not
    depend on argument order.
    """
    return (
        a.end_instant < b.start_instant
        or a.start_instant > b.end_instant
        or (a.end_instant == b.start_instant and a.end_period < b.start_period)
    )


def intersects(a: ReservationInterval, b: ReservationInterval) -> bool:
    return not compatible(a, b)


def find_conflict(
    candidate: ReservationInterval,
    existing_reservations: Iterable[ReservationInterval],
) -> ReservationInterval | None:
    """Return the first existing interval that shares a slot with ``candidate``, if any."""
    for reservation in existing_reservations:
        if intersects(candidate, reservation):
            return reservation
    return None


def can_reserve(candidate: ReservationInterval, existing_reservations: Iterable[ReservationInterval]) -> bool:
    return find_conflict(candidate, existing_reservations) is None


def _parse_date(value: Any, which_end: str) -> date:
    if not isinstance(value, str):
        raise DateFormatError(which_end, value)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as error:
        raise DateFormatError(which_end, value) from error


def _parse_period(value: Any, which_end: str) -> Period:
    try:
        return Period.parse(value)
    except ValueError as error:
        raise PeriodFormatError(which_end, value) from error


def _combine(day: date, period: Period) -> datetime:
    return datetime.combine(day, period.boundary(), tzinfo=timezone.utc)


def _slot_index(day: date, period: Period) -> int:
    return day.toordinal() * 2 + int(period)


def _check_boundary(which_end: str, instant: datetime, period: Period) -> None:
    if not isinstance(period, Period):
        raise TypeError(f"{which_end}_period must be a Period, got {type(period).__name__}")
    if not isinstance(instant, datetime):
        raise TypeError(f"{which_end}_instant must be a datetime, got {type(instant).__name__}")
    if instant.utcoffset() != timedelta(0):
        raise ValueError(f"{which_end}_instant must be a UTC datetime")
    if instant.time() != period.boundary():
        raise ValueError(f"{which_end}_instant does not sit on the {period.label} boundary")


def _check_ordering(start_instant: datetime, start_period: Period, end_instant: datetime, end_period: Period) -> None:
    if start_instant.date() == end_instant.date():
        if start_period == end_period:
            raise DegenerateSameDayError(DegenerateReason.SAME_PERIOD_TWICE)
        if start_period > end_period:
            raise DegenerateSameDayError(DegenerateReason.PERIODS_REVERSED)
    elif start_instant > end_instant:
        raise InvertedRangeError(start_instant, end_instant)
