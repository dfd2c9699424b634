from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .booking import ReservationInterval


class ReservationError(ValueError):
    """A single reservation request was rejected. Prior state is unchanged."""


class ValidationError(ReservationError):
    pass


class DateFormatError(ValidationError):
    def __init__(self, which_end: str, raw_input: Any) -> None:
        self.which_end = which_end
        self.raw_input = raw_input
        super().__init__(f"{which_end.capitalize()} date cannot be parsed as YYYY-MM-DD: {raw_input!r}")


class PeriodFormatError(ValidationError):
    def __init__(self, which_end: str, raw_input: Any) -> None:
        self.which_end = which_end
        self.raw_input = raw_input
        super().__init__(f"{which_end.capitalize()} period is not morning or afternoon: {raw_input!r}")


class InvertedRangeError(ValidationError):
    def __init__(self, start_instant: datetime, end_instant: datetime) -> None:
        self.start_instant = start_instant
        self.end_instant = end_instant
        super().__init__(
            f"Start date is after end date ({start_instant.isoformat()} > {end_instant.isoformat()})."
        )


class DateOutOfRangeError(ValidationError):
    def __init__(self, start_date: date, half_days: int) -> None:
        self.start_date = start_date
        self.half_days = half_days
        super().__init__(f"{half_days} half-days from {start_date.isoformat()} run past the last supported date.")


class DegenerateReason(Enum):
    SAME_PERIOD_TWICE = "same_period_twice"
    PERIODS_REVERSED = "periods_reversed"


class DegenerateSameDayError(ValidationError):
    def __init__(self, reason: DegenerateReason) -> None:
        self.reason = reason
        if reason is DegenerateReason.SAME_PERIOD_TWICE:
            message = "Periods are invalid: same day, and it starts and ends in the same period."
        else:
            message = "Periods are invalid: same day, but it ends in the morning while starting in the afternoon."
        super().__init__(message)


class ConflictError(ReservationError):
    def __init__(self, candidate: ReservationInterval, conflicting_existing: ReservationInterval) -> None:
        self.candidate = candidate
        self.conflicting_existing = conflicting_existing
        super().__init__(f"Requested {candidate} overlaps existing reservation {conflicting_existing}.")


class ReservationStorageError(RuntimeError):
    pass
