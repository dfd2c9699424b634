from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .booking import ReservationInterval, interval_from_half_days
from .period import Period


class SiteStatus(Enum):
    NOT_CARRIED = "not_carried"
    IN_PROGRESS = "in_progress"
    INTERRUPTED = "interrupted"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SiteDuration:
    """Number of half-days a site lasts and the period it starts in. At least one half-day."""

    half_days: int
    start_period: Period = Period.MORNING

    def __post_init__(self) -> None:
        if self.half_days < 1:
            raise ValueError("A site must last at least one half-day.")
        object.__setattr__(self, "start_period", Period.parse(self.start_period))


@dataclass
class Site:
    name: str
    purpose: str
    start_date: date
    duration: SiteDuration
    coordinates: tuple[float, float] = (0.0, 0.0)
    status: SiteStatus = SiteStatus.NOT_CARRIED
    client_phone_number: str = ""
    vehicles: list[str] = field(default_factory=list)

    def reservation_interval(self) -> ReservationInterval:
        return interval_from_half_days(self.start_date, self.duration.half_days, self.duration.start_period)
