from .period import Period
from .booking import (
	DATE_FORMAT,
	ReservationInterval,
	build_interval,
	can_reserve,
	compatible,
	find_conflict,
	interval_from_half_days,
	intersects,
)
from .errors import (
	ConflictError,
	DateFormatError,
	DateOutOfRangeError,
	DegenerateReason,
	DegenerateSameDayError,
	InvertedRangeError,
	PeriodFormatError,
	ReservationError,
	ReservationStorageError,
	ValidationError,
)
from .ledger import ReservationLedger
from .events import ReservationEventLog
from .sites import Site, SiteDuration, SiteStatus
from .fleet import Fleet, Vehicle

__all__ = [
	"Period",
	"DATE_FORMAT",
	"ReservationInterval",
	"build_interval",
	"can_reserve",
	"compatible",
	"find_conflict",
	"interval_from_half_days",
	"intersects",
	"ConflictError",
	"DateFormatError",
	"DateOutOfRangeError",
	"DegenerateReason",
	"DegenerateSameDayError",
	"InvertedRangeError",
	"PeriodFormatError",
	"ReservationError",
	"ReservationStorageError",
	"ValidationError",
	"ReservationLedger",
	"ReservationEventLog",
	"Site",
	"SiteDuration",
	"SiteStatus",
	"Fleet",
	"Vehicle",
]
