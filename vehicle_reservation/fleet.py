from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable
import threading

import yaml

from .booking import ReservationInterval, build_interval
from .errors import ConflictError, ReservationError, ReservationStorageError
from .events import ReservationEventLog
from .ledger import ReservationLedger
from .period import Period
from .sites import Site

EVENT_VEHICLE_ADDED = "VEHICLE_ADDED"
EVENT_RESERVATION_CREATED = "RESERVATION_CREATED"
EVENT_RESERVATION_REJECTED = "RESERVATION_REJECTED"


class Vehicle:
    def __init__(self, name: str) -> None:
        self.name = _normalize_vehicle_name(name)
        self.ledger = ReservationLedger()

    def reserve(self, candidate: ReservationInterval) -> None:
        self.ledger.reserve(candidate)

    @property
    def reservations(self) -> tuple[ReservationInterval, ...]:
        return self.ledger.intervals

    def __repr__(self) -> str:
        return f"<Vehicle {self.name!r} reservations={len(self.ledger)}>"


class Fleet:
    """Vehicles by name, each with its own ledger, plus an optional audit trail.

    The registry lock only guards the vehicle mapping. Reservations on different vehicles
    never wait on each other.
    """

    def __init__(
        self,
        event_log: ReservationEventLog | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.event_log = event_log
        self._clock: Callable[[], datetime] = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._vehicles: dict[str, Vehicle] = {}
        self.audit_failures: list[ReservationStorageError] = []

    @classmethod
    def from_config(cls, path: str | Path, clock: Callable[[], datetime] | None = None) -> Fleet:
        config = _load_config(Path(path))

        event_log = None
        log_path = config.get("event_log")
        if log_path is not None:
            log_path = Path(str(log_path))
            if not log_path.is_absolute():
                log_path = Path(path).parent / log_path
            event_log = ReservationEventLog(log_path)

        fleet = cls(event_log=event_log, clock=clock)
        for name in config.get("vehicles") or []:
            fleet.add_vehicle(str(name))
        return fleet

    def add_vehicle(self, name: str) -> Vehicle:
        vehicle = Vehicle(name)
        with self._lock:
            if vehicle.name in self._vehicles:
                raise ValueError(f"Vehicle already registered: {vehicle.name}")
            self._vehicles[vehicle.name] = vehicle

        self._log_event(EVENT_VEHICLE_ADDED, {"vehicle": vehicle.name})
        return vehicle

    def get_vehicle(self, name: str) -> Vehicle:
        normalized = _normalize_vehicle_name(name)
        with self._lock:
            vehicle = self._vehicles.get(normalized)
        if vehicle is None:
            raise ValueError(f"Unknown vehicle: {normalized}")
        return vehicle

    @property
    def vehicles(self) -> list[Vehicle]:
        with self._lock:
            return list(self._vehicles.values())

    def reserve(
        self,
        vehicle_name: str,
        start_date: str,
        end_date: str,
        start_period: Period | str = Period.MORNING,
        end_period: Period | str = Period.AFTERNOON,
    ) -> ReservationInterval:
        vehicle = self.get_vehicle(vehicle_name)
        request = {
            "vehicle": vehicle.name,
            "start_date": str(start_date),
            "end_date": str(end_date),
            "start_period": _describe_period(start_period),
            "end_period": _describe_period(end_period),
        }
        try:
            candidate = build_interval(start_date, end_date, start_period, end_period)
        except ReservationError as error:
            self._log_rejection(request, error)
            raise

        return self._reserve_on(vehicle, candidate, request)

    def assign_to_site(self, site: Site, vehicle_name: str) -> ReservationInterval:
        vehicle = self.get_vehicle(vehicle_name)
        request: dict[str, Any] = {"vehicle": vehicle.name, "site": site.name}
        try:
            candidate = site.reservation_interval()
        except ReservationError as error:
            self._log_rejection(request, error)
            raise

        self._reserve_on(vehicle, candidate, request)
        site.vehicles.append(vehicle.name)
        return candidate

    def _reserve_on(self, vehicle: Vehicle, candidate: ReservationInterval, request: dict[str, Any]) -> ReservationInterval:
        try:
            vehicle.reserve(candidate)
        except ConflictError as error:
            self._log_rejection(request, error)
            raise

        self._log_event(EVENT_RESERVATION_CREATED, {**request, "interval": candidate.to_dict()})
        return candidate

    def _log_rejection(self, request: dict[str, Any], error: ReservationError) -> None:
        payload: dict[str, Any] = {**request, "error": type(error).__name__, "reason": str(error)}
        if isinstance(error, ConflictError):
            payload["conflicting_existing"] = error.conflicting_existing.to_dict()
        failure = self._log_event(EVENT_RESERVATION_REJECTED, payload)
        if failure is not None:
            error.add_note(f"Audit event was not recorded: {failure}")

    def _log_event(self, event_type: str, payload: dict[str, Any]) -> ReservationStorageError | None:
        """Record an audit event after the ledger has decided. A failed write never changes that outcome."""
        if self.event_log is None:
            return None
        try:
            self.event_log.record(event_type, payload, self._clock())
        except ReservationStorageError as failure:
            with self._lock:
                self.audit_failures.append(failure)
            return failure
        return None


def _load_config(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise ValueError(f"Fleet config not found: {path}") from error
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
        raise ValueError(f"Fleet config cannot be read: {path}") from error

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError("Fleet config must be a mapping")
    if "vehicles" in payload and payload["vehicles"] is not None and not isinstance(payload["vehicles"], list):
        raise ValueError("Fleet config 'vehicles' must be a list")
    return payload


def _normalize_vehicle_name(name: str | None) -> str:
    if name is None:
        raise ValueError("vehicle name must not be None")

    normalized = name.strip()
    if not normalized:
        raise ValueError("vehicle name must not be empty")
    return normalized


def _describe_period(value: Period | str) -> str:
    return value.label if isinstance(value, Period) else str(value)
