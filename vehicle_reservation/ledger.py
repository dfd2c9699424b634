from __future__ import annotations

import threading
from typing import Iterator

from .booking import ReservationInterval, find_conflict
from .errors import ConflictError


class ReservationLedger:
    """Accepted reservations of one resource. No two stored intervals share a half-day slot.

    ``reserve`` holds the ledger's lock for the whole check-then-append, so concurrent
    callers on the same ledger are serialized. Separate ledgers never share a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._intervals: list[ReservationInterval] = []

    def reserve(self, candidate: ReservationInterval) -> None:
        if not isinstance(candidate, ReservationInterval):
            raise TypeError(f"candidate must be a ReservationInterval, got {type(candidate).__name__}")

        with self._lock:
            conflict = find_conflict(candidate, self._intervals)
            if conflict is not None:
                raise ConflictError(candidate, conflict)
            self._intervals.append(candidate)

    def find_conflict(self, candidate: ReservationInterval) -> ReservationInterval | None:
        with self._lock:
            return find_conflict(candidate, self._intervals)

    def can_reserve(self, candidate: ReservationInterval) -> bool:
        return self.find_conflict(candidate) is None

    @property
    def intervals(self) -> tuple[ReservationInterval, ...]:
        with self._lock:
            return tuple(self._intervals)

    def __len__(self) -> int:
        with self._lock:
            return len(self._intervals)

    def __iter__(self) -> Iterator[ReservationInterval]:
        return iter(self.intervals)

    def __contains__(self, interval: object) -> bool:
        with self._lock:
            return interval in self._intervals

    def __repr__(self) -> str:
        return f"<ReservationLedger intervals={len(self)}>"
