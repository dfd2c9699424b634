from __future__ import annotations

from datetime import time
from enum import IntEnum

_ALIASES = {
    "morning": "MORNING",
    "am": "MORNING",
    "afternoon": "AFTERNOON",
    "pm": "AFTERNOON",
}


class Period(IntEnum):
    """Half of a calendar day. MORNING always sorts before AFTERNOON."""

    MORNING = 0
    AFTERNOON = 1

    def boundary_time(self) -> tuple[int, int, int]:
        if self is Period.MORNING:
            return (0, 0, 0)
        return (23, 59, 59)

    def boundary(self) -> time:
        return time(*self.boundary_time())

    def compare(self, other: Period) -> int:
        return (self > other) - (self < other)

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Period | str) -> Period:
        if isinstance(value, Period):
            return value
        if not isinstance(value, str):
            raise ValueError(f"period must be a string, got {type(value).__name__}")

        name = _ALIASES.get(value.strip().lower())
        if name is None:
            raise ValueError(f"Unknown period: {value!r}. Expected morning/afternoon or am/pm.")
        return cls[name]
