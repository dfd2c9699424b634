from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any
import shutil
import threading

import yaml

from .errors import ReservationStorageError

EVENT_LOG_RECOVERED = "EVENT_LOG_RECOVERED"
EVENT_ROW_SKIPPED = "EVENT_ROW_SKIPPED"


class ReservationEventLog:
    """Append-only YAML list of ``{event_time, event_type, payload}`` records."""

    def __init__(self, path: str | Path = "data/reservation_events.yaml") -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._ensure_file()

    def _ensure_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("[]\n", encoding="utf-8")

    def _read_yaml_list(self) -> list[dict[str, Any]]:
        try:
            payload = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self.path.write_text("[]\n", encoding="utf-8")
            return []
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
            return self._recover_corrupted_yaml(error)

        if payload is None:
            return []
        if not isinstance(payload, list):
            return self._recover_corrupted_yaml(ValueError("top-level YAML is not a list"))

        sanitized: list[dict[str, Any]] = []
        skipped = False
        for index, row in enumerate(payload):
            if isinstance(row, dict):
                sanitized.append(row)
            else:
                skipped = True
                sanitized.append(_event_row(EVENT_ROW_SKIPPED, {"index": index, "reason": "row is not a mapping"}))

        # Skip markers replace the bad rows on disk so later reads see the same events.
        if skipped:
            self._write_yaml_list(sanitized)
        return sanitized

    def _write_yaml_list(self, rows: list[dict[str, Any]]) -> None:
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(rows, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as error:
            raise ReservationStorageError(f"Failed to write YAML file: {self.path}") from error
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def _recover_corrupted_yaml(self, error: Exception) -> list[dict[str, Any]]:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup_path = self.path.with_name(f"{self.path.stem}.corrupt.{timestamp}{self.path.suffix}")
        try:
            if self.path.exists():
                shutil.copy2(self.path, backup_path)
        except OSError as copy_error:
            raise ReservationStorageError(f"Failed to back up corrupted YAML file: {self.path}") from copy_error

        rows = [
            _event_row(
                EVENT_LOG_RECOVERED,
                {
                    "file": str(self.path.name),
                    "backup": str(backup_path.name),
                    "reason": str(error),
                },
            )
        ]
        self._write_yaml_list(rows)
        return rows

    def record(self, event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> None:
        with self._lock:
            events = self._read_yaml_list()
            events.append(_event_row(event_type, payload, event_time))
            self._write_yaml_list(events)

    def events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            rows = self._read_yaml_list()
        return [row for row in rows if event_type is None or row.get("event_type") == event_type]


def _event_row(event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> dict[str, Any]:
    timestamp = (event_time or datetime.now(timezone.utc)).isoformat(timespec="seconds")
    return {"event_time": timestamp, "event_type": event_type, "payload": payload}
