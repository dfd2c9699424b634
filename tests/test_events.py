import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

import yaml

from vehicle_reservation import ReservationEventLog
from vehicle_reservation.events import EVENT_LOG_RECOVERED, EVENT_ROW_SKIPPED


class TestReservationEventLog(unittest.TestCase):
    def test_creates_empty_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log = ReservationEventLog(Path(temp_dir) / "data" / "events.yaml")

            self.assertTrue(log.path.exists())
            self.assertEqual(log.events(), [])

    def test_record_appends_events_in_order(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log = ReservationEventLog(Path(temp_dir) / "events.yaml")
            log.record("VEHICLE_ADDED", {"vehicle": "VAN-1"}, datetime(2026, 2, 24, 9, 0, tzinfo=timezone.utc))
            log.record("VEHICLE_ADDED", {"vehicle": "VAN-2"}, datetime(2026, 2, 24, 9, 5, tzinfo=timezone.utc))

            events = log.events()
            self.assertEqual([event["payload"]["vehicle"] for event in events], ["VAN-1", "VAN-2"])
            self.assertEqual(events[0]["event_time"], "2026-02-24T09:00:00+00:00")

            on_disk = yaml.safe_load(log.path.read_text(encoding="utf-8"))
            self.assertEqual(len(on_disk), 2)

    def test_events_filters_by_type(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log = ReservationEventLog(Path(temp_dir) / "events.yaml")
            log.record("VEHICLE_ADDED", {"vehicle": "VAN-1"})
            log.record("RESERVATION_CREATED", {"vehicle": "VAN-1"})

            self.assertEqual(len(log.events("RESERVATION_CREATED")), 1)
            self.assertEqual(len(log.events("RESERVATION_REJECTED")), 0)

    def test_corrupted_yaml_is_backed_up_and_reset(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "events.yaml"
            path.write_text("events: [unclosed\n", encoding="utf-8")
            log = ReservationEventLog(path)

            log.record("VEHICLE_ADDED", {"vehicle": "VAN-1"})

            event_types = [event["event_type"] for event in log.events()]
            self.assertEqual(event_types, [EVENT_LOG_RECOVERED, "VEHICLE_ADDED"])
            backups = list(Path(temp_dir).glob("events.corrupt.*.yaml"))
            self.assertEqual(len(backups), 1)
            self.assertIn("unclosed", backups[0].read_text(encoding="utf-8"))

    def test_non_list_document_is_recovered(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "events.yaml"
            path.write_text("vehicle: VAN-1\n", encoding="utf-8")
            log = ReservationEventLog(path)

            events = log.events()

            self.assertEqual(len(events), 1)
            self.assertEqual(events[0]["event_type"], EVENT_LOG_RECOVERED)
            self.assertIn("not a list", events[0]["payload"]["reason"])

    def test_non_mapping_rows_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "events.yaml"
            path.write_text("- just a string\n- event_type: VEHICLE_ADDED\n  payload: {}\n", encoding="utf-8")
            log = ReservationEventLog(path)

            events = log.events()

            self.assertEqual([event["event_type"] for event in events], [EVENT_ROW_SKIPPED, "VEHICLE_ADDED"])
            self.assertEqual(events[0]["payload"]["index"], 0)
            self.assertEqual(log.events(), events)

            on_disk = yaml.safe_load(path.read_text(encoding="utf-8"))
            self.assertEqual(on_disk, events)


if __name__ == "__main__":
    unittest.main()
