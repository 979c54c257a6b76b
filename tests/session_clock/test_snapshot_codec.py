import json
import unittest

from session_clock import (
    ClockState,
    Phase,
    SnapshotFormatError,
    deserialize,
    serialize,
)


class SnapshotCodecTests(unittest.TestCase):
    def test_serialize_uses_persisted_field_names(self) -> None:
        state = ClockState(
            phase=Phase.LONG_BREAK,
            remaining_seconds=431,
            running=True,
            completed_work_sessions=8,
        )

        payload = serialize(state)

        self.assertEqual(
            {
                "mode": "longbreak",
                "remaining": 431,
                "running": True,
                "completedWorkSessions": 8,
            },
            payload,
        )

    def test_deserialize_reads_json_written_by_previous_session(self) -> None:
        raw = json.loads(
            '{"mode": "break", "remaining": 120.0, "running": false, '
            '"completedWorkSessions": 3}'
        )

        state = deserialize(raw)

        self.assertEqual(Phase.SHORT_BREAK, state.phase)
        self.assertEqual(120, state.remaining_seconds)
        self.assertFalse(state.running)
        self.assertEqual(3, state.completed_work_sessions)

    def test_missing_counter_and_running_default_to_fresh_values(self) -> None:
        state = deserialize({"mode": "work", "remaining": 900})

        self.assertFalse(state.running)
        self.assertEqual(0, state.completed_work_sessions)

    def test_malformed_snapshots_are_rejected(self) -> None:
        cases = {
            "not a mapping": ["work", 10],
            "unknown mode": {"mode": "nap", "remaining": 10},
            "missing remaining": {"mode": "work"},
            "negative remaining": {"mode": "work", "remaining": -1},
            "fractional remaining": {"mode": "work", "remaining": 1.5},
            "bool remaining": {"mode": "work", "remaining": True},
            "string running": {"mode": "work", "remaining": 10, "running": "yes"},
            "negative counter": {
                "mode": "work",
                "remaining": 10,
                "completedWorkSessions": -2,
            },
        }
        for label, raw in cases.items():
            with self.subTest(case=label):
                with self.assertRaises(SnapshotFormatError):
                    deserialize(raw)


if __name__ == "__main__":
    unittest.main()
