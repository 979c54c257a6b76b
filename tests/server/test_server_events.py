import datetime as dt
import json
import unittest

from server.events import ReplayCache, encode_event


class ServerEventsTests(unittest.TestCase):
    def test_encode_event_serializes_timestamp_and_payload(self) -> None:
        now = dt.datetime(2026, 2, 21, 10, 0, tzinfo=dt.timezone.utc)
        raw = encode_event(
            "clock",
            {"mode": "work", "remaining_seconds": 1500},
            now_fn=lambda: now,
        )
        payload = json.loads(raw)

        self.assertEqual("clock", payload["type"])
        self.assertEqual(now.isoformat(), payload["timestamp"])
        self.assertEqual("work", payload["mode"])
        self.assertEqual(1500, payload["remaining_seconds"])

    def test_replay_cache_ignores_transient_events(self) -> None:
        cache = ReplayCache()

        self.assertFalse(cache.record("hello", '{"type":"hello"}'))
        self.assertFalse(cache.record("session_complete", '{"type":"session_complete"}'))
        self.assertEqual([], cache.replay())

    def test_replay_sends_config_before_clock(self) -> None:
        cache = ReplayCache()
        cache.record("notification", '{"type":"notification","n":1}')
        cache.record("clock", '{"type":"clock","n":2}')
        cache.record("config", '{"type":"config","n":3}')

        decoded_types = [json.loads(frame)["type"] for frame in cache.replay()]
        self.assertEqual(["config", "clock", "notification"], decoded_types)

    def test_replay_keeps_latest_frame_per_type(self) -> None:
        cache = ReplayCache()
        cache.record("clock", '{"type":"clock","remaining_seconds":10}')
        cache.record("clock", '{"type":"clock","remaining_seconds":9}')

        frames = cache.replay()
        self.assertEqual(1, len(frames))
        self.assertEqual(9, json.loads(frames[0])["remaining_seconds"])

        cache.clear()
        self.assertEqual([], cache.replay())


if __name__ == "__main__":
    unittest.main()
