import asyncio
import unittest

from session_clock import LoopCountdown


class LoopCountdownTests(unittest.TestCase):
    def setUp(self) -> None:
        self.loop = asyncio.new_event_loop()
        self.addCleanup(self.loop.close)

    def _run_for(self, seconds: float) -> None:
        self.loop.run_until_complete(asyncio.sleep(seconds))

    def test_armed_countdown_fires_repeatedly(self) -> None:
        countdown = LoopCountdown(self.loop)
        calls = []

        countdown.arm(lambda: calls.append(1), 0.01)
        self._run_for(0.1)
        countdown.disarm()

        self.assertGreaterEqual(len(calls), 3)

    def test_disarm_stops_further_callbacks(self) -> None:
        countdown = LoopCountdown(self.loop)
        calls = []

        countdown.arm(lambda: calls.append(1), 0.01)
        countdown.disarm()
        self._run_for(0.05)

        self.assertEqual([], calls)
        self.assertFalse(countdown.is_armed)

    def test_callback_may_disarm_its_own_countdown(self) -> None:
        countdown = LoopCountdown(self.loop)
        calls = []

        def _once() -> None:
            calls.append(1)
            countdown.disarm()

        countdown.arm(_once, 0.01)
        self._run_for(0.08)

        self.assertEqual([1], calls)
        self.assertFalse(countdown.is_armed)

    def test_rearming_replaces_previous_callback(self) -> None:
        countdown = LoopCountdown(self.loop)
        first, second = [], []

        countdown.arm(lambda: first.append(1), 0.01)
        countdown.arm(lambda: second.append(1), 0.01)
        self._run_for(0.05)
        countdown.disarm()

        self.assertEqual([], first)
        self.assertTrue(second)

    def test_non_positive_interval_is_rejected(self) -> None:
        countdown = LoopCountdown(self.loop)
        with self.assertRaises(ValueError):
            countdown.arm(lambda: None, 0)


if __name__ == "__main__":
    unittest.main()
