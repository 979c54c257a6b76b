import threading
import time
import unittest

from session_clock import ThreadCountdown


class ThreadCountdownTests(unittest.TestCase):
    def setUp(self) -> None:
        self.countdown = ThreadCountdown()
        self.addCleanup(self.countdown.disarm)

    def test_armed_countdown_fires_repeatedly(self) -> None:
        calls = []
        reached = threading.Event()

        def _record() -> None:
            calls.append(1)
            if len(calls) >= 3:
                reached.set()

        self.countdown.arm(_record, 0.01)

        self.assertTrue(reached.wait(2.0))
        self.assertTrue(self.countdown.is_armed)

    def test_disarm_stops_further_callbacks(self) -> None:
        calls = []

        self.countdown.arm(lambda: calls.append(1), 0.01)
        self.countdown.disarm()
        time.sleep(0.05)

        self.assertEqual([], calls)
        self.assertFalse(self.countdown.is_armed)

    def test_callback_may_disarm_its_own_countdown(self) -> None:
        calls = []
        fired = threading.Event()

        def _once() -> None:
            calls.append(1)
            self.countdown.disarm()
            fired.set()

        self.countdown.arm(_once, 0.01)
        self.assertTrue(fired.wait(2.0))
        time.sleep(0.05)

        self.assertEqual([1], calls)
        self.assertFalse(self.countdown.is_armed)

    def test_rearming_replaces_previous_callback(self) -> None:
        first, second = [], []
        fired = threading.Event()

        def _second() -> None:
            second.append(1)
            fired.set()

        self.countdown.arm(lambda: first.append(1), 0.01)
        self.countdown.arm(_second, 0.01)

        self.assertTrue(fired.wait(2.0))
        self.countdown.disarm()
        self.assertEqual([], first)

    def test_non_positive_interval_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.countdown.arm(lambda: None, -1)


if __name__ == "__main__":
    unittest.main()
