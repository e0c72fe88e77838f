import unittest
from unittest.mock import patch

from sideline_rotation.models import MatchClock
from sideline_rotation.services import TimerService

NOW = "sideline_rotation.services.timer_service.now_ts"


class TimerServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = MatchClock()
        self.service = TimerService(self.clock)

    def test_configure_match_resets_periods(self) -> None:
        self.service.configure_match(period_count=3, period_length_minutes=15)
        self.assertEqual(self.clock.period_count, 3)
        self.assertEqual(self.clock.period_length_seconds, 15 * 60)
        self.assertEqual(self.clock.period_elapsed, [0, 0, 0])

        with patch(NOW, return_value=1000):
            self.service.start_match()

        with self.assertRaises(ValueError):
            self.service.configure_match(period_count=2)

    def test_configure_match_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            self.service.configure_match(period_count=5)
        with self.assertRaises(ValueError):
            self.service.configure_match(period_length_minutes=0)

    def test_elapsed_and_remaining_seconds(self) -> None:
        self.service.configure_match(period_count=2, period_length_minutes=20)

        with patch(NOW, return_value=1000):
            self.service.start_match()

        with patch(NOW, return_value=1600):
            self.service.pause()

        self.assertEqual(self.clock.period_elapsed[0], 600)
        self.assertTrue(self.service.is_paused)
        self.assertEqual(self.service.get_remaining_period_seconds(), 600)

        with patch(NOW, return_value=2000):
            self.service.resume()

        with patch(NOW, return_value=2300):
            self.assertEqual(self.service.get_period_elapsed_seconds(), 900)
            self.assertEqual(self.service.get_match_elapsed_seconds(), 900)
            self.assertEqual(self.service.get_sub_timer_seconds(), 900)

    def test_end_period_advances_until_match_is_over(self) -> None:
        self.service.configure_match(period_count=2, period_length_minutes=10)

        with patch(NOW, return_value=0):
            self.service.start_match()
        with patch(NOW, return_value=500):
            self.assertTrue(self.service.end_period())

        self.assertEqual(self.service.get_period_info(), (2, 2))
        self.assertEqual(self.clock.period_elapsed, [500, 0])

        with patch(NOW, return_value=600):
            self.service.resume()
        with patch(NOW, return_value=900):
            self.assertFalse(self.service.end_period())

        summaries = self.service.get_period_summaries()
        self.assertEqual([s["elapsed_seconds"] for s in summaries], [500, 300])

    def test_reset_sub_timer_keeps_running_state(self) -> None:
        with patch(NOW, return_value=1000):
            self.service.start_match()
        with patch(NOW, return_value=1300):
            self.service.reset_sub_timer()
        with patch(NOW, return_value=1345):
            self.assertEqual(self.service.get_sub_timer_seconds(), 45)

    def test_restore_sub_timer_continues_from_anchor(self) -> None:
        with patch(NOW, return_value=1000):
            self.service.start_match()
        with patch(NOW, return_value=1300):
            self.service.reset_sub_timer()
        with patch(NOW, return_value=1360):
            self.service.restore_sub_timer(300, 1300)
            # 300 at the anchor plus the 60 seconds since
            self.assertEqual(self.service.get_sub_timer_seconds(), 360)

    def test_restore_sub_timer_while_paused(self) -> None:
        with patch(NOW, return_value=1000):
            self.service.start_match()
        with patch(NOW, return_value=1200):
            self.service.pause()
            self.service.restore_sub_timer(90, 1100)
        with patch(NOW, return_value=5000):
            self.assertEqual(self.service.get_sub_timer_seconds(), 90)

    def test_snapshot(self) -> None:
        with patch(NOW, return_value=1000):
            self.service.start_match()
        with patch(NOW, return_value=1030):
            snapshot = self.service.snapshot()
        self.assertEqual(snapshot["period_number"], 1)
        self.assertFalse(snapshot["paused"])
        self.assertEqual(snapshot["sub_timer_seconds"], 30)
        self.assertEqual(snapshot["period_remaining_seconds"], 20 * 60 - 30)


if __name__ == "__main__":
    unittest.main()
