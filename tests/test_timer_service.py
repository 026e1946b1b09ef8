import unittest
from unittest.mock import patch

from practice_tracker.models import Session, TimerRecord, create_drills
from practice_tracker.services import ManualScheduler, TimerService


def _open_segments(service: TimerService) -> int:
    return sum(
        1
        for state in service.timers.values()
        for segment in state.time_segments
        if segment.end_time is None
    )


class TimerServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = Session(drills=create_drills(2))
        self.scheduler = ManualScheduler(start_ms=1000)
        self.service = TimerService(self.session, scheduler=self.scheduler, clock=self.scheduler.now)
        self.events = []
        self.service.add_listener(self.events.append)
        self.assertTrue(self.service.load(0))

    def test_load_builds_enabled_timers_only(self) -> None:
        self.assertEqual(
            sorted(self.service.timers),
            ["demonstration", "explanation", "feedbackteam", "timemoving"],
        )
        self.session.drills[1].find_action("demonstration").enabled = False
        self.service.load(1)
        self.assertNotIn("demonstration", self.service.timers)
        self.assertFalse(self.service.start("demonstration"))

    def test_start_then_pause_closes_one_segment(self) -> None:
        self.assertTrue(self.service.start("explanation"))
        self.assertEqual(self.session.active_timer_action_id, "explanation")

        self.scheduler.advance(2500)
        self.assertTrue(self.service.pause("explanation"))

        state = self.service.timers["explanation"]
        self.assertEqual(len(state.time_segments), 1)
        segment = state.time_segments[0]
        self.assertEqual((segment.start_time, segment.end_time), (1000, 3500))
        self.assertEqual(segment.duration, 2500)
        self.assertEqual(state.total_time, 2500)
        self.assertIsNone(self.session.active_timer_action_id)

        committed = self.session.drills[0].timer_data["explanation"]
        self.assertEqual(committed.total_time, 2500)
        self.assertEqual(committed.time_segments[0].end_time, 3500)

    def test_start_preempts_running_timer(self) -> None:
        self.service.start("explanation")
        self.scheduler.advance(1000)
        self.service.start("demonstration")

        self.assertEqual(
            [(e.kind, e.action_id) for e in self.events],
            [("start", "explanation"), ("stop", "explanation"), ("start", "demonstration")],
        )
        first = self.service.timers["explanation"].time_segments[-1]
        second = self.service.timers["demonstration"].time_segments[-1]
        self.assertLessEqual(first.end_time, second.start_time)
        self.assertEqual(_open_segments(self.service), 1)
        self.assertEqual(self.session.active_timer_action_id, "demonstration")

    def test_open_segment_is_not_committed(self) -> None:
        self.service.start("explanation")
        self.scheduler.advance(400)
        self.assertNotIn("explanation", self.session.drills[0].timer_data)

        self.service.unload()
        committed = self.session.drills[0].timer_data["explanation"]
        self.assertEqual(committed.total_time, 400)
        self.assertIsNotNone(committed.time_segments[-1].end_time)
        self.assertIsNone(self.session.active_timer_action_id)

    def test_reload_resumes_committed_totals(self) -> None:
        self.service.start("explanation")
        self.scheduler.advance(1000)
        self.service.pause("explanation")
        self.service.unload()

        self.service.load(0)
        self.assertEqual(self.service.timers["explanation"].total_time, 1000)

        self.service.start("explanation")
        self.scheduler.advance(500)
        self.service.stop("explanation")
        self.assertEqual(self.service.timers["explanation"].total_time, 1500)
        self.assertEqual(len(self.session.drills[0].timer_data["explanation"].time_segments), 2)

    def test_invalid_commands_are_ignored(self) -> None:
        self.assertFalse(self.service.pause("explanation"))
        self.assertFalse(self.service.stop("explanation"))
        self.assertFalse(self.service.start("shots"))
        self.assertFalse(self.service.start("unknown"))

        self.service.start("explanation")
        self.assertFalse(self.service.start("explanation"))
        self.assertFalse(self.service.reset("explanation"))
        self.assertEqual(len(self.service.timers["explanation"].time_segments), 1)

    def test_reset_clears_idle_timer(self) -> None:
        self.service.start("explanation")
        self.scheduler.advance(700)
        self.service.pause("explanation")

        self.assertTrue(self.service.reset("explanation"))
        self.assertEqual(self.service.timers["explanation"].total_time, 0)
        self.assertEqual(self.service.timers["explanation"].time_segments, [])
        self.assertEqual(self.session.drills[0].timer_data["explanation"], TimerRecord())

    def test_display_tick_runs_only_while_running(self) -> None:
        self.assertEqual(self.scheduler.active_ticks, 0)
        self.service.start("explanation")
        self.assertEqual(self.scheduler.active_ticks, 1)

        self.scheduler.advance(300)
        self.assertEqual(self.service.timers["explanation"].elapsed_time, 300)
        self.assertEqual(self.service.elapsed_ms("explanation"), 300)
        self.assertEqual(self.service.display_total_ms("explanation"), 300)

        self.service.pause("explanation")
        self.assertEqual(self.scheduler.active_ticks, 0)
        self.assertEqual(self.service.elapsed_ms("explanation"), 0)

    def test_unload_cancels_tick(self) -> None:
        self.service.start("timemoving")
        self.service.unload()
        self.assertEqual(self.scheduler.active_ticks, 0)
        self.assertFalse(self.service.loaded)
        self.assertFalse(self.service.start("timemoving"))


class TimerServiceWallClockTests(unittest.TestCase):
    def test_uses_module_clock_by_default(self) -> None:
        session = Session(drills=create_drills(1))
        service = TimerService(session)
        service.load(0)

        with patch("practice_tracker.services.timer_service.now_ms", return_value=1000):
            service.start("explanation")

        with patch("practice_tracker.services.timer_service.now_ms", return_value=1600):
            self.assertEqual(service.elapsed_ms("explanation"), 600)
            service.pause("explanation")

        self.assertEqual(session.drills[0].timer_data["explanation"].total_time, 600)

    def test_clock_stepping_backwards_closes_empty_segment(self) -> None:
        session = Session(drills=create_drills(1))
        ticks = iter([10_000, 9_000])
        service = TimerService(session, clock=lambda: next(ticks))
        service.load(0)

        service.start("explanation")
        service.pause("explanation")

        segment = service.timers["explanation"].time_segments[0]
        self.assertEqual((segment.start_time, segment.end_time, segment.duration), (10_000, 10_000, 0))
        self.assertEqual(session.drills[0].timer_data["explanation"].total_time, 0)


if __name__ == "__main__":
    unittest.main()
