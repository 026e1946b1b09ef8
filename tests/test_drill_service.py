import unittest

from practice_tracker.models import ActionKind, CounterRecord, Session, TimerRecord
from practice_tracker.services import DrillService


def _ids(drill):
    return [action.id for action in drill.action_buttons]


class DrillServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = Session()
        self.service = DrillService(self.session)
        self.service.create_drills(3)

    def test_create_drills_assigns_sequential_ids_and_template(self) -> None:
        drills = self.session.drills
        self.assertEqual([d.id for d in drills], [1, 2, 3])
        for drill in drills:
            self.assertEqual(
                _ids(drill),
                ["explanation", "demonstration", "feedbackteam", "timemoving",
                 "repetition", "feedbackplayers", "shots", "passes"],
            )
            self.assertTrue(all(action.enabled for action in drill.action_buttons))
            self.assertEqual(drill.tags, set())
            self.assertEqual(drill.waste_time, 0)
        self.assertEqual(
            [a.kind for a in drills[0].action_buttons].count(ActionKind.TIMER), 4
        )

    def test_action_templates_are_independent_clones(self) -> None:
        self.service.toggle_action_button(0, "shots")
        self.assertFalse(self.session.drills[0].find_action("shots").enabled)
        self.assertTrue(self.session.drills[1].find_action("shots").enabled)

    def test_create_drills_discards_tracked_data(self) -> None:
        self.session.drills[0].timer_data["explanation"] = TimerRecord(total_time=5)
        self.session.current_drill_index = 2

        with self.assertLogs("practice_tracker.services.drill_service", level="WARNING"):
            self.service.create_drills(2)

        self.assertEqual(len(self.session.drills), 2)
        self.assertEqual(self.session.drills[0].timer_data, {})
        self.assertEqual(self.session.current_drill_index, 0)

    def test_create_zero_drills(self) -> None:
        self.service.create_drills(0)
        self.assertEqual(self.session.drills, [])

    def test_reorder_moves_single_action(self) -> None:
        self.assertTrue(self.service.reorder_action_buttons(0, 0, 3))
        self.assertEqual(
            _ids(self.session.drills[0]),
            ["demonstration", "feedbackteam", "timemoving", "explanation",
             "repetition", "feedbackplayers", "shots", "passes"],
        )

    def test_reorder_backwards(self) -> None:
        self.service.reorder_action_buttons(0, 7, 0)
        self.assertEqual(_ids(self.session.drills[0])[:2], ["passes", "explanation"])

    def test_reorder_out_of_range_is_ignored(self) -> None:
        before = _ids(self.session.drills[0])
        self.assertFalse(self.service.reorder_action_buttons(0, 0, 8))
        self.assertFalse(self.service.reorder_action_buttons(0, -1, 2))
        self.assertFalse(self.service.reorder_action_buttons(5, 0, 1))
        self.assertEqual(_ids(self.session.drills[0]), before)

    def test_move_action_by_ids(self) -> None:
        self.assertTrue(self.service.move_action_button(1, "shots", "explanation"))
        self.assertEqual(_ids(self.session.drills[1])[0], "shots")
        self.assertFalse(self.service.move_action_button(1, "shots", "unknown"))

    def test_tags_are_replaced_wholesale(self) -> None:
        self.service.update_drill_tags(0, ["skating", "passing"])
        self.service.update_drill_tags(0, ["tactic"])
        self.assertEqual(self.session.drills[0].tags, {"tactic"})
        self.assertFalse(self.service.update_drill_tags(9, ["tactic"]))

    def test_bare_string_is_a_single_tag(self) -> None:
        self.assertTrue(self.service.update_drill_tags(0, "skating"))
        self.assertEqual(self.session.drills[0].tags, {"skating"})

    def test_record_for_dispatches_on_action_kind(self) -> None:
        drill = self.session.drills[0]
        drill.timer_data["explanation"] = TimerRecord(total_time=5)
        drill.counter_data["shots"] = CounterRecord(count=2, timestamps=[1, 2])

        self.assertIsInstance(drill.record_for("explanation"), TimerRecord)
        self.assertEqual(drill.record_for("shots").count, 2)
        self.assertIsNone(drill.record_for("passes"))
        self.assertIsNone(drill.record_for("unknown"))

    def test_toggle_unknown_action_is_ignored(self) -> None:
        self.assertFalse(self.service.toggle_action_button(0, "unknown"))
        self.assertTrue(self.service.set_action_enabled(0, "passes", False))
        self.assertFalse(self.session.drills[0].is_enabled("passes", ActionKind.COUNTER))


if __name__ == "__main__":
    unittest.main()
