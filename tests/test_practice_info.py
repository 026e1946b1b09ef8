import unittest

from practice_tracker.models import PracticeInfo
from practice_tracker.models.practice_info import parse_count, parse_number


class PracticeInfoTests(unittest.TestCase):
    def test_defaults(self) -> None:
        info = PracticeInfo()
        self.assertEqual(info.club_name, "")
        self.assertEqual(info.drills_number, 0)
        self.assertTrue(info.date)

    def test_numeric_fields_parse_leniently(self) -> None:
        info = PracticeInfo()
        applied = info.apply(evaluation="4.5", athletes_number="18", coaches_number="abc")

        self.assertEqual(info.evaluation, 4.5)
        self.assertEqual(info.athletes_number, 18)
        self.assertEqual(info.coaches_number, 0)
        self.assertEqual(applied, {"evaluation": 4.5, "athletes_number": 18, "coaches_number": 0})

    def test_drills_number_is_non_negative_int(self) -> None:
        self.assertEqual(parse_count("3"), 3)
        self.assertEqual(parse_count("2.7"), 2)
        self.assertEqual(parse_count("-2"), 0)
        self.assertEqual(parse_count(None), 0)
        self.assertEqual(parse_count("many"), 0)

    def test_parse_number_keeps_integral_values_integral(self) -> None:
        self.assertEqual(parse_number("7"), 7)
        self.assertIsInstance(parse_number("7"), int)
        self.assertEqual(parse_number(""), 0)

    def test_non_finite_numbers_fall_back_to_zero(self) -> None:
        self.assertEqual(parse_number("inf"), 0)
        self.assertEqual(parse_number("nan"), 0)
        self.assertEqual(parse_number(float("-inf")), 0)
        self.assertEqual(parse_count("1e400"), 0)

        info = PracticeInfo()
        applied = info.apply(evaluation="inf", total_time="nan", athletes_number="1e400")
        self.assertEqual(applied, {"evaluation": 0, "total_time": 0, "athletes_number": 0})

    def test_head_counts_are_integers(self) -> None:
        info = PracticeInfo()
        info.apply(athletes_number="12.6", coaches_number="-1")
        self.assertEqual(info.athletes_number, 12)
        self.assertIsInstance(info.athletes_number, int)
        self.assertEqual(info.coaches_number, 0)

    def test_string_fields_accept_none(self) -> None:
        info = PracticeInfo(club_name="Old")
        info.apply(club_name=None, team_name="U14")
        self.assertEqual(info.club_name, "")
        self.assertEqual(info.team_name, "U14")

    def test_unknown_fields_are_not_applied(self) -> None:
        info = PracticeInfo()
        applied = info.apply(stadium="Main", coach_name="Lee")
        self.assertEqual(applied, {"coach_name": "Lee"})
        self.assertFalse(hasattr(info, "stadium"))

    def test_dict_roundtrip(self) -> None:
        info = PracticeInfo(club_name="Falcons", drills_number=4, evaluation=3)
        restored = PracticeInfo.from_dict(info.to_dict())
        self.assertEqual(restored, info)


if __name__ == "__main__":
    unittest.main()
