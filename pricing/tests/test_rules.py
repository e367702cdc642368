"""Tests for rule targets, the day compatibility matrix and rule validation."""

from datetime import date

from django.test import SimpleTestCase

from Clubs.exceptions import InputValidationError
from pricing.constants import RuleType
from pricing.rules import (
    AllDays,
    Holiday,
    SpecificDate,
    SpecificDay,
    Weekdays,
    Weekends,
    build_target,
    build_window,
    targets_can_share_day,
)

MONDAY = date(2024, 1, 15)
SATURDAY = date(2024, 1, 13)
SUNDAY = date(2024, 1, 14)


class TargetMatchingTests(SimpleTestCase):
    def test_day_selectors(self) -> None:
        self.assertTrue(SpecificDate(MONDAY).matches(MONDAY))
        self.assertFalse(SpecificDate(MONDAY).matches(SUNDAY))
        self.assertTrue(SpecificDay(1).matches(MONDAY))
        self.assertFalse(SpecificDay(0).matches(MONDAY))
        self.assertTrue(Weekdays().matches(MONDAY))
        self.assertFalse(Weekdays().matches(SATURDAY))
        self.assertTrue(Weekends().matches(SATURDAY))
        self.assertTrue(Weekends().matches(SUNDAY))
        self.assertFalse(Weekends().matches(MONDAY))
        self.assertTrue(AllDays().matches(SUNDAY))

    def test_holiday_matches_its_date_only(self) -> None:
        self.assertTrue(Holiday(1, MONDAY).matches(MONDAY))
        self.assertFalse(Holiday(1, MONDAY).matches(SUNDAY))

    def test_orphaned_holiday_never_matches(self) -> None:
        orphan = Holiday(1, None)
        self.assertTrue(orphan.is_orphaned)
        self.assertFalse(orphan.matches(MONDAY))


class CompatibilityMatrixTests(SimpleTestCase):
    def assertShare(self, a, b, expected: bool) -> None:
        self.assertEqual(targets_can_share_day(a, b), expected, (a, b))
        self.assertEqual(targets_can_share_day(b, a), expected, (b, a))

    def test_specific_dates(self) -> None:
        self.assertShare(SpecificDate(MONDAY), SpecificDate(MONDAY), True)
        self.assertShare(SpecificDate(MONDAY), SpecificDate(SUNDAY), False)

    def test_specific_days(self) -> None:
        self.assertShare(SpecificDay(3), SpecificDay(3), True)
        self.assertShare(SpecificDay(3), SpecificDay(4), False)

    def test_specific_date_against_day_of_week(self) -> None:
        self.assertShare(SpecificDate(MONDAY), SpecificDay(1), True)
        self.assertShare(SpecificDate(MONDAY), SpecificDay(2), False)

    def test_all_days_shares_with_everything(self) -> None:
        for other in (
            AllDays(), Weekdays(), Weekends(), SpecificDay(0),
            SpecificDate(MONDAY), Holiday(1, SUNDAY), Holiday(2, None),
        ):
            with self.subTest(other=other):
                self.assertShare(AllDays(), other, True)

    def test_weekdays(self) -> None:
        self.assertShare(Weekdays(), Weekdays(), True)
        self.assertShare(Weekdays(), Weekends(), False)
        self.assertShare(Weekdays(), SpecificDay(5), True)
        self.assertShare(Weekdays(), SpecificDay(6), False)
        self.assertShare(Weekdays(), SpecificDate(MONDAY), True)
        self.assertShare(Weekdays(), SpecificDate(SATURDAY), False)

    def test_weekends(self) -> None:
        self.assertShare(Weekends(), Weekends(), True)
        self.assertShare(Weekends(), SpecificDay(0), True)
        self.assertShare(Weekends(), SpecificDay(3), False)
        self.assertShare(Weekends(), SpecificDate(SUNDAY), True)
        self.assertShare(Weekends(), SpecificDate(MONDAY), False)

    def test_holidays(self) -> None:
        self.assertShare(Holiday(1, MONDAY), Holiday(1, MONDAY), True)
        self.assertShare(Holiday(1, MONDAY), Holiday(2, SUNDAY), False)
        # Two holidays on one day can both fire
        self.assertShare(Holiday(1, MONDAY), Holiday(2, MONDAY), True)

    def test_holiday_against_date_based_rules(self) -> None:
        holiday = Holiday(1, MONDAY)
        self.assertShare(holiday, SpecificDate(MONDAY), True)
        self.assertShare(holiday, SpecificDate(SUNDAY), False)
        self.assertShare(holiday, SpecificDay(1), True)
        self.assertShare(holiday, SpecificDay(2), False)
        self.assertShare(holiday, Weekdays(), True)
        self.assertShare(holiday, Weekends(), False)

    def test_undetermined_holiday_is_treated_as_conflicting(self) -> None:
        orphan = Holiday(7, None)
        for other in (SpecificDate(MONDAY), SpecificDay(2), Weekends(), Holiday(8, SUNDAY)):
            with self.subTest(other=other):
                self.assertShare(orphan, other, True)


class BuildTargetTests(SimpleTestCase):
    def _code(self, *args, **kwargs) -> str:
        with self.assertRaises(InputValidationError) as ctx:
            build_target(*args, **kwargs)
        return ctx.exception.detail.code

    def test_builds_each_variant(self) -> None:
        self.assertEqual(build_target(RuleType.SPECIFIC_DAY, day_of_week=0), SpecificDay(0))
        self.assertEqual(build_target(RuleType.SPECIFIC_DATE, date=MONDAY), SpecificDate(MONDAY))
        self.assertEqual(build_target(RuleType.HOLIDAY, holiday_id=4), Holiday(4, None))
        self.assertEqual(build_target(RuleType.WEEKDAYS), Weekdays())
        self.assertEqual(build_target(RuleType.WEEKENDS), Weekends())
        self.assertEqual(build_target(RuleType.ALL_DAYS), AllDays())

    def test_unknown_type(self) -> None:
        self.assertEqual(self._code("MONTHLY"), "invalid_rule_type")

    def test_missing_type_specific_field(self) -> None:
        self.assertEqual(self._code(RuleType.SPECIFIC_DAY), "missing_rule_field")
        self.assertEqual(self._code(RuleType.SPECIFIC_DATE), "missing_rule_field")
        self.assertEqual(self._code(RuleType.HOLIDAY), "missing_rule_field")

    def test_only_one_selector_field_may_be_set(self) -> None:
        self.assertEqual(
            self._code(RuleType.SPECIFIC_DAY, day_of_week=1, date=MONDAY),
            "unexpected_rule_field",
        )
        self.assertEqual(
            self._code(RuleType.ALL_DAYS, holiday_id=1),
            "unexpected_rule_field",
        )

    def test_day_of_week_range(self) -> None:
        for value in (-1, 7, True, "1"):
            with self.subTest(value=value):
                self.assertEqual(
                    self._code(RuleType.SPECIFIC_DAY, day_of_week=value),
                    "invalid_day_of_week",
                )


class BuildWindowTests(SimpleTestCase):
    def test_normalizes_times(self) -> None:
        window = build_window("9:00", "10:30")
        self.assertEqual((window.start, window.end), ("09:00", "10:30"))

    def test_rejects_bad_format(self) -> None:
        with self.assertRaises(InputValidationError):
            build_window("9am", "10:00")

    def test_rejects_empty_and_reversed_windows(self) -> None:
        for start, end in (("10:00", "10:00"), ("9:00", "09:00"), ("11:00", "10:00")):
            with self.subTest(window=(start, end)):
                with self.assertRaises(InputValidationError) as ctx:
                    build_window(start, end)
                self.assertEqual(ctx.exception.detail.code, "invalid_time_range")

    def test_end_of_day_is_only_valid_as_end(self) -> None:
        window = build_window("23:00", "24:00")
        self.assertEqual(window.end_minutes, 24 * 60)

        for start, end in (("24:00", "24:00"), ("10:00", "24:30"), ("10:00", "25:00")):
            with self.subTest(window=(start, end)):
                with self.assertRaises(InputValidationError) as ctx:
                    build_window(start, end)
                self.assertEqual(ctx.exception.detail.code, "invalid_time_format")
