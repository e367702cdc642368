"""
Price rule targets.

A rule's day selector is one of six variants, each carrying only the
field it needs. ORM rows are converted into these before any matching
or conflict reasoning happens.
"""

from dataclasses import dataclass
from datetime import date as date_type
from typing import ClassVar, Optional

from Clubs.exceptions import InputValidationError
from Clubs.utils import (
    TimeRange,
    is_valid_end_time,
    is_valid_time_format,
    normalize_time,
    weekday_index,
)

from .constants import WEEKDAY_INDEXES, WEEKEND_INDEXES, RuleType


ALL_WEEKDAYS = frozenset(range(7))


@dataclass(frozen=True)
class SpecificDate:
    date: date_type

    rule_type: ClassVar[str] = RuleType.SPECIFIC_DATE

    @property
    def fixed_date(self):
        return self.date

    @property
    def weekdays(self):
        return frozenset({weekday_index(self.date)})

    def matches(self, day):
        return day == self.date


@dataclass(frozen=True)
class SpecificDay:
    day_of_week: int

    rule_type: ClassVar[str] = RuleType.SPECIFIC_DAY

    fixed_date = None

    @property
    def weekdays(self):
        return frozenset({self.day_of_week})

    def matches(self, day):
        return weekday_index(day) == self.day_of_week


@dataclass(frozen=True)
class Weekdays:
    rule_type: ClassVar[str] = RuleType.WEEKDAYS

    fixed_date = None
    weekdays = WEEKDAY_INDEXES

    def matches(self, day):
        return weekday_index(day) in WEEKDAY_INDEXES


@dataclass(frozen=True)
class Weekends:
    rule_type: ClassVar[str] = RuleType.WEEKENDS

    fixed_date = None
    weekdays = WEEKEND_INDEXES

    def matches(self, day):
        return weekday_index(day) in WEEKEND_INDEXES


@dataclass(frozen=True)
class AllDays:
    rule_type: ClassVar[str] = RuleType.ALL_DAYS

    fixed_date = None
    weekdays = ALL_WEEKDAYS

    def matches(self, day):
        return True


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    # None when the referenced holiday no longer exists
    holiday_date: Optional[date_type] = None

    rule_type: ClassVar[str] = RuleType.HOLIDAY

    @property
    def fixed_date(self):
        return self.holiday_date

    @property
    def is_orphaned(self):
        return self.holiday_date is None

    @property
    def weekdays(self):
        if self.holiday_date is None:
            return ALL_WEEKDAYS
        return frozenset({weekday_index(self.holiday_date)})

    def matches(self, day):
        return self.holiday_date is not None and day == self.holiday_date


def targets_can_share_day(a, b):
    """
    True when two targets could both select the same calendar day.

    Symmetric. A holiday whose date cannot be determined is assumed to
    share a day with anything.
    """
    if isinstance(a, AllDays) or isinstance(b, AllDays):
        return True

    if isinstance(a, Holiday) and isinstance(b, Holiday):
        if a.holiday_id == b.holiday_id:
            return True

    for target in (a, b):
        if isinstance(target, Holiday) and target.is_orphaned:
            return True

    if a.fixed_date and b.fixed_date:
        return a.fixed_date == b.fixed_date
    if a.fixed_date:
        return weekday_index(a.fixed_date) in b.weekdays
    if b.fixed_date:
        return weekday_index(b.fixed_date) in a.weekdays

    return bool(a.weekdays & b.weekdays)


def build_target(rule_type, day_of_week=None, date=None, holiday_id=None, holiday_date=None):
    """
    Validate the type-specific fields of a rule and return its target.
    """
    valid_types = [value for value, _ in RuleType.CHOICES]
    if rule_type not in valid_types:
        raise InputValidationError(
            f"Invalid ruleType. Must be one of: {', '.join(valid_types)}",
            code="invalid_rule_type",
        )

    provided = {
        "dayOfWeek": day_of_week is not None,
        "date": date is not None,
        "holidayId": holiday_id is not None,
    }
    required = {
        RuleType.SPECIFIC_DAY: "dayOfWeek",
        RuleType.SPECIFIC_DATE: "date",
        RuleType.HOLIDAY: "holidayId",
    }.get(rule_type)

    if required and not provided[required]:
        raise InputValidationError(
            f"{required} is required for {rule_type} rules",
            code="missing_rule_field",
        )

    extra = [name for name, is_set in provided.items() if is_set and name != required]
    if extra:
        raise InputValidationError(
            f"{', '.join(extra)} cannot be set for {rule_type} rules",
            code="unexpected_rule_field",
        )

    if rule_type == RuleType.SPECIFIC_DAY:
        if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
            raise InputValidationError(
                "dayOfWeek must be a number between 0 (Sunday) and 6 (Saturday)",
                code="invalid_day_of_week",
            )
        return SpecificDay(day_of_week)

    if rule_type == RuleType.SPECIFIC_DATE:
        return SpecificDate(date)

    if rule_type == RuleType.HOLIDAY:
        return Holiday(holiday_id, holiday_date)

    return {
        RuleType.WEEKDAYS: Weekdays,
        RuleType.WEEKENDS: Weekends,
        RuleType.ALL_DAYS: AllDays,
    }[rule_type]()


def build_window(start_time, end_time):
    """
    Validate and normalize a rule window. Zero-length windows are rejected.
    The end may be 24:00 so a window can run until midnight.
    """
    if not is_valid_time_format(start_time):
        raise InputValidationError(
            "Invalid startTime format. Use HH:MM format (00:00-23:59)",
            code="invalid_time_format",
        )

    if not is_valid_end_time(end_time):
        raise InputValidationError(
            "Invalid endTime format. Use HH:MM format (00:00-24:00)",
            code="invalid_time_format",
        )

    window = TimeRange(normalize_time(start_time), normalize_time(end_time))

    if window.start_minutes >= window.end_minutes:
        raise InputValidationError(
            "startTime must be before endTime",
            code="invalid_time_range",
        )

    return window


@dataclass(frozen=True)
class RuleSnapshot:
    target: object
    window: TimeRange
    price_cents: int
    id: Optional[int] = None

    @property
    def rule_type(self):
        return self.target.rule_type

    @property
    def rank(self):
        return RuleType.rank(self.rule_type)

    def sort_key(self):
        return (self.rank, self.window.start_minutes, self.id or 0)

    def describe(self):
        return f"{self.rule_type} rule ({self.window.start}-{self.window.end})"

    @classmethod
    def from_model(cls, rule, holiday_dates):
        """
        Build a snapshot from a PriceRule row.
        holiday_dates maps holiday id -> date for holidays that still exist.
        """
        target = build_target(
            rule.rule_type,
            day_of_week=rule.day_of_week,
            date=rule.date,
            holiday_id=rule.holiday_id,
            holiday_date=holiday_dates.get(rule.holiday_id),
        )
        return cls(
            target=target,
            window=build_window(rule.start_time, rule.end_time),
            price_cents=rule.price_cents,
            id=rule.id,
        )
