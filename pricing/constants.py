# pricing/constants.py
class RuleType:
    SPECIFIC_DATE = "SPECIFIC_DATE"
    HOLIDAY = "HOLIDAY"
    SPECIFIC_DAY = "SPECIFIC_DAY"
    WEEKDAYS = "WEEKDAYS"
    WEEKENDS = "WEEKENDS"
    ALL_DAYS = "ALL_DAYS"

    CHOICES = (
        (SPECIFIC_DATE, "Specific date"),
        (HOLIDAY, "Holiday"),
        (SPECIFIC_DAY, "Specific day of week"),
        (WEEKDAYS, "Weekdays"),
        (WEEKENDS, "Weekends"),
        (ALL_DAYS, "All days"),
    )

    # Lower rank wins when several rules match the same slot
    PRIORITY = {
        SPECIFIC_DATE: 0,
        HOLIDAY: 1,
        SPECIFIC_DAY: 2,
        WEEKDAYS: 3,
        WEEKENDS: 3,
        ALL_DAYS: 4,
    }

    @classmethod
    def rank(cls, rule_type):
        return cls.PRIORITY[rule_type]


# Sunday=0 ... Saturday=6
WEEKDAY_INDEXES = frozenset({1, 2, 3, 4, 5})
WEEKEND_INDEXES = frozenset({0, 6})

DELETED_HOLIDAY_LABEL = "Deleted holiday"
