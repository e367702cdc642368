# clubs/utils.py
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


TIME_PATTERN = re.compile(r"([01]?[0-9]|2[0-3]):([0-5][0-9])")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

MINUTES_PER_DAY = 24 * 60
END_OF_DAY = "24:00"


def is_valid_time_format(value):
    """
    True for wall-clock times written as H:MM or HH:MM (00:00-23:59).
    """
    if not isinstance(value, str):
        return False
    return TIME_PATTERN.fullmatch(value) is not None


def is_valid_end_time(value):
    """
    Like is_valid_time_format, but also accepts 24:00 (end of day).
    """
    return value == END_OF_DAY or is_valid_time_format(value)


def normalize_time(value):
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{int(minutes):02d}"


def time_to_minutes(value):
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes):
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def intervals_overlap(a_start, a_end, b_start, b_end):
    # Half-open: touching intervals do not overlap
    return a_start < b_end and b_start < a_end


def do_times_overlap(a_start, a_end, b_start, b_end):
    return intervals_overlap(
        time_to_minutes(a_start),
        time_to_minutes(a_end),
        time_to_minutes(b_start),
        time_to_minutes(b_end),
    )


def parse_date(value):
    """
    Strict YYYY-MM-DD parsing. Raises ValueError on anything else.
    """
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_utc_datetime(day, minutes):
    """
    Instant for `minutes` past midnight UTC on `day`.
    Minutes past 24:00 roll into the next day.
    """
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return midnight + timedelta(minutes=minutes)


def weekday_index(day):
    """
    Day of week with Sunday=0 ... Saturday=6.
    """
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class TimeRange:
    """
    Half-open [start, end) window of a day, as HH:MM strings.
    An end of 24:00 stands for midnight at the end of the day.
    """

    start: str
    end: str

    @property
    def start_minutes(self):
        return time_to_minutes(self.start)

    @property
    def end_minutes(self):
        return time_to_minutes(self.end)

    @classmethod
    def from_minutes(cls, start, end):
        return cls(minutes_to_time(start), minutes_to_time(end))

    def overlaps(self, other):
        return intervals_overlap(
            self.start_minutes, self.end_minutes,
            other.start_minutes, other.end_minutes,
        )

    def contains(self, other):
        return (
            self.start_minutes <= other.start_minutes
            and other.end_minutes <= self.end_minutes
        )

    def __str__(self):
        return f"{self.start}-{self.end}"
