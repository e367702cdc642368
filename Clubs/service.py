import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings

from pricing.services import price_for_court, prorate, slot_window

from .constants import (
    DEFAULT_GRID_DAYS,
    GRID_SLOT_MINUTES,
    MAX_GRID_DAYS,
    GridMode,
    SlotState,
)
from .exceptions import InputValidationError, NotFoundError
from .models import Booking, Club, ClubBusinessHours, ClubSpecialHours, Court
from .utils import (
    MINUTES_PER_DAY,
    TimeRange,
    intervals_overlap,
    is_valid_end_time,
    is_valid_time_format,
    normalize_time,
    parse_date,
    time_to_minutes,
    to_utc_datetime,
    weekday_index,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


# ---------------------------------
# SNAPSHOTS
# ---------------------------------

@dataclass(frozen=True)
class CourtSnapshot:
    id: int
    name: str
    slug: str
    type: str
    surface: str
    indoor: bool
    default_price_cents: int
    sport_type: str = "PADEL"


@dataclass(frozen=True)
class BookingSnapshot:
    court_id: int
    start: object
    end: object
    status: str

    @property
    def is_live(self):
        return self.status in Booking.LIVE_STATUSES


@dataclass(frozen=True)
class AvailableCourt:
    id: int
    name: str
    slug: str
    type: str
    surface: str
    indoor: bool
    default_price_cents: int
    price_cents: int


@dataclass(frozen=True)
class SlotQuery:
    date: object
    start: str
    duration_minutes: int


# ---------------------------------
# QUERY VALIDATION
# ---------------------------------

def _param(params, name):
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_slot_query(params):
    """
    Validate ?date=YYYY-MM-DD&start=HH:MM&duration=<minutes>.
    `from` is accepted for start and `to` (HH:MM) instead of duration.
    """
    date_param = _param(params, "date")
    start_param = _param(params, "start") or _param(params, "from")
    to_param = _param(params, "to")
    duration_param = _param(params, "duration")

    if not date_param:
        raise InputValidationError(
            "Missing required parameter: date",
            code="missing_date",
        )

    if not start_param:
        raise InputValidationError(
            "Missing required parameter: start (or from)",
            code="missing_start",
        )

    try:
        day = parse_date(date_param)
    except ValueError:
        raise InputValidationError(
            "Invalid date format. Use YYYY-MM-DD",
            code="invalid_date",
        )

    if not is_valid_time_format(start_param):
        raise InputValidationError(
            "Invalid start time format. Use HH:MM",
            code="invalid_start_time",
        )

    start = normalize_time(start_param)

    if to_param:
        if not is_valid_end_time(to_param):
            raise InputValidationError(
                "Invalid end time format. Use HH:MM",
                code="invalid_end_time",
            )
        duration = time_to_minutes(to_param) - time_to_minutes(start)
        if duration <= 0:
            raise InputValidationError(
                "End time must be after start time",
                code="invalid_range",
            )
        return SlotQuery(day, start, duration)

    if duration_param is None:
        return SlotQuery(day, start, DEFAULT_DURATION_MINUTES)

    try:
        duration = int(duration_param)
    except ValueError:
        duration = 0

    if duration <= 0:
        raise InputValidationError(
            "Invalid duration. Must be a positive integer",
            code="invalid_duration",
        )

    return SlotQuery(day, start, duration)


# ---------------------------------
# BUSINESS HOURS
# ---------------------------------

def hours_range(open_time, close_time):
    """
    Business hours as a TimeRange. A close time at or before the open
    time means the club closes at midnight.
    """
    open_minutes = time_to_minutes(open_time)
    close_minutes = time_to_minutes(close_time)

    if close_minutes <= open_minutes:
        close_minutes = MINUTES_PER_DAY

    return TimeRange.from_minutes(open_minutes, close_minutes)


def default_business_hours():
    return hours_range(
        settings.CLUB_DEFAULT_OPEN_TIME,
        settings.CLUB_DEFAULT_CLOSE_TIME,
    )


def _configured_hours(open_time, close_time):
    if open_time is None or close_time is None:
        return None
    return hours_range(open_time.strftime("%H:%M"), close_time.strftime("%H:%M"))


def resolve_business_hours(club, day):
    """
    Effective hours of `club` on `day`, or None when closed.
    Special date > weekly hours > club hours > configured default.
    """
    overrides = (
        ClubSpecialHours.objects.filter(club=club, date=day).first(),
        ClubBusinessHours.objects.filter(club=club, day_of_week=weekday_index(day)).first(),
    )

    for override in overrides:
        if override is None:
            continue
        if override.is_closed:
            return None
        hours = _configured_hours(override.open_time, override.close_time)
        if hours:
            return hours

    return _configured_hours(club.opening_time, club.closing_time) or default_business_hours()


# ---------------------------------
# AVAILABILITY
# ---------------------------------

def _price_or_default(price_for, court, day, start, duration_minutes):
    try:
        return price_for(court, day, start, duration_minutes)
    except Exception:
        logger.warning(
            "Price resolution failed for court %s on %s %s; using default price",
            court.id, day, start,
            exc_info=True,
        )
        return prorate(court.default_price_cents, duration_minutes)


def compute_available_courts(courts, bookings, day, start, duration_minutes, business_hours, price_for):
    """
    Courts free for [start, start + duration) on `day`, in input order,
    each priced with `price_for`. Bookings that are not live never block.
    """
    window = slot_window(start, duration_minutes)

    if business_hours is None or not business_hours.contains(window):
        return []

    slot_start = to_utc_datetime(day, window.start_minutes)
    slot_end = to_utc_datetime(day, window.end_minutes)

    blocked = {
        booking.court_id
        for booking in bookings
        if booking.is_live and intervals_overlap(booking.start, booking.end, slot_start, slot_end)
    }

    available = []
    for court in courts:
        if court.id in blocked:
            continue

        available.append(AvailableCourt(
            id=court.id,
            name=court.name,
            slug=court.slug,
            type=court.type,
            surface=court.surface,
            indoor=court.indoor,
            default_price_cents=court.default_price_cents,
            price_cents=_price_or_default(price_for, court, day, start, duration_minutes),
        ))

    return available


def load_courts(club):
    rows = Court.objects.filter(club=club, is_active=True).values(
        "id", "name", "slug", "type", "surface", "indoor", "default_price_cents", "sport_type"
    )
    return [CourtSnapshot(**row) for row in rows]


def load_bookings(court_ids, day, days=1):
    day_start = to_utc_datetime(day, 0)
    day_end = day_start + timedelta(days=days)

    rows = Booking.objects.filter(
        court_id__in=court_ids,
        start__lt=day_end,
        end__gt=day_start,
        status__in=Booking.LIVE_STATUSES,
    ).values("court_id", "start", "end", "status")

    return [BookingSnapshot(**row) for row in rows]


def get_club_or_404(club_id):
    club = Club.objects.filter(pk=club_id).first()
    if club is None:
        raise NotFoundError("Club not found")
    return club


def find_available_courts(club_id, day, start, duration_minutes, price_for=None):
    club = get_club_or_404(club_id)

    business_hours = resolve_business_hours(club, day)
    if business_hours is None or not business_hours.contains(slot_window(start, duration_minutes)):
        return []

    courts = load_courts(club)
    bookings = load_bookings([court.id for court in courts], day)

    return compute_available_courts(
        courts,
        bookings,
        day,
        start,
        duration_minutes,
        business_hours,
        price_for or price_for_court,
    )


# ---------------------------------
# WEEKLY AVAILABILITY GRID
# ---------------------------------

@dataclass(frozen=True)
class GridQuery:
    start: object
    days: int
    mode: str


@dataclass(frozen=True)
class CourtSlotState:
    court: CourtSnapshot
    status: str


@dataclass(frozen=True)
class HourAvailability:
    start: str
    end: str
    courts: list

    @property
    def hour(self):
        return time_to_minutes(self.start) // 60

    @property
    def summary(self):
        counts = dict.fromkeys(SlotState.ALL, 0)
        for state in self.courts:
            counts[state.status] += 1
        counts["total"] = len(self.courts)
        return counts

    @property
    def overall_status(self):
        summary = self.summary
        for status in (SlotState.AVAILABLE, SlotState.BOOKED, SlotState.PENDING):
            if summary[status] == summary["total"]:
                return status
        return SlotState.PARTIAL


@dataclass(frozen=True)
class DayAvailability:
    date: object
    hours: list
    is_today: bool

    @property
    def day_of_week(self):
        return weekday_index(self.date)

    @property
    def day_name(self):
        return self.date.strftime("%A")


@dataclass(frozen=True)
class AvailabilityGrid:
    start: object
    end: object
    mode: str
    courts: list
    days: list


def parse_grid_query(params, today):
    """
    Validate ?start=YYYY-MM-DD&days=<1-31>&mode=rolling|calendar.
    `weekStart` is accepted for start. Without a start, rolling mode
    begins today and calendar mode on this week's Monday.
    """
    start_param = _param(params, "start") or _param(params, "weekStart")
    days_param = _param(params, "days")
    mode = _param(params, "mode") or GridMode.ROLLING

    if mode not in GridMode.ALL:
        raise InputValidationError(
            f"Invalid mode. Must be one of: {', '.join(GridMode.ALL)}",
            code="invalid_mode",
        )

    if start_param:
        try:
            start = parse_date(start_param)
        except ValueError:
            raise InputValidationError(
                "Invalid start format. Use YYYY-MM-DD",
                code="invalid_start_date",
            )
    elif mode == GridMode.CALENDAR:
        start = today - timedelta(days=today.weekday())
    else:
        start = today

    if days_param is None:
        return GridQuery(start, DEFAULT_GRID_DAYS, mode)

    try:
        days = int(days_param)
    except ValueError:
        days = 0

    if not 1 <= days <= MAX_GRID_DAYS:
        raise InputValidationError(
            f"Invalid days. Must be between 1 and {MAX_GRID_DAYS}",
            code="invalid_days",
        )

    return GridQuery(start, days, mode)


def hour_slots(business_hours):
    """
    Whole-hour windows inside business hours, starting at opening time.
    """
    if business_hours is None:
        return []

    slots = []
    current = business_hours.start_minutes
    while current + GRID_SLOT_MINUTES <= business_hours.end_minutes:
        slots.append(TimeRange.from_minutes(current, current + GRID_SLOT_MINUTES))
        current += GRID_SLOT_MINUTES

    return slots


def court_slot_status(bookings, slot_start, slot_end):
    """
    Status of one court for [slot_start, slot_end), given its bookings.
    Pending holds win; otherwise a single booking covering the whole
    slot means booked and any other overlap means partial.
    """
    overlapping = [
        booking for booking in bookings
        if booking.is_live and intervals_overlap(booking.start, booking.end, slot_start, slot_end)
    ]

    if not overlapping:
        return SlotState.AVAILABLE

    if any(booking.status == Booking.PENDING for booking in overlapping):
        return SlotState.PENDING

    if any(booking.start <= slot_start and slot_end <= booking.end for booking in overlapping):
        return SlotState.BOOKED

    return SlotState.PARTIAL


def build_availability_grid(courts, bookings, days, hours_by_day, today):
    """
    Per-day, per-hour status of every court. `hours_by_day` maps each
    day to its business hours (None when closed).
    """
    bookings_by_court = defaultdict(list)
    for booking in bookings:
        bookings_by_court[booking.court_id].append(booking)

    grid = []
    for day in days:
        hours = []
        for slot in hour_slots(hours_by_day.get(day)):
            slot_start = to_utc_datetime(day, slot.start_minutes)
            slot_end = to_utc_datetime(day, slot.end_minutes)

            hours.append(HourAvailability(
                start=slot.start,
                end=slot.end,
                courts=[
                    CourtSlotState(
                        court,
                        court_slot_status(bookings_by_court[court.id], slot_start, slot_end),
                    )
                    for court in courts
                ],
            ))

        grid.append(DayAvailability(date=day, hours=hours, is_today=day == today))

    return grid


def get_availability_grid(club_id, query, today):
    club = get_club_or_404(club_id)

    days = [query.start + timedelta(days=offset) for offset in range(query.days)]
    courts = load_courts(club)
    bookings = load_bookings([court.id for court in courts], days[0], len(days))
    hours_by_day = {day: resolve_business_hours(club, day) for day in days}

    return AvailabilityGrid(
        start=days[0],
        end=days[-1],
        mode=query.mode,
        courts=courts,
        days=build_availability_grid(courts, bookings, days, hours_by_day, today),
    )
