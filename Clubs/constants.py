# clubs/constants.py
class SlotState:
    """Status of one court in one hour of the availability grid."""

    AVAILABLE = "available"
    BOOKED = "booked"
    PARTIAL = "partial"
    PENDING = "pending"

    ALL = (AVAILABLE, BOOKED, PARTIAL, PENDING)


class GridMode:
    # rolling starts today, calendar starts on this week's Monday
    ROLLING = "rolling"
    CALENDAR = "calendar"

    ALL = (ROLLING, CALENDAR)


DEFAULT_GRID_DAYS = 7
MAX_GRID_DAYS = 31
GRID_SLOT_MINUTES = 60
