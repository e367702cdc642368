from django.core.exceptions import ValidationError
from django.db import models


# =========================
# CLUB (BUSINESS ASSET)
# =========================

class Club(models.Model):
    """
    A sports facility that owns courts.
    Business hours fall back to the configured default when unset.
    """

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    address = models.CharField(max_length=255, blank=True)

    # Club-wide operating hours (override the configured default)
    opening_time = models.TimeField(null=True, blank=True)
    closing_time = models.TimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class ClubBusinessHours(models.Model):
    """
    Weekly operating hours. day_of_week uses Sunday=0.
    """

    club = models.ForeignKey(
        Club,
        on_delete=models.CASCADE,
        related_name="business_hours"
    )

    day_of_week = models.PositiveSmallIntegerField()
    open_time = models.TimeField(null=True, blank=True)
    close_time = models.TimeField(null=True, blank=True)
    is_closed = models.BooleanField(default=False)

    class Meta:
        unique_together = ("club", "day_of_week")
        ordering = ["day_of_week"]

    def clean(self):
        if self.day_of_week > 6:
            raise ValidationError("day_of_week must be between 0 and 6")

        if not self.is_closed and (not self.open_time or not self.close_time):
            raise ValidationError("Open days require open and close time")

    def __str__(self):
        return f"{self.club} | day {self.day_of_week}"


class ClubSpecialHours(models.Model):
    """
    Date-specific override of the weekly hours (holidays, events).
    """

    club = models.ForeignKey(
        Club,
        on_delete=models.CASCADE,
        related_name="special_hours"
    )

    date = models.DateField()
    open_time = models.TimeField(null=True, blank=True)
    close_time = models.TimeField(null=True, blank=True)
    is_closed = models.BooleanField(default=False)
    reason = models.CharField(max_length=255, blank=True)

    class Meta:
        unique_together = ("club", "date")
        ordering = ["date"]

    def clean(self):
        if not self.is_closed and (not self.open_time or not self.close_time):
            raise ValidationError("Open days require open and close time")

    def __str__(self):
        return f"{self.club} | {self.date}"


# =========================
# COURT
# =========================

class Court(models.Model):
    """
    Bookable unit of a club.
    Courts are deactivated, never deleted, while bookings reference them.
    """

    club = models.ForeignKey(
        Club,
        on_delete=models.PROTECT,
        related_name="courts"
    )

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, blank=True, null=True)
    type = models.CharField(max_length=50, blank=True, null=True)
    surface = models.CharField(max_length=50, blank=True, null=True)
    indoor = models.BooleanField(default=False)
    sport_type = models.CharField(max_length=50, default="PADEL")

    # Hourly rate in minor currency units (fallback when no price rule matches)
    default_price_cents = models.PositiveIntegerField()

    is_published = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self):
        return f"{self.club} | {self.name}"


# =========================
# BOOKING MODEL
# =========================

class Booking(models.Model):
    """
    A court reservation over the half-open interval [start, end).
    Read-only from the point of view of availability.
    """

    # Booking lifecycle states
    PENDING = "pending"
    PAID = "paid"
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    COMPLETED = "completed"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (PAID, "Paid"),
        (RESERVED, "Reserved"),
        (CONFIRMED, "Confirmed"),
        (CANCELLED, "Cancelled"),
        (NO_SHOW, "No-show"),
        (COMPLETED, "Completed"),
    ]

    # Statuses that still occupy the court
    LIVE_STATUSES = (PENDING, PAID, RESERVED, CONFIRMED, COMPLETED)

    court = models.ForeignKey(
        Court,
        on_delete=models.PROTECT,
        related_name="bookings"
    )

    start = models.DateTimeField()
    end = models.DateTimeField()

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["court", "start"]),
        ]

    def clean(self):
        if self.start >= self.end:
            raise ValidationError("start must be before end")

    def __str__(self):
        return f"{self.court} | {self.start:%Y-%m-%d %H:%M} | {self.status}"
