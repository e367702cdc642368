# pricing/models.py
from django.db import models

from Clubs.models import Court
from .constants import RuleType


class HolidayDate(models.Model):
    name = models.CharField(max_length=100)
    date = models.DateField()

    class Meta:
        ordering = ["date"]

    def __str__(self):
        return f"{self.name} ({self.date})"


class PriceRule(models.Model):
    """
    Hourly price for a window of the day on the days selected by rule_type.

    Exactly one of day_of_week / date / holiday is set, depending on
    rule_type (none for WEEKDAYS, WEEKENDS and ALL_DAYS).
    """

    court = models.ForeignKey(
        Court,
        on_delete=models.CASCADE,
        related_name="price_rules"
    )

    rule_type = models.CharField(
        max_length=20,
        choices=RuleType.CHOICES
    )

    # Sunday=0 ... Saturday=6 (SPECIFIC_DAY only)
    day_of_week = models.PositiveSmallIntegerField(null=True, blank=True)

    # SPECIFIC_DATE only
    date = models.DateField(null=True, blank=True)

    # HOLIDAY only. No database constraint: deleting the holiday
    # leaves the rule pointing at a missing row (orphan).
    holiday = models.ForeignKey(
        HolidayDate,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        blank=True,
        related_name="price_rules"
    )

    # Normalized HH:MM, half-open window
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)

    price_cents = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "day_of_week", "start_time"]
        indexes = [
            models.Index(fields=["court", "rule_type"]),
        ]

    def __str__(self):
        return f"{self.court} | {self.rule_type} | {self.start_time}-{self.end_time}"
