"""Integration tests for the available-courts endpoint."""

from __future__ import annotations

from datetime import date, datetime, timezone

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from Clubs.models import Booking, Club, ClubSpecialHours, Court
from pricing.constants import RuleType
from pricing.models import PriceRule


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 15, hour, minute, tzinfo=timezone.utc)


class AvailableCourtsAPITests(APITestCase):
    """Covers availability, business hours, prices and query errors."""

    def setUp(self) -> None:
        self.club = Club.objects.create(name="Padel Arena", slug="padel-arena")
        self.court = Court.objects.create(
            club=self.club,
            name="Court 1",
            slug="court-1",
            type="padel",
            surface="artificial_grass",
            indoor=True,
            default_price_cents=3000,
        )
        self.url = reverse("club-available-courts", args=[self.club.id])

    def _get(self, **params):
        return self.client.get(self.url, params)

    def test_free_court_in_last_hour(self) -> None:
        response = self._get(date="2024-01-15", start="21:00", duration=60)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["availableCourts"],
            [{
                "id": self.court.id,
                "name": "Court 1",
                "slug": "court-1",
                "type": "padel",
                "surface": "artificial_grass",
                "indoor": True,
                "defaultPriceCents": 3000,
                "priceCents": 3000,
            }],
        )

    def test_slot_past_closing_returns_empty_list(self) -> None:
        response = self._get(date="2024-01-15", start="22:00", duration=60)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["availableCourts"], [])

    def test_overlapping_booking_excludes_court(self) -> None:
        Booking.objects.create(
            court=self.court, start=_at(10, 30), end=_at(11, 30), status=Booking.RESERVED
        )

        response = self._get(date="2024-01-15", start="10:00", duration=60)

        self.assertEqual(response.data["availableCourts"], [])

    def test_touching_booking_keeps_court(self) -> None:
        Booking.objects.create(
            court=self.court, start=_at(8), end=_at(10), status=Booking.PAID
        )

        response = self._get(date="2024-01-15", start="10:00", duration=60)

        self.assertEqual(len(response.data["availableCourts"]), 1)

    def test_cancelled_booking_does_not_block(self) -> None:
        Booking.objects.create(
            court=self.court, start=_at(10), end=_at(11), status=Booking.CANCELLED
        )

        response = self._get(date="2024-01-15", start="10:00", duration=60)

        self.assertEqual(len(response.data["availableCourts"]), 1)

    def test_price_rule_applies_to_contained_slot(self) -> None:
        PriceRule.objects.create(
            court=self.court,
            rule_type=RuleType.SPECIFIC_DATE,
            date=date(2024, 1, 15),
            start_time="18:00",
            end_time="19:00",
            price_cents=2500,
        )

        inside = self._get(date="2024-01-15", start="18:00", duration=60)
        partial = self._get(date="2024-01-15", start="17:30", duration=60)

        self.assertEqual(inside.data["availableCourts"][0]["priceCents"], 2500)
        self.assertEqual(partial.data["availableCourts"][0]["priceCents"], 3000)

    def test_corrupt_rule_is_skipped_and_valid_rules_still_apply(self) -> None:
        # SPECIFIC_DAY row without its day_of_week
        PriceRule.objects.create(
            court=self.court,
            rule_type=RuleType.SPECIFIC_DAY,
            start_time="09:00",
            end_time="22:00",
            price_cents=100,
        )
        PriceRule.objects.create(
            court=self.court,
            rule_type=RuleType.WEEKDAYS,
            start_time="10:00",
            end_time="12:00",
            price_cents=2000,
        )

        with self.assertLogs("pricing.services", level="WARNING") as logs:
            inside = self._get(date="2024-01-15", start="10:00", duration=30)
            outside = self._get(date="2024-01-15", start="14:00", duration=30)

        self.assertEqual(inside.status_code, status.HTTP_200_OK, inside.data)
        self.assertEqual(inside.data["availableCourts"][0]["priceCents"], 1000)
        self.assertEqual(outside.data["availableCourts"][0]["priceCents"], 1500)
        self.assertIn("Skipping invalid price rule", logs.output[0])

    def test_missing_club_is_404(self) -> None:
        url = reverse("club-available-courts", args=[9999])

        response = self.client.get(url, {"date": "2024-01-15", "start": "10:00"})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["detail"], "Club not found")

    def test_validation_errors_are_distinct(self) -> None:
        cases = [
            ({"start": "10:00"}, "missing_date"),
            ({"date": "2024-01-15"}, "missing_start"),
            ({"date": "2024/01/15", "start": "10:00"}, "invalid_date"),
            ({"date": "2024-01-15", "start": "10h00"}, "invalid_start_time"),
            ({"date": "2024-01-15", "start": "10:00", "duration": "0"}, "invalid_duration"),
        ]
        messages = set()
        for params, code in cases:
            with self.subTest(code=code):
                response = self.client.get(self.url, params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data["detail"].code, code)
                messages.add(str(response.data["detail"]))

        self.assertEqual(len(messages), len(cases))


class CourtAvailabilityGridAPITests(APITestCase):
    """Hour-by-hour court statuses over several days."""

    def setUp(self) -> None:
        self.club = Club.objects.create(name="Padel Arena", slug="padel-arena")
        self.court = Court.objects.create(
            club=self.club, name="Court 1", type="padel", indoor=True, default_price_cents=3000
        )
        self.other = Court.objects.create(
            club=self.club, name="Court 2", type="padel", default_price_cents=3000
        )
        self.url = reverse("club-court-availability", args=[self.club.id])

    def _hour(self, response, day_index: int, start: str) -> dict:
        hours = response.data["days"][day_index]["hours"]
        return next(hour for hour in hours if hour["start"] == start)

    def test_grid_statuses_and_summaries(self) -> None:
        Booking.objects.create(
            court=self.court, start=_at(10), end=_at(11), status=Booking.PENDING
        )
        Booking.objects.create(
            court=self.court, start=_at(12, 30), end=_at(13), status=Booking.PAID
        )
        Booking.objects.create(
            court=self.other, start=_at(12), end=_at(14), status=Booking.CONFIRMED
        )

        response = self.client.get(self.url, {"start": "2024-01-15", "days": 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["weekStart"], "2024-01-15")
        self.assertEqual(response.data["weekEnd"], "2024-01-16")
        self.assertEqual(response.data["mode"], "rolling")
        self.assertEqual(
            [court["sportType"] for court in response.data["courts"]], ["PADEL", "PADEL"]
        )

        monday = response.data["days"][0]
        self.assertEqual(monday["dayOfWeek"], 1)
        self.assertEqual(monday["dayName"], "Monday")
        self.assertEqual(len(monday["hours"]), 13)

        pending = self._hour(response, 0, "10:00")
        self.assertEqual(pending["courts"][0]["status"], "pending")
        self.assertEqual(pending["courts"][1]["status"], "available")
        self.assertEqual(pending["overallStatus"], "partial")

        noon = self._hour(response, 0, "12:00")
        self.assertEqual([court["status"] for court in noon["courts"]], ["partial", "booked"])
        self.assertEqual(noon["summary"], {
            "available": 0, "booked": 1, "partial": 1, "pending": 0, "total": 2,
        })

        one_pm = self._hour(response, 0, "13:00")
        self.assertEqual(one_pm["courts"][0]["status"], "available")
        self.assertEqual(one_pm["courts"][1]["status"], "booked")

        tuesday_noon = self._hour(response, 1, "12:00")
        self.assertEqual(tuesday_noon["overallStatus"], "available")

    def test_closed_day_has_no_hours(self) -> None:
        ClubSpecialHours.objects.create(
            club=self.club, date=date(2024, 1, 16), is_closed=True, reason="Tournament"
        )

        response = self.client.get(self.url, {"start": "2024-01-15", "days": 2})

        self.assertEqual(response.data["days"][1]["hours"], [])

    def test_invalid_query_and_missing_club(self) -> None:
        cases = [
            ({"days": "0"}, "invalid_days"),
            ({"days": "32"}, "invalid_days"),
            ({"mode": "monthly"}, "invalid_mode"),
            ({"start": "15-01-2024"}, "invalid_start_date"),
        ]
        for params, code in cases:
            with self.subTest(code=code):
                response = self.client.get(self.url, params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data["detail"].code, code)

        missing = self.client.get(reverse("club-court-availability", args=[9999]))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
