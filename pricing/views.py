from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from Clubs.exceptions import InputValidationError, NotFoundError
from Clubs.service import parse_slot_query
from Clubs.utils import parse_date

from .models import HolidayDate, PriceRule
from .serializers import HolidayDateSerializer, PriceRuleSerializer
from .services import (
    get_court_or_404,
    get_price_breakdown_for_slot,
    get_price_timeline_for_day,
    get_resolved_price_for_slot,
)


def _holidays_for(rules):
    ids = {rule.holiday_id for rule in rules if rule.holiday_id is not None}
    return HolidayDate.objects.in_bulk(ids)


def _get_rule_for_court(court_id, rule_id):
    rule = PriceRule.objects.select_related("court").filter(pk=rule_id).first()

    if not rule:
        raise NotFoundError("Price rule not found")

    if rule.court_id != court_id:
        raise NotFoundError("Price rule does not belong to this court")

    return rule


# -------------------------------------------------------------------
# PRICE RULES (LIST + CREATE)
# -------------------------------------------------------------------
class PriceRuleListCreateView(APIView):
    """
    Public read, authenticated write
    Price rules of a court
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, court_id):
        court = get_court_or_404(court_id)
        rules = list(PriceRule.objects.filter(court=court))

        serializer = PriceRuleSerializer(
            rules, many=True, context={"holidays": _holidays_for(rules)}
        )
        return Response({"rules": serializer.data}, status=status.HTTP_200_OK)

    def post(self, request, court_id):
        court = get_court_or_404(court_id)

        serializer = PriceRuleSerializer(
            data=request.data, context={"court": court}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response(serializer.data, status=status.HTTP_201_CREATED)


# -------------------------------------------------------------------
# PRICE RULE (UPDATE + DELETE)
# -------------------------------------------------------------------
class PriceRuleDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def _update(self, request, court_id, rule_id, partial):
        rule = _get_rule_for_court(court_id, rule_id)

        serializer = PriceRuleSerializer(rule, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response(serializer.data, status=status.HTTP_200_OK)

    def put(self, request, court_id, rule_id):
        return self._update(request, court_id, rule_id, partial=False)

    def patch(self, request, court_id, rule_id):
        return self._update(request, court_id, rule_id, partial=True)

    def delete(self, request, court_id, rule_id):
        rule = _get_rule_for_court(court_id, rule_id)
        rule.delete()

        return Response(status=status.HTTP_204_NO_CONTENT)


# -------------------------------------------------------------------
# RESOLVED PRICE FOR ONE SLOT
# -------------------------------------------------------------------
class CourtPriceView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, court_id):
        query = parse_slot_query(request.query_params)

        price_cents = get_resolved_price_for_slot(
            court_id, query.date, query.start, query.duration_minutes
        )

        return Response({
            "courtId": court_id,
            "date": query.date.isoformat(),
            "start": query.start,
            "duration": query.duration_minutes,
            "priceCents": price_cents,
        })


# -------------------------------------------------------------------
# PRICE BREAKDOWN FOR ONE SLOT
# -------------------------------------------------------------------
class PriceBreakdownView(APIView):
    """
    Public API
    How a slot's price splits across the day's price segments
    """
    permission_classes = [AllowAny]

    def get(self, request, court_id):
        query = parse_slot_query(request.query_params)

        breakdown = get_price_breakdown_for_slot(
            court_id, query.date, query.start, query.duration_minutes
        )

        return Response({
            "courtId": court_id,
            "date": query.date.isoformat(),
            "start": query.start,
            "duration": query.duration_minutes,
            "totalPriceCents": breakdown.total_price_cents,
            "breakdown": [
                {
                    "start": segment.start,
                    "end": segment.end,
                    "minutes": segment.minutes,
                    "priceCents": segment.price_cents,
                }
                for segment in breakdown.segments
            ],
        })


# -------------------------------------------------------------------
# PRICE TIMELINE FOR A DAY
# -------------------------------------------------------------------
class PriceTimelineView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, court_id):
        date_str = request.query_params.get("date")

        if not date_str:
            raise InputValidationError(
                "Missing required parameter: date", code="missing_date"
            )

        try:
            day = parse_date(date_str)
        except ValueError:
            raise InputValidationError(
                "Invalid date format. Use YYYY-MM-DD", code="invalid_date"
            )

        segments = get_price_timeline_for_day(court_id, day)

        return Response({
            "courtId": court_id,
            "date": day.isoformat(),
            "segments": [
                {
                    "start": segment.start,
                    "end": segment.end,
                    "priceCents": segment.price_cents,
                }
                for segment in segments
            ],
        })


# -------------------------------------------------------------------
# HOLIDAYS
# -------------------------------------------------------------------
class HolidayListCreateView(generics.ListCreateAPIView):
    queryset = HolidayDate.objects.all()
    serializer_class = HolidayDateSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
