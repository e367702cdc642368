from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AvailabilityGridSerializer, AvailableCourtSerializer
from .service import (
    find_available_courts,
    get_availability_grid,
    parse_grid_query,
    parse_slot_query,
)


# -------------------------------------------------------------------
# AVAILABLE COURTS (DATE + SLOT CHECK WITH PRICES)
# -------------------------------------------------------------------
class AvailableCourtsView(APIView):
    """
    Public API
    Courts of a club free for ?date=&start=&duration=, with resolved prices
    """
    permission_classes = [AllowAny]

    def get(self, request, club_id):
        query = parse_slot_query(request.query_params)

        courts = find_available_courts(
            club_id,
            query.date,
            query.start,
            query.duration_minutes,
        )

        return Response({
            "availableCourts": AvailableCourtSerializer(courts, many=True).data,
        }, status=status.HTTP_200_OK)


# -------------------------------------------------------------------
# WEEKLY AVAILABILITY GRID (DAYS x HOURS x COURTS)
# -------------------------------------------------------------------
class CourtAvailabilityGridView(APIView):
    """
    Public API
    Hour-by-hour court status for ?start=&days=&mode= (UTC dates)
    """
    permission_classes = [AllowAny]

    def get(self, request, club_id):
        today = timezone.now().date()
        query = parse_grid_query(request.query_params, today)

        grid = get_availability_grid(club_id, query, today)

        return Response(
            AvailabilityGridSerializer(grid).data,
            status=status.HTTP_200_OK,
        )
