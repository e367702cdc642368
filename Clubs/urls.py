from django.urls import path

from .views import AvailableCourtsView, CourtAvailabilityGridView

urlpatterns = [
    path(
        "clubs/<int:club_id>/available-courts/",
        AvailableCourtsView.as_view(),
        name="club-available-courts"
    ),
    path(
        "clubs/<int:club_id>/courts/availability/",
        CourtAvailabilityGridView.as_view(),
        name="club-court-availability"
    ),
]
