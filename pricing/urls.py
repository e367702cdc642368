from django.urls import path
from .views import (
    CourtPriceView,
    HolidayListCreateView,
    PriceBreakdownView,
    PriceRuleDetailView,
    PriceRuleListCreateView,
    PriceTimelineView,
)

urlpatterns = [
    path("courts/<int:court_id>/price-rules/", PriceRuleListCreateView.as_view(), name="price-rule-list"),
    path("courts/<int:court_id>/price-rules/<int:rule_id>/", PriceRuleDetailView.as_view(), name="price-rule-detail"),
    path("courts/<int:court_id>/price/", CourtPriceView.as_view(), name="court-price"),
    path("courts/<int:court_id>/price-breakdown/", PriceBreakdownView.as_view(), name="court-price-breakdown"),
    path("courts/<int:court_id>/price-timeline/", PriceTimelineView.as_view(), name="court-price-timeline"),
    path("holidays/", HolidayListCreateView.as_view(), name="holiday-list"),
]
