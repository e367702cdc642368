from rest_framework import serializers


# =========================================================
# AVAILABLE COURT (READ-ONLY)
# Shapes Clubs.service.AvailableCourt for the API
# =========================================================
class AvailableCourtSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    slug = serializers.CharField(allow_null=True)
    type = serializers.CharField(allow_null=True)
    surface = serializers.CharField(allow_null=True)
    indoor = serializers.BooleanField()
    defaultPriceCents = serializers.IntegerField(source="default_price_cents")
    priceCents = serializers.IntegerField(source="price_cents")


# =========================================================
# WEEKLY AVAILABILITY GRID (READ-ONLY)
# =========================================================
class GridCourtSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    type = serializers.CharField(allow_null=True)
    indoor = serializers.BooleanField()
    sportType = serializers.CharField(source="sport_type")


class CourtSlotStateSerializer(serializers.Serializer):
    courtId = serializers.IntegerField(source="court.id")
    courtName = serializers.CharField(source="court.name")
    courtType = serializers.CharField(source="court.type", allow_null=True)
    indoor = serializers.BooleanField(source="court.indoor")
    status = serializers.CharField()


class HourAvailabilitySerializer(serializers.Serializer):
    hour = serializers.IntegerField()
    start = serializers.CharField()
    end = serializers.CharField()
    courts = CourtSlotStateSerializer(many=True)
    summary = serializers.DictField(child=serializers.IntegerField())
    overallStatus = serializers.CharField(source="overall_status")


class DayAvailabilitySerializer(serializers.Serializer):
    date = serializers.DateField()
    dayOfWeek = serializers.IntegerField(source="day_of_week")
    dayName = serializers.CharField(source="day_name")
    isToday = serializers.BooleanField(source="is_today")
    hours = HourAvailabilitySerializer(many=True)


class AvailabilityGridSerializer(serializers.Serializer):
    weekStart = serializers.DateField(source="start")
    weekEnd = serializers.DateField(source="end")
    mode = serializers.CharField()
    courts = GridCourtSerializer(many=True)
    days = DayAvailabilitySerializer(many=True)
