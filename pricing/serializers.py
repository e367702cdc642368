# pricing/serializers.py
from rest_framework import serializers

from .constants import DELETED_HOLIDAY_LABEL, RuleType
from .models import HolidayDate, PriceRule
from .services import save_price_rule


class HolidayDateSerializer(serializers.ModelSerializer):
    class Meta:
        model = HolidayDate
        fields = ["id", "name", "date"]


# =========================================================
# PRICE RULE SERIALIZER
# Validation of type-specific fields and conflict checks
# run in pricing.services.save_price_rule
# =========================================================
class PriceRuleSerializer(serializers.ModelSerializer):
    courtId = serializers.IntegerField(source="court_id", read_only=True)
    ruleType = serializers.ChoiceField(source="rule_type", choices=RuleType.CHOICES)
    dayOfWeek = serializers.IntegerField(
        source="day_of_week", required=False, allow_null=True
    )
    date = serializers.DateField(required=False, allow_null=True)
    holidayId = serializers.IntegerField(
        source="holiday_id", required=False, allow_null=True
    )
    startTime = serializers.CharField(source="start_time")
    endTime = serializers.CharField(source="end_time")
    priceCents = serializers.IntegerField(source="price_cents", min_value=0)

    holidayName = serializers.SerializerMethodField()
    holidayDate = serializers.SerializerMethodField()
    holidayDeleted = serializers.SerializerMethodField()

    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PriceRule
        fields = [
            "id",
            "courtId",
            "ruleType",
            "dayOfWeek",
            "date",
            "holidayId",
            "holidayName",
            "holidayDate",
            "holidayDeleted",
            "startTime",
            "endTime",
            "priceCents",
            "createdAt",
            "updatedAt",
        ]

    # -----------------------------------------------------
    # HOLIDAY DISPLAY
    # Holidays are passed in context as {id: HolidayDate}
    # -----------------------------------------------------
    def _holiday(self, obj):
        if obj.holiday_id is None:
            return None
        holidays = self.context.get("holidays")
        if holidays is None:
            return HolidayDate.objects.filter(pk=obj.holiday_id).first()
        return holidays.get(obj.holiday_id)

    def get_holidayName(self, obj):
        if obj.holiday_id is None:
            return None
        holiday = self._holiday(obj)
        return holiday.name if holiday else DELETED_HOLIDAY_LABEL

    def get_holidayDate(self, obj):
        holiday = self._holiday(obj)
        return holiday.date.isoformat() if holiday else None

    def get_holidayDeleted(self, obj):
        return obj.holiday_id is not None and self._holiday(obj) is None

    # -----------------------------------------------------
    # WRITES
    # -----------------------------------------------------
    def _effective_fields(self, validated_data, instance=None):
        names = (
            "rule_type", "day_of_week", "date", "holiday_id",
            "start_time", "end_time", "price_cents",
        )

        fields = {}
        for name in names:
            if name in validated_data:
                fields[name] = validated_data[name]
            elif instance is not None:
                fields[name] = getattr(instance, name)
            else:
                fields[name] = None

        # Changing the type drops the selector fields it no longer uses
        if instance is not None and fields["rule_type"] != instance.rule_type:
            for name in ("day_of_week", "date", "holiday_id"):
                if name not in validated_data:
                    fields[name] = None

        return fields

    def create(self, validated_data):
        court = self.context["court"]
        return save_price_rule(court, self._effective_fields(validated_data))

    def update(self, instance, validated_data):
        return save_price_rule(
            instance.court,
            self._effective_fields(validated_data, instance),
            instance=instance,
        )
