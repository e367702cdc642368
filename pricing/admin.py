from django import forms
from django.contrib import admin
from rest_framework.exceptions import APIException

from .constants import DELETED_HOLIDAY_LABEL
from .models import HolidayDate, PriceRule
from .services import build_candidate, ensure_no_conflict, save_price_rule


@admin.register(HolidayDate)
class HolidayDateAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "date")
    search_fields = ("name",)
    ordering = ("date",)


# ---------------------------------
# SAME RULES AS THE API
# ---------------------------------
# Validation and conflicts are reported as form errors
class PriceRuleAdminForm(forms.ModelForm):
    class Meta:
        model = PriceRule
        fields = "__all__"

    def clean(self):
        cleaned_data = super().clean()

        court = cleaned_data.get("court")
        if court is None or self.errors:
            return cleaned_data

        holiday = cleaned_data.get("holiday")
        instance = self.instance if self.instance.pk else None

        try:
            candidate = build_candidate(
                {
                    "rule_type": cleaned_data.get("rule_type"),
                    "day_of_week": cleaned_data.get("day_of_week"),
                    "date": cleaned_data.get("date"),
                    "holiday_id": holiday.pk if holiday else None,
                    "start_time": cleaned_data.get("start_time"),
                    "end_time": cleaned_data.get("end_time"),
                    "price_cents": cleaned_data.get("price_cents"),
                },
                instance=instance,
            )
            ensure_no_conflict(
                court.pk,
                candidate,
                exclude_rule_id=instance.pk if instance else None,
            )
        except APIException as exc:
            self.add_error(None, str(exc.detail))

        return cleaned_data


@admin.register(PriceRule)
class PriceRuleAdmin(admin.ModelAdmin):
    form = PriceRuleAdminForm

    list_display = (
        "id",
        "court",
        "rule_type",
        "selector",
        "start_time",
        "end_time",
        "price_cents",
    )

    list_filter = (
        "rule_type",
        "court__club",
    )

    search_fields = (
        "court__name",
    )

    readonly_fields = (
        "created_at",
        "updated_at",
    )

    @admin.display(description="Applies to")
    def selector(self, obj):
        if obj.day_of_week is not None:
            return f"day {obj.day_of_week}"
        if obj.date:
            return obj.date.isoformat()
        if obj.holiday_id is not None:
            holiday = HolidayDate.objects.filter(pk=obj.holiday_id).first()
            return holiday.name if holiday else DELETED_HOLIDAY_LABEL
        return "-"

    def save_model(self, request, obj, form, change):
        instance = PriceRule.objects.get(pk=obj.pk) if change else None
        fields = {
            "rule_type": obj.rule_type,
            "day_of_week": obj.day_of_week,
            "date": obj.date,
            "holiday_id": obj.holiday_id,
            "start_time": obj.start_time,
            "end_time": obj.end_time,
            "price_cents": obj.price_cents,
        }
        rule = save_price_rule(obj.court, fields, instance=instance)
        obj.pk = rule.pk
