# clubs/admin.py

from django.contrib import admin
from .models import (
    Club,
    ClubBusinessHours,
    ClubSpecialHours,
    Court,
    Booking,
)

# -------------------------------
# CLUB HOURS INLINES
# -------------------------------
# Weekly hours and date overrides edited inside the club screen
class ClubBusinessHoursInline(admin.TabularInline):
    model = ClubBusinessHours
    extra = 0


class ClubSpecialHoursInline(admin.TabularInline):
    model = ClubSpecialHours
    extra = 0


# -------------------------------
# CLUB ADMIN
# -------------------------------
@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "opening_time",
        "closing_time",
        "is_active",
    )

    search_fields = ("name", "address")
    prepopulated_fields = {"slug": ("name",)}

    inlines = [ClubBusinessHoursInline, ClubSpecialHoursInline]


# -------------------------------
# COURT ADMIN
# -------------------------------
@admin.register(Court)
class CourtAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "club",
        "name",
        "default_price_cents",   # Hourly rate in cents
        "is_published",
        "is_active",
    )

    list_filter = ("club", "is_published", "is_active", "sport_type")
    search_fields = ("name", "club__name")

    # Courts are deactivated, not deleted
    def has_delete_permission(self, request, obj=None):
        if obj and obj.bookings.exists():
            return False
        return super().has_delete_permission(request, obj)


# -------------------------------
# BOOKING ADMIN
# -------------------------------
@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "court",
        "start",
        "end",
        "status",
        "created_at",
    )

    list_filter = ("status", "court__club")
    search_fields = ("court__name", "court__club__name")
    date_hierarchy = "start"

    readonly_fields = ("created_at",)

    # The interval of an existing booking never changes
    def get_readonly_fields(self, request, obj=None):
        if obj:
            return ("start", "end", "created_at")
        return self.readonly_fields
