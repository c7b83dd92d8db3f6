from django.contrib import admin

from .models import Booking, BookingParticipant


class BookingParticipantInline(admin.TabularInline):
    model = BookingParticipant
    extra = 0


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "mentee", "mentoring_service", "booking_date", "status", "created_at")
    list_filter = ("status", "mentoring_service__service_type")
    search_fields = ("id", "mentee__email", "mentoring_service__service_name")
    readonly_fields = ("id", "referral_usage")
    inlines = [BookingParticipantInline]
