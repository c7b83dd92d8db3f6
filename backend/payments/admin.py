from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "booking", "practice_purchase", "amount", "status", "payment_method", "payment_date")
    list_filter = ("status", "payment_method")
    search_fields = ("id", "transaction_id", "booking__id", "practice_purchase__id")
    readonly_fields = ("id", "booking", "practice_purchase", "amount")
