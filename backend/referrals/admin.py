from django.contrib import admin

from .models import CommissionPayment, ReferralCode, ReferralCommission, ReferralUsage


@admin.register(ReferralCode)
class ReferralCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "owner", "discount_percentage", "commission_percentage", "expiry_date", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "owner__email")
    readonly_fields = ("id",)


@admin.register(ReferralUsage)
class ReferralUsageAdmin(admin.ModelAdmin):
    list_display = ("referral_code", "user", "context", "used_at")
    list_filter = ("context",)
    search_fields = ("referral_code__code", "user__email")


@admin.register(ReferralCommission)
class ReferralCommissionAdmin(admin.ModelAdmin):
    list_display = ("referral_code", "payment", "amount", "created_at")
    search_fields = ("referral_code__code", "payment__id")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CommissionPayment)
class CommissionPaymentAdmin(admin.ModelAdmin):
    list_display = ("referral_code", "amount", "status", "paid_at", "created_at")
    list_filter = ("status",)
    search_fields = ("referral_code__code", "transaction_id")
