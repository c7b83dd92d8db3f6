from django.contrib import admin

from .models import Practice, PracticePurchase


@admin.register(Practice)
class PracticeAdmin(admin.ModelAdmin):
    list_display = ("title", "price", "is_active")
    list_filter = ("is_active",)
    search_fields = ("title",)


@admin.register(PracticePurchase)
class PracticePurchaseAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "practice", "status", "purchase_date")
    list_filter = ("status",)
    search_fields = ("id", "user__email", "practice__title")
