from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Practice(models.Model):
    """Self-paced practice package sold outside of bookings."""

    title = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title", "id"]

    def __str__(self):
        return self.title


class PracticePurchase(models.Model):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    STATUSES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (CANCELLED, "Cancelled"),
    ]

    id = models.CharField(primary_key=True, max_length=40, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="practice_purchases")
    practice = models.ForeignKey("Practice", on_delete=models.PROTECT, related_name="purchases")
    referral_usage = models.OneToOneField(
        "referrals.ReferralUsage",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="practice_purchase",
    )
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    purchase_date = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-purchase_date"]

    def __str__(self):
        return f"{self.id} ({self.status})"
