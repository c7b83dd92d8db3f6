from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from core.errors import IntegrityViolation

PERCENT_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]


class ReferralCode(models.Model):
    """Affiliator-owned code granting a discount and earning a commission."""

    id = models.CharField(primary_key=True, max_length=32, editable=False)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="referral_codes")
    code = models.CharField(max_length=20, unique=True)
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENT_VALIDATORS)
    commission_percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENT_VALIDATORS)
    expiry_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.code

    @property
    def is_expired(self) -> bool:
        return self.expiry_date is not None and self.expiry_date < timezone.now()


class ReferralUsage(models.Model):
    """
    A user's one-time claim of a referral code. The claim is consumed once a
    booking or practice purchase links to it.
    """

    CONTEXT_BOOKING = "booking"
    CONTEXT_PRACTICE_PURCHASE = "practice_purchase"
    CONTEXTS = [
        (CONTEXT_BOOKING, "Booking"),
        (CONTEXT_PRACTICE_PURCHASE, "Practice purchase"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="referral_usages")
    referral_code = models.ForeignKey("ReferralCode", on_delete=models.CASCADE, related_name="usages")
    context = models.CharField(max_length=20, choices=CONTEXTS)
    used_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-used_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "referral_code"], name="unique_referral_usage_per_user"),
        ]

    def __str__(self):
        return f"{self.user} used {self.referral_code}"

    @property
    def is_consumed(self) -> bool:
        return hasattr(self, "booking") or hasattr(self, "practice_purchase")


class ReferralCommission(models.Model):
    """
    Commission earned by a referral code on one payment.

    Ledger rows are append-only: they are written inside the booking or
    purchase transaction and never changed afterwards.
    """

    referral_code = models.ForeignKey("ReferralCode", on_delete=models.PROTECT, related_name="commissions")
    payment = models.ForeignKey(
        "payments.Payment",
        on_delete=models.PROTECT,
        related_name="referral_commissions",
        db_column="transaction_id",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.referral_code} +{self.amount} ({self.payment_id})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise IntegrityViolation("Referral commission entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise IntegrityViolation("Referral commission entries cannot be deleted.")


class CommissionPayment(models.Model):
    """Affiliator withdrawal request against the commission ledger."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    STATUSES = [
        (PENDING, "Pending"),
        (PAID, "Paid"),
        (FAILED, "Failed"),
    ]
    # Requests in these states already reduce the withdrawable balance.
    ENCUMBERING_STATUSES = (PENDING, PAID)
    TERMINAL_STATUSES = frozenset({PAID, FAILED})

    referral_code = models.ForeignKey("ReferralCode", on_delete=models.PROTECT, related_name="commission_payments")
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=10, choices=STATUSES, default=PENDING)
    transaction_id = models.CharField(max_length=120, blank=True, null=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.referral_code} withdrawal {self.amount} ({self.status})"
