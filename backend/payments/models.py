from django.db import models
from django.db.models import Q


class Payment(models.Model):
    """Charge owned by exactly one booking or one practice purchase."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    STATUSES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (FAILED, "Failed"),
    ]
    # Once settled the owning booking is locked against mentee edits.
    SETTLED_STATUSES = frozenset({CONFIRMED})

    id = models.CharField(primary_key=True, max_length=40, editable=False)
    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="payment",
    )
    practice_purchase = models.OneToOneField(
        "practices.PracticePurchase",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="payment",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    payment_method = models.CharField(max_length=40, blank=True, null=True)
    transaction_id = models.CharField(max_length=120, blank=True, null=True, db_index=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(booking__isnull=False, practice_purchase__isnull=True)
                    | Q(booking__isnull=True, practice_purchase__isnull=False)
                ),
                name="payment_has_single_owner",
            ),
        ]

    def __str__(self):
        return f"{self.id} {self.amount} ({self.status})"

    @property
    def kind(self) -> str:
        return "booking" if self.booking_id else "practice"
