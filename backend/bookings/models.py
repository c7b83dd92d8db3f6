from django.conf import settings
from django.db import models


class Booking(models.Model):
    """A mentee's reservation of a mentoring service, optionally for a group."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    STATUSES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    ]
    ACTIVE_STATUSES = (PENDING, CONFIRMED)
    TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED})

    id = models.CharField(primary_key=True, max_length=64, editable=False)
    mentee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="bookings")
    mentoring_service = models.ForeignKey(
        "mentoring.MentoringService",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    referral_usage = models.OneToOneField(
        "referrals.ReferralUsage",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="booking",
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="BookingParticipant",
        related_name="participating_bookings",
    )
    special_requests = models.TextField(blank=True, null=True)
    booking_date = models.DateTimeField()
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.id} ({self.status})"


class BookingParticipant(models.Model):
    """Join table linking bookings to every attending user."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    PAYMENT_STATUSES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (FAILED, "Failed"),
    ]

    booking = models.ForeignKey("Booking", on_delete=models.CASCADE, related_name="booking_participants")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="booking_participations")
    is_leader = models.BooleanField(default=False)
    payment_status = models.CharField(max_length=12, choices=PAYMENT_STATUSES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("booking", "user")
        ordering = ["-is_leader", "id"]

    def __str__(self):
        return f"{self.user} × {self.booking}"
