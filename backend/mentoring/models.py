from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class MentoringService(models.Model):
    """Bookable mentoring offer. Managed elsewhere; bookings only read it."""

    ONE_ON_ONE = "one-on-one"
    GROUP = "group"
    BOOTCAMP = "bootcamp"
    SHORTCLASS = "shortclass"
    LIVE_CLASS = "live class"
    SERVICE_TYPES = [
        (ONE_ON_ONE, "One-on-one"),
        (GROUP, "Group"),
        (BOOTCAMP, "Bootcamp"),
        (SHORTCLASS, "Short class"),
        (LIVE_CLASS, "Live class"),
    ]
    # Scheduled on a mentee-chosen date and committed immediately.
    MANUAL_TYPES = frozenset({ONE_ON_ONE, GROUP})
    # Cohort deliveries whose participants are confirmed through payment.
    SPECIAL_TYPES = frozenset({BOOTCAMP, SHORTCLASS, LIVE_CLASS})

    service_name = models.CharField(max_length=200)
    service_type = models.CharField(max_length=20, choices=SERVICE_TYPES)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    max_participants = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["service_name", "id"]

    def __str__(self):
        return f"{self.service_name} ({self.service_type})"

    @property
    def is_known_type(self) -> bool:
        return self.service_type in dict(self.SERVICE_TYPES)

    @property
    def is_manual(self) -> bool:
        return self.service_type in self.MANUAL_TYPES

    @property
    def is_special(self) -> bool:
        return self.service_type in self.SPECIAL_TYPES


class MentoringSession(models.Model):
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    STATUSES = [
        (SCHEDULED, "Scheduled"),
        (ONGOING, "Ongoing"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    ]

    service = models.ForeignKey("MentoringService", on_delete=models.CASCADE, related_name="sessions")
    mentors = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="MentoringSessionMentor",
        related_name="mentoring_sessions",
    )
    date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    meeting_link = models.URLField(blank=True)
    status = models.CharField(max_length=20, choices=STATUSES, default=SCHEDULED)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "start_time", "id"]

    def __str__(self):
        return f"{self.service.service_name} on {self.date}"


class MentoringSessionMentor(models.Model):
    session = models.ForeignKey("MentoringSession", on_delete=models.CASCADE, related_name="session_mentors")
    mentor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="session_assignments")

    class Meta:
        unique_together = ("session", "mentor")


class MentoringSessionUpdate(models.Model):
    """One row per mentor edit; the rolling-window throttle counts these."""

    session = models.ForeignKey("MentoringSession", on_delete=models.CASCADE, related_name="updates")
    mentor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="session_updates")
    changes = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["session", "mentor", "created_at"], name="session_update_window_idx"),
        ]
