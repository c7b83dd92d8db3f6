import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("mentoring", "0001_initial"),
        ("referrals", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ("special_requests", models.TextField(blank=True, null=True)),
                ("booking_date", models.DateTimeField()),
                ("status", models.CharField(choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="pending", max_length=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("mentee", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings", to=settings.AUTH_USER_MODEL)),
                ("mentoring_service", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings", to="mentoring.mentoringservice")),
                ("referral_usage", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="booking", to="referrals.referralusage")),
            ],
            options={
                "ordering": ["-created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="BookingParticipant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_leader", models.BooleanField(default=False)),
                ("payment_status", models.CharField(choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("failed", "Failed")], default="pending", max_length=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("booking", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="booking_participants", to="bookings.booking")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="booking_participations", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-is_leader", "id"],
                "unique_together": {("booking", "user")},
            },
        ),
        migrations.AddField(
            model_name="booking",
            name="participants",
            field=models.ManyToManyField(related_name="participating_bookings", through="bookings.BookingParticipant", to=settings.AUTH_USER_MODEL),
        ),
    ]
