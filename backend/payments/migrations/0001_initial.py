import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        ("practices", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.CharField(editable=False, max_length=40, primary_key=True, serialize=False)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("failed", "Failed")], default="pending", max_length=12)),
                ("payment_method", models.CharField(blank=True, max_length=40, null=True)),
                ("transaction_id", models.CharField(blank=True, db_index=True, max_length=120, null=True)),
                ("payment_date", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("booking", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="payment", to="bookings.booking")),
                ("practice_purchase", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="payment", to="practices.practicepurchase")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("booking__isnull", False), ("practice_purchase__isnull", True)),
                            models.Q(("booking__isnull", True), ("practice_purchase__isnull", False)),
                            _connector="OR",
                        ),
                        name="payment_has_single_owner",
                    ),
                ],
            },
        ),
    ]
