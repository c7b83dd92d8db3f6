import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("payments", "0001_initial"),
        ("referrals", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReferralCommission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("payment", models.ForeignKey(db_column="transaction_id", on_delete=django.db.models.deletion.PROTECT, related_name="referral_commissions", to="payments.payment")),
                ("referral_code", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="commissions", to="referrals.referralcode")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
