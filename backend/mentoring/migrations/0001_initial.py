import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="MentoringService",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("service_name", models.CharField(max_length=200)),
                ("service_type", models.CharField(choices=[("one-on-one", "One-on-one"), ("group", "Group"), ("bootcamp", "Bootcamp"), ("shortclass", "Short class"), ("live class", "Live class")], max_length=20)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ("max_participants", models.PositiveIntegerField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["service_name", "id"],
            },
        ),
        migrations.CreateModel(
            name="MentoringSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("start_time", models.TimeField(blank=True, null=True)),
                ("end_time", models.TimeField(blank=True, null=True)),
                ("duration_minutes", models.PositiveIntegerField(blank=True, null=True)),
                ("meeting_link", models.URLField(blank=True)),
                ("status", models.CharField(choices=[("scheduled", "Scheduled"), ("ongoing", "Ongoing"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="scheduled", max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("service", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sessions", to="mentoring.mentoringservice")),
            ],
            options={
                "ordering": ["date", "start_time", "id"],
            },
        ),
        migrations.CreateModel(
            name="MentoringSessionMentor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("mentor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="session_assignments", to=settings.AUTH_USER_MODEL)),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="session_mentors", to="mentoring.mentoringsession")),
            ],
            options={
                "unique_together": {("session", "mentor")},
            },
        ),
        migrations.AddField(
            model_name="mentoringsession",
            name="mentors",
            field=models.ManyToManyField(related_name="mentoring_sessions", through="mentoring.MentoringSessionMentor", to=settings.AUTH_USER_MODEL),
        ),
        migrations.CreateModel(
            name="MentoringSessionUpdate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("changes", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("mentor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="session_updates", to=settings.AUTH_USER_MODEL)),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="updates", to="mentoring.mentoringsession")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["session", "mentor", "created_at"], name="session_update_window_idx")],
            },
        ),
    ]
