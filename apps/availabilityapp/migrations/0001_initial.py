import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hostapp", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WeeklyRule",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "day_of_week",
                    models.IntegerField(
                        choices=[
                            (0, "Monday"),
                            (1, "Tuesday"),
                            (2, "Wednesday"),
                            (3, "Thursday"),
                            (4, "Friday"),
                            (5, "Saturday"),
                            (6, "Sunday"),
                        ],
                        verbose_name="Day of Week",
                    ),
                ),
                ("start_time", models.TimeField(verbose_name="Start Time")),
                ("end_time", models.TimeField(verbose_name="End Time")),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="weekly_rules",
                        to="hostapp.host",
                        verbose_name="Host",
                    ),
                ),
            ],
            options={
                "verbose_name": "Weekly Rule",
                "verbose_name_plural": "Weekly Rules",
                "ordering": ["day_of_week", "start_time"],
                "indexes": [models.Index(fields=["host", "day_of_week"], name="weekly_rule_host_day_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("start_time__lt", models.F("end_time"))),
                        name="weekly_rule_start_before_end",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="DateOverride",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateField(verbose_name="Date")),
                ("is_available", models.BooleanField(default=False, verbose_name="Is Available")),
                ("start_time", models.TimeField(blank=True, null=True, verbose_name="Start Time")),
                ("end_time", models.TimeField(blank=True, null=True, verbose_name="End Time")),
                ("reason", models.CharField(blank=True, max_length=255, verbose_name="Reason")),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="date_overrides",
                        to="hostapp.host",
                        verbose_name="Host",
                    ),
                ),
            ],
            options={
                "verbose_name": "Date Override",
                "verbose_name_plural": "Date Overrides",
                "ordering": ["date"],
                "unique_together": {("host", "date")},
            },
        ),
    ]
