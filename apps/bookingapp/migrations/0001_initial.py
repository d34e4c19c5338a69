import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hostapp", "0001_initial"),
        ("eventtypeapp", "0001_initial"),
        ("teamapp", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("group_id", models.UUIDField(blank=True, db_index=True, null=True, verbose_name="Group ID")),
                ("start_time", models.DateTimeField(db_index=True, verbose_name="Start Time")),
                ("end_time", models.DateTimeField(db_index=True, verbose_name="End Time")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                            ("no_show", "No Show"),
                        ],
                        db_index=True,
                        default="confirmed",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("buffer_before", models.PositiveIntegerField(default=0, verbose_name="Buffer Before (minutes)")),
                ("buffer_after", models.PositiveIntegerField(default=0, verbose_name="Buffer After (minutes)")),
                ("guest_name", models.CharField(max_length=255, verbose_name="Guest Name")),
                ("guest_email", models.EmailField(max_length=254, verbose_name="Guest Email")),
                ("guest_phone", models.CharField(blank=True, max_length=32, verbose_name="Guest Phone")),
                ("guest_timezone", models.CharField(default="UTC", max_length=64, verbose_name="Guest Timezone")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("cancellation_reason", models.TextField(blank=True, verbose_name="Cancellation Reason")),
                (
                    "idempotency_key",
                    models.CharField(blank=True, max_length=128, null=True, unique=True, verbose_name="Idempotency Key"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "event_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="eventtypeapp.eventtype",
                        verbose_name="Event Type",
                    ),
                ),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="hostapp.host",
                        verbose_name="Host",
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="teamapp.team",
                        verbose_name="Team",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-start_time"],
                "indexes": [
                    models.Index(fields=["host", "start_time", "status"], name="booking_host_start_idx"),
                    models.Index(fields=["host", "created_at"], name="booking_host_created_idx"),
                ],
            },
        ),
    ]
