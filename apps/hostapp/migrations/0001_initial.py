import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Host",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("timezone", models.CharField(default="UTC", max_length=64, verbose_name="Timezone")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
            ],
            options={
                "verbose_name": "Host",
                "verbose_name_plural": "Hosts",
                "ordering": ["name"],
            },
        ),
    ]
