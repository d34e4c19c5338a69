"""
PostgreSQL exclusion constraint: no two pending/confirmed bookings of one host
may overlap. Buffers are enforced by the admission check that runs under the
host row lock; the constraint covers the raw meeting intervals.
"""

from django.db import migrations

CREATE_STATEMENTS = (
    "CREATE EXTENSION IF NOT EXISTS btree_gist",
    """
    ALTER TABLE bookingapp_booking
        ADD CONSTRAINT booking_no_active_overlap
        EXCLUDE USING gist (
            host_id WITH =,
            tstzrange(start_time, end_time, '[)') WITH &&
        )
        WHERE (status IN ('pending', 'confirmed'))
    """,
)

DROP_STATEMENT = "ALTER TABLE bookingapp_booking DROP CONSTRAINT IF EXISTS booking_no_active_overlap"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    for statement in CREATE_STATEMENTS:
        schema_editor.execute(statement)


def remove_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(DROP_STATEMENT)


class Migration(migrations.Migration):

    dependencies = [
        ("bookingapp", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, remove_exclusion_constraint),
    ]
