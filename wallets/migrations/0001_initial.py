import uuid

import django.db.models.expressions
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Wallet",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("address", models.CharField(max_length=42, unique=True)),
                ("network", models.CharField(default="Unknown", max_length=100)),
                ("connected_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("last_connected", models.DateTimeField(default=django.utils.timezone.now)),
                ("connection_count", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "indexes": [models.Index(fields=["-connected_at"], name="wallet_connected_at_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("connection_count__gte", 1)), name="wallet_connection_count_gte_1"),
                    models.CheckConstraint(
                        condition=models.Q(("last_connected__gte", django.db.models.expressions.F("connected_at"))),
                        name="wallet_last_after_first",
                    ),
                ],
            },
        ),
    ]
