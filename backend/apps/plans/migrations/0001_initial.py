from django.db import migrations, models

import apps.core.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Plan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
                ("price_per_user", apps.core.models.MoneyField()),
                (
                    "billing_cycle",
                    models.CharField(
                        choices=[
                            ("monthly", "Monthly"),
                            ("quarterly", "Quarterly"),
                            ("half_yearly", "Half yearly"),
                            ("yearly", "Yearly"),
                        ],
                        max_length=20,
                    ),
                ),
                ("billing_months", models.PositiveSmallIntegerField()),
                (
                    "billing_type",
                    models.CharField(
                        choices=[("prepaid", "Prepaid"), ("postpaid", "Postpaid")],
                        default="prepaid",
                        max_length=20,
                    ),
                ),
                ("min_users", models.PositiveIntegerField(default=5)),
                ("max_users", models.PositiveIntegerField(default=500)),
                (
                    "overage_policy",
                    models.CharField(
                        choices=[
                            ("hard_stop", "Hard stop"),
                            ("charge_overage", "Charge overage"),
                            ("notify_only", "Notify only"),
                        ],
                        default="hard_stop",
                        max_length=20,
                    ),
                ),
                (
                    "overage_price_per_user",
                    apps.core.models.MoneyField(
                        blank=True,
                        help_text="Per-user rate for seats above max_users; base rate when empty",
                        null=True,
                    ),
                ),
                ("features", models.JSONField(blank=True, default=list)),
                ("module_access", models.JSONField(blank=True, default=dict)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "ordering": ["billing_months", "name"],
            },
        ),
    ]
