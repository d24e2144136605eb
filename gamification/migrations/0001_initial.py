import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("activities", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.IntegerField(help_text="Signed change applied to the balance")),
                ("balance_after", models.IntegerField()),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("credit", "Approved submission"),
                            ("activity_deleted", "Activity deleted"),
                            ("admin_set", "Admin override"),
                        ],
                        max_length=32,
                    ),
                ),
                ("activity_title", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ledger_actions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "membership",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ledger_entries",
                        to="core.membership",
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ledger_entries",
                        to="activities.submission",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "verbose_name_plural": "Ledger entries",
                "indexes": [
                    models.Index(fields=["membership", "-created_at"], name="ledger_membership_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("reason", "credit")),
                        fields=("submission",),
                        name="ledger_single_credit_per_submission",
                    ),
                ],
            },
        ),
    ]
