from django.db import models
from django.conf import settings


class LedgerEntry(models.Model):
    """
    Immutable audit trail of point balance changes on a membership.
    Answers "why do I have these points?" and carries the once-only
    marker for approval credits.
    """
    REASON_CREDIT = "credit"
    REASON_ACTIVITY_DELETED = "activity_deleted"
    REASON_ADMIN_SET = "admin_set"

    REASON_CHOICES = [
        (REASON_CREDIT, "Approved submission"),
        (REASON_ACTIVITY_DELETED, "Activity deleted"),
        (REASON_ADMIN_SET, "Admin override"),
    ]

    membership = models.ForeignKey(
        "core.Membership",
        on_delete=models.CASCADE,
        related_name="ledger_entries",
    )

    amount = models.IntegerField(help_text="Signed change applied to the balance")
    balance_after = models.IntegerField()
    reason = models.CharField(max_length=32, choices=REASON_CHOICES)

    # Traceability
    submission = models.ForeignKey(
        "activities.Submission",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_entries",
    )
    activity_title = models.CharField(max_length=255, blank=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_actions",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["submission"],
                condition=models.Q(reason="credit"),
                name="ledger_single_credit_per_submission",
            ),
        ]
        indexes = [
            models.Index(fields=["membership", "-created_at"], name="ledger_membership_idx"),
        ]
        verbose_name_plural = "Ledger entries"

    def __str__(self):
        return f"{self.membership} {self.amount:+d} ({self.reason})"
