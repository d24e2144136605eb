# lyfez/activities/models.py
from django.db import models
from django.conf import settings


class Activity(models.Model):
    """A recurring thing group members do for points."""
    group = models.ForeignKey(
        "core.Group",
        on_delete=models.CASCADE,
        related_name="activities",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    points = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-points", "-created_at"]
        verbose_name_plural = "Activities"

    def __str__(self):
        return f"{self.title} ({self.points} pts)"


class Submission(models.Model):
    """
    One member's claim to have done an activity on one calendar day.
    The rejected attempt of a day is replaced by a new one, so a
    (user, activity, day) triple is unique.
    """
    STATUS_UNDER_REVIEW = "UNDER_REVIEW"
    STATUS_APPROVED = "APPROVED"
    STATUS_REJECTED = "REJECTED"
    # Legacy rows only; new submissions start UNDER_REVIEW
    STATUS_PENDING = "PENDING"

    STATUS_CHOICES = [
        (STATUS_UNDER_REVIEW, "Under review"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_PENDING, "Pending"),
    ]

    # Statuses that still block another attempt on the same day
    LIVE_STATUSES = (STATUS_UNDER_REVIEW, STATUS_APPROVED)
    # Statuses still waiting for votes
    OPEN_STATUSES = (STATUS_UNDER_REVIEW, STATUS_PENDING)

    activity = models.ForeignKey(
        Activity,
        on_delete=models.CASCADE,
        related_name="submissions",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="submissions",
    )
    submission_date = models.DateField(db_index=True)
    description = models.TextField(blank=True)

    # [{"name", "type", "size", "content"}]
    proofs = models.JSONField(default=list, blank=True)
    # [user_id, ...]
    tagged_users = models.JSONField(default=list, blank=True)

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_UNDER_REVIEW,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "activity", "submission_date"],
                name="submission_one_per_day",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "submission_date"], name="submission_user_day_idx"),
            models.Index(fields=["activity", "status"], name="submission_activity_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.activity.title} - {self.submission_date} ({self.status})"

    @property
    def group_id(self):
        return self.activity.group_id


class Review(models.Model):
    """One member's vote on someone else's submission. Never edited."""
    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews_given",
    )
    approved = models.BooleanField()
    comment = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        unique_together = ("submission", "reviewer")

    def __str__(self):
        verdict = "approve" if self.approved else "reject"
        return f"{self.reviewer} {verdict}s #{self.submission_id}"
