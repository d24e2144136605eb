# lyfez/activities/submissions.py
"""
Submission store.

One live attempt per (member, activity, day): an UNDER_REVIEW or APPROVED
submission for today blocks a new one, a REJECTED one is thrown away and
replaced ("daily reset"). Creating a submission never touches points.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction

from core.exceptions import DuplicateSubmission, NotAMember, ValidationError
from core.models import Membership
from .datetime_utils import today
from .models import Submission
from .sanitizers import sanitize_description

logger = logging.getLogger("lyfez.activities")


def _clean_tagged_users(activity, submitter, tagged_users):
    if not tagged_users:
        return []

    try:
        ids = sorted({int(user_id) for user_id in tagged_users})
    except (TypeError, ValueError):
        raise ValidationError("tagged_users must be a list of user ids")

    member_ids = set(
        Membership.objects
        .filter(group_id=activity.group_id, user_id__in=ids)
        .values_list("user_id", flat=True)
    )
    unknown = [user_id for user_id in ids if user_id not in member_ids]
    if unknown:
        raise ValidationError(f"Tagged users are not members of this group: {unknown}")

    return [user_id for user_id in ids if user_id != submitter.id]


def create_submission(activity, submitter, description="", proofs=None, tagged_users=None) -> Submission:
    """
    Record today's attempt by ``submitter`` at ``activity``.

    Only the day's existing submission row is locked, the same row
    ``record_review`` locks first, so the two never wait on each other in
    opposite order. Two concurrent first attempts both reach the insert;
    the one-per-day constraint turns the loser into ``DuplicateSubmission``.
    """
    if not Membership.objects.filter(group_id=activity.group_id, user=submitter).exists():
        logger.warning(
            "Submission refused: user=%s is not a member of group=%s",
            submitter.id, activity.group_id,
        )
        raise NotAMember()

    proofs = list(proofs or [])
    if len(proofs) > settings.LYFEZ_MAX_PROOFS:
        raise ValidationError(f"At most {settings.LYFEZ_MAX_PROOFS} proofs per submission")

    with transaction.atomic():
        day = today()
        existing = (
            Submission.objects
            .select_for_update()
            .filter(activity=activity, user=submitter, submission_date=day)
            .first()
        )

        if existing is not None and existing.status in Submission.LIVE_STATUSES:
            logger.warning(
                "Duplicate submission: user=%s activity=%s day=%s status=%s",
                submitter.id, activity.id, day, existing.status,
            )
            raise DuplicateSubmission()

        if existing is not None:
            logger.info(
                "Replacing %s submission %s for user=%s activity=%s day=%s",
                existing.status, existing.id, submitter.id, activity.id, day,
            )
            existing.delete()

        try:
            with transaction.atomic():
                submission = Submission.objects.create(
                    activity=activity,
                    user=submitter,
                    submission_date=day,
                    description=sanitize_description(description),
                    proofs=proofs,
                    tagged_users=_clean_tagged_users(activity, submitter, tagged_users),
                    status=Submission.STATUS_UNDER_REVIEW,
                )
        except IntegrityError:
            raise DuplicateSubmission()

    logger.info(
        "Submission created: id=%s user=%s activity=%s day=%s",
        submission.id, submitter.id, activity.id, day,
    )
    return submission


def get_submission(activity, submitter):
    """Most recent submission of ``submitter`` for ``activity``, any day, or None."""
    return (
        Submission.objects
        .filter(activity=activity, user=submitter)
        .order_by("-submission_date", "-created_at")
        .first()
    )


def list_submissions(activity=None, group=None, day=None, user=None):
    """
    Read-only projection of submissions, by activity or by group + day.
    """
    if activity is None and group is None:
        raise ValueError("list_submissions needs an activity or a group")

    qs = Submission.objects.select_related("activity", "user")
    if activity is not None:
        qs = qs.filter(activity=activity)
    if group is not None:
        qs = qs.filter(activity__group=group)
    if day is not None:
        qs = qs.filter(submission_date=day)
    if user is not None:
        qs = qs.filter(user=user)
    return qs.order_by("-created_at")


def list_pending_reviews_for_user(user):
    """
    Open submissions in the user's groups that they neither wrote nor
    reviewed yet, oldest first.
    """
    group_ids = Membership.objects.filter(user=user).values_list("group_id", flat=True)
    return (
        Submission.objects
        .filter(
            activity__group_id__in=group_ids,
            status__in=Submission.OPEN_STATUSES,
        )
        .exclude(user=user)
        .exclude(reviews__reviewer=user)
        .select_related("activity", "activity__group", "user")
        .order_by("created_at")
    )
