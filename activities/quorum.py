# lyfez/activities/quorum.py
"""
Vote tally / quorum engine for submissions.

A submission is decided by simple majority of the *current* group size:

    required = ceil(N / 2)
    approvals  >= required -> APPROVED
    rejections >= required -> REJECTED
    otherwise              -> UNDER_REVIEW

Votes are never retracted, so counts only grow. The decision is re-run on
every new review while holding a row lock on the submission, and the
status write and the ledger credit commit together.
"""
import logging
import math
from typing import Tuple

from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from core.exceptions import AlreadyReviewed, NotAMember, NotFoundError, SelfReviewForbidden
from core.models import Membership
from core.permissions import group_member_count, is_member
from gamification.ledger import PointsLedger
from .models import Review, Submission
from .sanitizers import sanitize_comment

logger = logging.getLogger("lyfez.reviews")


def required_votes(member_count: int) -> int:
    """Same-direction votes needed to decide a submission."""
    return math.ceil(member_count / 2)


def decide(approvals: int, rejections: int, required: int) -> str:
    """
    Target status for the given tally. Approval wins when both sides
    have reached the threshold.
    """
    if approvals >= required:
        return Submission.STATUS_APPROVED
    if rejections >= required:
        return Submission.STATUS_REJECTED
    return Submission.STATUS_UNDER_REVIEW


def tally(submission) -> Tuple[int, int]:
    counts = Review.objects.filter(submission=submission).aggregate(
        approvals=Count("id", filter=Q(approved=True)),
        rejections=Count("id", filter=Q(approved=False)),
    )
    return counts["approvals"], counts["rejections"]


def evaluate(submission) -> Tuple[str, str]:
    """
    Recompute and persist the status of a locked submission.

    Must run inside the transaction that holds the submission's row lock.
    Credits the submitter when the status moves into APPROVED from any
    other status. Returns (old_status, new_status).
    """
    activity = submission.activity
    approvals, rejections = tally(submission)
    member_count = group_member_count(activity.group_id)
    required = required_votes(member_count)
    target = decide(approvals, rejections, required)

    logger.info(
        "Tally for submission=%s: approvals=%s rejections=%s required=%s members=%s status=%s",
        submission.id, approvals, rejections, required, member_count, submission.status,
    )

    prior = submission.status
    if target == prior:
        return prior, prior

    submission.status = target
    submission.save(update_fields=["status", "updated_at"])
    logger.info(
        "Submission state transition: submission=%s from=%s to=%s",
        submission.id, prior, target,
    )

    if target == Submission.STATUS_APPROVED and prior != Submission.STATUS_APPROVED:
        membership = Membership.objects.filter(
            user_id=submission.user_id,
            group_id=activity.group_id,
        ).first()
        if membership is None:
            logger.warning(
                "Submission %s approved but submitter %s left group %s; no points credited",
                submission.id, submission.user_id, activity.group_id,
            )
        else:
            PointsLedger.credit(membership, activity, submission=submission)

    return prior, target


def _lock_submission(submission_id) -> Submission:
    try:
        return (
            Submission.objects
            .select_for_update()
            .select_related("activity")
            .get(pk=submission_id)
        )
    except Submission.DoesNotExist:
        raise NotFoundError("Submission not found")


def record_review(submission_id, reviewer, approved: bool, comment: str = "") -> Submission:
    """
    Add ``reviewer``'s vote to a submission and re-decide its status.

    Preconditions are checked in order, each with its own error: unknown
    submission, self-review, non-member reviewer, second vote.
    """
    with transaction.atomic():
        submission = _lock_submission(submission_id)

        if submission.user_id == reviewer.id:
            logger.warning("Self-review refused: submission=%s user=%s", submission.id, reviewer.id)
            raise SelfReviewForbidden()

        if not is_member(reviewer, submission.activity.group_id):
            logger.warning(
                "Review refused: user=%s not a member of group=%s",
                reviewer.id, submission.activity.group_id,
            )
            raise NotAMember()

        if Review.objects.filter(submission=submission, reviewer=reviewer).exists():
            logger.warning("Duplicate review refused: submission=%s user=%s", submission.id, reviewer.id)
            raise AlreadyReviewed()

        try:
            with transaction.atomic():
                Review.objects.create(
                    submission=submission,
                    reviewer=reviewer,
                    approved=bool(approved),
                    comment=sanitize_comment(comment),
                )
        except IntegrityError:
            raise AlreadyReviewed()

        logger.info(
            "Review recorded: submission=%s reviewer=%s approved=%s",
            submission.id, reviewer.id, bool(approved),
        )
        evaluate(submission)

    return submission


def reevaluate(submission_id) -> Tuple[str, str]:
    """
    Re-run the decision for one submission against the current group size,
    without a new vote. Used by the ``reevaluate_submissions`` command.
    """
    with transaction.atomic():
        submission = _lock_submission(submission_id)
        return evaluate(submission)
