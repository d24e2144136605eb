import logging

from django.db import transaction
from django.db.models import F

from core.models import Membership
from .models import LedgerEntry

logger = logging.getLogger("lyfez.ledger")


class PointsLedger:
    """
    The only writer of ``Membership.points``.

    Every mutation locks the membership row, applies the change with an
    F() expression and appends a LedgerEntry in the same transaction.
    """

    @classmethod
    def _apply(cls, membership_id, amount, reason, submission=None, activity_title="", actor=None):
        # Caller must already be inside transaction.atomic()
        locked = Membership.objects.select_for_update().get(pk=membership_id)
        Membership.objects.filter(pk=locked.pk).update(points=F("points") + amount)
        locked.refresh_from_db(fields=["points"])

        LedgerEntry.objects.create(
            membership=locked,
            amount=amount,
            balance_after=locked.points,
            reason=reason,
            submission=submission,
            activity_title=activity_title,
            actor=actor,
        )
        return locked

    @classmethod
    def credit(cls, membership, activity, submission=None):
        """
        Add ``activity.points`` to the membership's balance.

        The quorum engine only calls this on a transition into APPROVED.
        When the submission is known, an existing credit entry for it turns
        the call into a no-op, so a submission is credited at most once.
        """
        with transaction.atomic():
            if submission is not None and LedgerEntry.objects.filter(
                submission=submission,
                reason=LedgerEntry.REASON_CREDIT,
            ).exists():
                logger.warning(
                    "Credit skipped: submission=%s already credited", submission.pk
                )
                return membership

            updated = cls._apply(
                membership.pk,
                activity.points,
                LedgerEntry.REASON_CREDIT,
                submission=submission,
                activity_title=activity.title,
            )

        membership.points = updated.points
        logger.info(
            "Points credited: user=%s group=%s amount=%s balance=%s",
            membership.user_id, membership.group_id, activity.points, updated.points,
        )
        return membership

    @classmethod
    def revert_for_activity_deletion(cls, activity, actor=None) -> int:
        """
        Compensate every APPROVED submission of ``activity`` before it is
        deleted: each submitter loses ``activity.points`` once per approved
        submission. Returns the number of balances touched.
        """
        from activities.models import Submission

        reverted = 0
        with transaction.atomic():
            approved = (
                Submission.objects
                .filter(activity=activity, status=Submission.STATUS_APPROVED)
                .values_list("user_id", flat=True)
            )
            for user_id in approved:
                membership = Membership.objects.filter(
                    user_id=user_id,
                    group_id=activity.group_id,
                ).first()
                if membership is None:
                    # Submitter has since left the group
                    continue

                cls._apply(
                    membership.pk,
                    -activity.points,
                    LedgerEntry.REASON_ACTIVITY_DELETED,
                    activity_title=activity.title,
                    actor=actor,
                )
                reverted += 1

        logger.info(
            "Activity deletion reverted points: activity=%s amount=%s memberships=%s",
            activity.pk, activity.points, reverted,
        )
        return reverted

    @classmethod
    def admin_set(cls, membership, absolute_value, actor=None):
        """
        Overwrite the balance with ``absolute_value``. The entry records the
        delta so the audit trail still sums to the current balance.
        """
        with transaction.atomic():
            locked = Membership.objects.select_for_update().get(pk=membership.pk)
            delta = absolute_value - locked.points
            updated = cls._apply(
                locked.pk,
                delta,
                LedgerEntry.REASON_ADMIN_SET,
                actor=actor,
            )

        membership.points = updated.points
        logger.info(
            "Points set by admin: user=%s group=%s balance=%s actor=%s",
            membership.user_id, membership.group_id, updated.points, getattr(actor, "id", None),
        )
        return membership
