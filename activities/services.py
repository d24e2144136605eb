import logging

from django.db import transaction

from core.exceptions import NotFoundError, ValidationError
from core.permissions import require_admin
from gamification.ledger import PointsLedger
from .models import Activity, Submission
from .sanitizers import sanitize_description, sanitize_title

logger = logging.getLogger("lyfez.activities")


def get_activity(activity_id) -> Activity:
    try:
        return Activity.objects.select_related("group").get(pk=activity_id)
    except Activity.DoesNotExist:
        raise NotFoundError("Activity not found")


def list_activities(group):
    return Activity.objects.filter(group=group).order_by("-points", "-created_at")


def _clean_points(points) -> int:
    if points in (None, ""):
        return 0
    try:
        value = int(points)
    except (TypeError, ValueError):
        raise ValidationError("Points must be a whole number")
    if value < 0:
        raise ValidationError("Points cannot be negative")
    return value


class ActivityService:
    @staticmethod
    def create(group, actor, title, description="", points=0) -> Activity:
        require_admin(actor, group, "Only admins can create activities")

        title = sanitize_title(title)
        if not title:
            raise ValidationError("Activity title is required")

        activity = Activity.objects.create(
            group=group,
            title=title,
            description=sanitize_description(description),
            points=_clean_points(points),
        )
        logger.info("Activity created: id=%s group=%s actor=%s", activity.id, group.id, actor.id)
        return activity

    @staticmethod
    def update(activity, actor, **changes) -> Activity:
        """
        Partial update. Changing points does not touch balances already
        credited for this activity.
        """
        require_admin(actor, activity.group, "Only admins can update activities")

        update_fields = []
        if "title" in changes and changes["title"] is not None:
            title = sanitize_title(changes["title"])
            if not title:
                raise ValidationError("Activity title is required")
            activity.title = title
            update_fields.append("title")
        if "description" in changes and changes["description"] is not None:
            activity.description = sanitize_description(changes["description"])
            update_fields.append("description")
        if "points" in changes and changes["points"] is not None:
            activity.points = _clean_points(changes["points"])
            update_fields.append("points")

        if update_fields:
            activity.save(update_fields=update_fields + ["updated_at"])
            logger.info("Activity updated: id=%s fields=%s actor=%s", activity.id, update_fields, actor.id)
        return activity

    @staticmethod
    def delete(activity, actor) -> int:
        """
        Take back the points of every approved submission, then delete the
        activity (submissions and reviews cascade). One transaction.
        Returns the number of balances reverted.
        """
        require_admin(actor, activity.group, "Only admins can delete activities")

        with transaction.atomic():
            # Lock the activity's submissions so no approval lands mid-delete
            list(Submission.objects.select_for_update().filter(activity=activity).values_list("id", flat=True))

            reverted = PointsLedger.revert_for_activity_deletion(activity, actor=actor)
            activity_id = activity.id
            activity.delete()

        logger.info("Activity deleted: id=%s actor=%s reverted=%s", activity_id, actor.id, reverted)
        return reverted
