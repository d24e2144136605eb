# ux/services/calendar.py
"""
Calendar aggregator.

Derives a user's per-day completion label for a group from the current
activities and submissions. Nothing is stored; every call recomputes,
so the result is safe to poll.
"""
import logging

from activities.datetime_utils import format_day, month_days, today
from activities.models import Activity, Submission
from activities.services import list_activities
from core.permissions import require_membership

logger = logging.getLogger("lyfez.calendar")

STATUS_COMPLETE = "complete"
STATUS_PARTIAL = "partial"
STATUS_INCOMPLETE = "incomplete"
STATUS_FUTURE = "future"


def classify(activity_ids, submissions) -> str:
    """
    Label one day given the group's activity ids and the user's
    submissions dated that day (at most one per activity).
    """
    by_activity = {s.activity_id: s for s in submissions}

    approved = 0
    pending = 0
    for activity_id in activity_ids:
        submission = by_activity.get(activity_id)
        if submission is None:
            continue
        if submission.status == Submission.STATUS_APPROVED:
            approved += 1
        elif submission.status in Submission.OPEN_STATUSES:
            pending += 1

    if approved == len(activity_ids):
        return STATUS_COMPLETE
    if approved > 0 or pending > 0:
        return STATUS_PARTIAL
    return STATUS_INCOMPLETE


def daily_status(user, group, year: int, month: int):
    """
    ``{"activities": [...], "daily_status": {"YYYY-MM-DD": label}}`` for
    every day of the month. Days after today are ``future``. A group with
    no activities yields an empty map.
    """
    require_membership(user, group)

    activities = list(list_activities(group))
    if not activities:
        return {"activities": [], "daily_status": {}}

    activity_ids = [a.id for a in activities]
    days = month_days(year, month)

    submissions = list(
        Submission.objects.filter(
            user=user,
            activity__group=group,
            submission_date__gte=days[0],
            submission_date__lte=days[-1],
        ).only("id", "activity_id", "submission_date", "status")
    )
    by_day = {}
    for submission in submissions:
        by_day.setdefault(submission.submission_date, []).append(submission)

    current = today()
    result = {}
    for day in days:
        if day > current:
            result[format_day(day)] = STATUS_FUTURE
            continue
        result[format_day(day)] = classify(activity_ids, by_day.get(day, []))

    logger.debug(
        "Daily status computed: user=%s group=%s month=%04d-%02d",
        user.id, group.id, year, month,
    )
    return {
        "activities": [
            {"id": a.id, "title": a.title, "points": a.points}
            for a in activities
        ],
        "daily_status": result,
    }


def day_detail(user, group, day):
    """
    Label for one day plus the user's submissions that day, each with its
    reviews, for display and audit.
    """
    require_membership(user, group)

    activity_ids = list(Activity.objects.filter(group=group).values_list("id", flat=True))
    submissions = list(
        Submission.objects
        .filter(user=user, activity__group=group, submission_date=day)
        .select_related("activity")
        .prefetch_related("reviews__reviewer")
        .order_by("activity__title")
    )

    if day > today():
        label = STATUS_FUTURE
    else:
        # With no activities there is nothing left undone: complete
        label = classify(activity_ids, submissions)

    return {
        "date": format_day(day),
        "group_id": group.id,
        "status": label,
        "submissions": [
            {
                "id": s.id,
                "activity": {"id": s.activity.id, "title": s.activity.title, "points": s.activity.points},
                "description": s.description,
                "status": s.status,
                "reviews": [
                    {
                        "id": r.id,
                        "approved": r.approved,
                        "comment": r.comment,
                        "reviewer": {"id": r.reviewer.id, "name": r.reviewer.name, "email": r.reviewer.email},
                    }
                    for r in s.reviews.all()
                ],
            }
            for s in submissions
        ],
    }
