# ux/tests/test_calendar.py
import datetime
from unittest import mock

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from activities.models import Review, Submission
from core.exceptions import NotAMember
from core.tests.factories import make_activity, make_group, make_user
from ux.services import calendar

TODAY = datetime.date(2026, 10, 15)


@mock.patch("ux.services.calendar.today", return_value=TODAY)
class CalendarServiceTest(TestCase):
    def setUp(self):
        self.admin = make_user("admin")
        self.alice = make_user("alice")
        self.outsider = make_user("outsider")

        self.group = make_group(self.admin, self.alice)
        self.run = make_activity(self.group, title="Run 5k", points=10)
        self.read = make_activity(self.group, title="Read 20 pages", points=5)

    def submit(self, activity, day, status=Submission.STATUS_UNDER_REVIEW, user=None):
        return Submission.objects.create(
            activity=activity,
            user=user or self.alice,
            submission_date=day,
            status=status,
        )

    def test_partial_then_complete(self, _today):
        day = datetime.date(2026, 10, 10)
        self.submit(self.run, day, Submission.STATUS_APPROVED)
        pending = self.submit(self.read, day)

        result = calendar.daily_status(self.alice, self.group, 2026, 10)
        self.assertEqual(result["daily_status"]["2026-10-10"], calendar.STATUS_PARTIAL)

        Submission.objects.filter(pk=pending.pk).update(status=Submission.STATUS_APPROVED)
        result = calendar.daily_status(self.alice, self.group, 2026, 10)
        self.assertEqual(result["daily_status"]["2026-10-10"], calendar.STATUS_COMPLETE)

    def test_labels_for_whole_month(self, _today):
        self.submit(self.run, datetime.date(2026, 10, 3), Submission.STATUS_REJECTED)
        self.submit(self.read, datetime.date(2026, 10, 4))
        # Future-dated rows never change a future label
        self.submit(self.run, datetime.date(2026, 10, 20), Submission.STATUS_APPROVED)
        self.submit(self.read, datetime.date(2026, 10, 20), Submission.STATUS_APPROVED)

        result = calendar.daily_status(self.alice, self.group, 2026, 10)
        status = result["daily_status"]

        self.assertEqual(len(status), 31)
        self.assertEqual(status["2026-10-01"], calendar.STATUS_INCOMPLETE)
        self.assertEqual(status["2026-10-03"], calendar.STATUS_INCOMPLETE)
        self.assertEqual(status["2026-10-04"], calendar.STATUS_PARTIAL)
        self.assertEqual(status["2026-10-15"], calendar.STATUS_INCOMPLETE)
        self.assertEqual(status["2026-10-16"], calendar.STATUS_FUTURE)
        self.assertEqual(status["2026-10-20"], calendar.STATUS_FUTURE)
        self.assertEqual(
            [a["title"] for a in result["activities"]],
            ["Run 5k", "Read 20 pages"],
        )

    def test_other_users_submissions_do_not_count(self, _today):
        day = datetime.date(2026, 10, 10)
        self.submit(self.run, day, Submission.STATUS_APPROVED, user=self.admin)
        self.submit(self.read, day, Submission.STATUS_APPROVED, user=self.admin)

        result = calendar.daily_status(self.alice, self.group, 2026, 10)
        self.assertEqual(result["daily_status"]["2026-10-10"], calendar.STATUS_INCOMPLETE)

        result = calendar.daily_status(self.admin, self.group, 2026, 10)
        self.assertEqual(result["daily_status"]["2026-10-10"], calendar.STATUS_COMPLETE)

    def test_past_month_has_no_future_days(self, _today):
        result = calendar.daily_status(self.alice, self.group, 2026, 2)
        self.assertEqual(len(result["daily_status"]), 28)
        self.assertNotIn(calendar.STATUS_FUTURE, result["daily_status"].values())

    def test_group_without_activities(self, _today):
        empty = make_group(self.admin, self.alice, name="Empty")
        result = calendar.daily_status(self.alice, empty, 2026, 10)
        self.assertEqual(result, {"activities": [], "daily_status": {}})

    def test_non_member_is_refused(self, _today):
        with self.assertRaises(NotAMember):
            calendar.daily_status(self.outsider, self.group, 2026, 10)
        with self.assertRaises(NotAMember):
            calendar.day_detail(self.outsider, self.group, TODAY)

    def test_day_detail(self, _today):
        day = datetime.date(2026, 10, 10)
        submission = self.submit(self.run, day, Submission.STATUS_APPROVED)
        Review.objects.create(submission=submission, reviewer=self.admin, approved=True, comment="ok")

        detail = calendar.day_detail(self.alice, self.group, day)
        self.assertEqual(detail["date"], "2026-10-10")
        self.assertEqual(detail["status"], calendar.STATUS_PARTIAL)
        self.assertEqual(len(detail["submissions"]), 1)
        self.assertEqual(detail["submissions"][0]["reviews"][0]["comment"], "ok")

        detail = calendar.day_detail(self.alice, self.group, datetime.date(2026, 10, 16))
        self.assertEqual(detail["status"], calendar.STATUS_FUTURE)

    def test_classify(self, _today):
        approved = Submission(activity_id=1, status=Submission.STATUS_APPROVED)
        rejected = Submission(activity_id=2, status=Submission.STATUS_REJECTED)
        legacy = Submission(activity_id=2, status=Submission.STATUS_PENDING)

        self.assertEqual(calendar.classify([1, 2], []), calendar.STATUS_INCOMPLETE)
        self.assertEqual(calendar.classify([1, 2], [rejected]), calendar.STATUS_INCOMPLETE)
        self.assertEqual(calendar.classify([1, 2], [legacy]), calendar.STATUS_PARTIAL)
        self.assertEqual(calendar.classify([1, 2], [approved, rejected]), calendar.STATUS_PARTIAL)
        self.assertEqual(calendar.classify([1], [approved]), calendar.STATUS_COMPLETE)


@mock.patch("ux.services.calendar.today", return_value=TODAY)
class CalendarApiTest(TestCase):
    def setUp(self):
        cache.clear()

        self.admin = make_user("admin")
        self.outsider = make_user("outsider")
        self.group = make_group(self.admin)
        make_activity(self.group)

        self.client_admin = APIClient()
        self.client_admin.force_authenticate(self.admin)
        self.client_outsider = APIClient()
        self.client_outsider.force_authenticate(self.outsider)

    def test_daily_status(self, _today):
        url = reverse("calendar-daily-status", args=[self.group.id])
        resp = self.client_admin.get(url, {"year": 2026, "month": 10})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["daily_status"]["2026-10-31"], "future")

    def test_daily_status_bad_params(self, _today):
        url = reverse("calendar-daily-status", args=[self.group.id])

        for params in ({}, {"year": 2026}, {"year": "x", "month": 1}, {"year": 2026, "month": 13}):
            resp = self.client_admin.get(url, params)
            self.assertEqual(resp.status_code, 400, params)
            self.assertEqual(resp.data["kind"], "validation_error")

    def test_daily_status_access(self, _today):
        url = reverse("calendar-daily-status", args=[self.group.id])
        self.assertEqual(self.client_outsider.get(url, {"year": 2026, "month": 10}).status_code, 403)

        url = reverse("calendar-daily-status", args=[9999])
        self.assertEqual(self.client_admin.get(url, {"year": 2026, "month": 10}).status_code, 404)

    def test_day_detail(self, _today):
        url = reverse("calendar-day-detail", args=[self.group.id, "2026-10-01"])
        resp = self.client_admin.get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["status"], "incomplete")
        self.assertEqual(resp.data["submissions"], [])

        for bad in ("2026-13-01", "2026-02-30", "yesterday"):
            url = reverse("calendar-day-detail", args=[self.group.id, bad])
            self.assertEqual(self.client_admin.get(url).status_code, 400, bad)
