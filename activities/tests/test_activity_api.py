# activities/tests/test_activity_api.py
import datetime

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from activities.models import Activity, Review, Submission
from core.tests.factories import make_activity, make_group, make_user, membership
from gamification.models import LedgerEntry


class ActivityApiBase(TestCase):
    def setUp(self):
        cache.clear()

        self.admin = make_user("admin")
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.outsider = make_user("outsider")

        self.group = make_group(self.admin, self.alice, self.bob)
        self.activity = make_activity(self.group, points=10)

        self.clients = {}
        for user in (self.admin, self.alice, self.bob, self.outsider):
            client = APIClient()
            client.force_authenticate(user)
            self.clients[user.email.split("@")[0]] = client


class ActivityCrudApiTest(ActivityApiBase):
    def test_admin_creates_activity(self):
        url = reverse("group-activities", args=[self.group.id])
        resp = self.clients["admin"].post(
            url, {"title": "  Stretch  ", "description": "<b>10 min</b>", "points": 3}, format="json"
        )
        self.assertEqual(resp.status_code, 201, resp.data)
        self.assertEqual(resp.data["title"], "Stretch")
        self.assertEqual(resp.data["points"], 3)

    def test_create_validation_and_permissions(self):
        url = reverse("group-activities", args=[self.group.id])

        resp = self.clients["alice"].post(url, {"title": "Stretch", "points": 3}, format="json")
        self.assertEqual(resp.status_code, 403)

        resp = self.clients["admin"].post(url, {"title": "", "points": 3}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["kind"], "validation_error")

        resp = self.clients["admin"].post(url, {"title": "Stretch", "points": -1}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_members_list_activities(self):
        make_activity(self.group, title="Read 20 pages", points=5)
        url = reverse("group-activities", args=[self.group.id])

        resp = self.clients["bob"].get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([a["points"] for a in resp.data], [10, 5])

        self.assertEqual(self.clients["outsider"].get(url).status_code, 403)

    def test_update_activity(self):
        url = reverse("activity-detail", args=[self.activity.id])

        resp = self.clients["admin"].patch(url, {"points": 12}, format="json")
        self.assertEqual(resp.status_code, 200, resp.data)
        self.assertEqual(resp.data["points"], 12)
        self.assertEqual(resp.data["title"], "Run 5k")

        self.assertEqual(self.clients["alice"].patch(url, {"points": 1}, format="json").status_code, 403)

    def test_update_rejects_blank_title(self):
        url = reverse("activity-detail", args=[self.activity.id])

        for title in ("", "   "):
            resp = self.clients["admin"].patch(url, {"title": title}, format="json")
            self.assertEqual(resp.status_code, 400, title)
            self.assertEqual(resp.data["errors"]["detail"], "Activity title is required")

        self.activity.refresh_from_db()
        self.assertEqual(self.activity.title, "Run 5k")

    def test_delete_reverts_approved_points_only(self):
        day = datetime.date(2026, 3, 14)
        approved = Submission.objects.create(
            activity=self.activity,
            user=self.alice,
            submission_date=day,
            status=Submission.STATUS_APPROVED,
        )
        Submission.objects.create(activity=self.activity, user=self.bob, submission_date=day)
        LedgerEntry.objects.create(
            membership=membership(self.alice, self.group),
            amount=10,
            balance_after=10,
            reason=LedgerEntry.REASON_CREDIT,
            submission=approved,
        )
        m = membership(self.alice, self.group)
        m.points = 25
        m.save()
        m = membership(self.bob, self.group)
        m.points = 4
        m.save()

        url = reverse("activity-detail", args=[self.activity.id])
        resp = self.clients["admin"].delete(url)
        self.assertEqual(resp.status_code, 200, resp.data)
        self.assertEqual(resp.data["points_reverted"], 1)

        self.assertFalse(Activity.objects.filter(pk=self.activity.id).exists())
        self.assertFalse(Submission.objects.exists())
        self.assertEqual(membership(self.alice, self.group).points, 15)
        self.assertEqual(membership(self.bob, self.group).points, 4)
        self.assertEqual(membership(self.admin, self.group).points, 0)

    def test_member_cannot_delete(self):
        url = reverse("activity-detail", args=[self.activity.id])
        self.assertEqual(self.clients["alice"].delete(url).status_code, 403)
        self.assertTrue(Activity.objects.filter(pk=self.activity.id).exists())

    def test_unknown_activity(self):
        url = reverse("activity-detail", args=[9999])
        resp = self.clients["admin"].get(url)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data["kind"], "not_found")


class SubmissionApiTest(ActivityApiBase):
    def submit(self, who, **body):
        url = reverse("activity-submissions", args=[self.activity.id])
        return self.clients[who].post(url, body, format="json")

    def test_submit_and_duplicate(self):
        resp = self.submit(
            "alice",
            description="Ran along the river",
            proofs=[{"name": "run.png", "type": "image/png", "size": 4, "content": "data:image/png;base64,AAAA"}],
            tagged_users=[self.bob.id],
        )
        self.assertEqual(resp.status_code, 201, resp.data)
        self.assertEqual(resp.data["status"], Submission.STATUS_UNDER_REVIEW)
        self.assertEqual(resp.data["proofs"][0]["name"], "run.png")
        self.assertEqual(resp.data["tagged_users"], [self.bob.id])
        self.assertEqual(resp.data["reviews"], [])

        resp = self.submit("alice", description="again")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["kind"], "conflict")
        self.assertEqual(Submission.objects.count(), 1)

    def test_submit_errors(self):
        resp = self.submit("outsider")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data["errors"]["detail"], "Not a member of this group")

        url = reverse("activity-submissions", args=[9999])
        self.assertEqual(self.clients["alice"].post(url, {}, format="json").status_code, 404)

        resp = self.submit("alice", proofs=[{"type": "image/png"}])
        self.assertEqual(resp.status_code, 400)

    def test_list_and_latest_submission(self):
        self.submit("alice")
        self.submit("bob")

        url = reverse("activity-submissions", args=[self.activity.id])
        resp = self.clients["admin"].get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 2)

        url = reverse("user-activity-submission", args=[self.activity.id, self.alice.id])
        resp = self.clients["bob"].get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["user"]["id"], self.alice.id)

        url = reverse("user-activity-submission", args=[self.activity.id, self.admin.id])
        resp = self.clients["bob"].get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.data)


class ReviewApiTest(ActivityApiBase):
    def setUp(self):
        super().setUp()
        self.submission = Submission.objects.create(
            activity=self.activity,
            user=self.alice,
            submission_date=datetime.date(2026, 3, 14),
        )
        self.url = reverse("submission-reviews", args=[self.submission.id])

    def test_votes_decide_submission(self):
        resp = self.clients["bob"].post(self.url, {"approved": True, "comment": "Great"}, format="json")
        self.assertEqual(resp.status_code, 201, resp.data)
        self.assertEqual(resp.data["status"], Submission.STATUS_UNDER_REVIEW)
        self.assertEqual(resp.data["approvals"], 1)

        resp = self.clients["admin"].post(self.url, {"approved": True}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["status"], Submission.STATUS_APPROVED)
        self.assertEqual(len(resp.data["reviews"]), 2)
        self.assertEqual(membership(self.alice, self.group).points, 10)

        resp = self.clients["alice"].get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 2)

    def test_review_errors(self):
        resp = self.clients["alice"].post(self.url, {"approved": True}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["errors"]["detail"], "Cannot review your own submission")

        resp = self.clients["outsider"].post(self.url, {"approved": True}, format="json")
        self.assertEqual(resp.status_code, 403)

        self.clients["bob"].post(self.url, {"approved": False}, format="json")
        resp = self.clients["bob"].post(self.url, {"approved": True}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["kind"], "conflict")

        url = reverse("submission-reviews", args=[9999])
        self.assertEqual(self.clients["bob"].post(url, {"approved": True}, format="json").status_code, 404)

        resp = self.clients["bob"].post(self.url, {}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["kind"], "validation_error")

        self.assertEqual(Review.objects.count(), 1)

    def test_pending_reviews(self):
        url = reverse("pending-reviews")

        resp = self.clients["bob"].get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([s["id"] for s in resp.data], [self.submission.id])

        self.assertEqual(self.clients["alice"].get(url).data, [])

        self.clients["bob"].post(self.url, {"approved": True}, format="json")
        self.assertEqual(self.clients["bob"].get(url).data, [])
