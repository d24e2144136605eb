import logging

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFoundError
from core.permissions import require_membership
from activities import submissions as store
from activities.models import Submission
from activities.serializers import SubmissionCreateSerializer, SubmissionSerializer
from activities.services import get_activity

logger = logging.getLogger("lyfez.activities")

User = get_user_model()


def with_reviews(qs):
    return qs.prefetch_related("reviews__reviewer")


class ActivitySubmissionListCreateView(APIView):
    """
    GET  /api/activities/<id>/submissions/  every submission of the activity
    POST /api/activities/<id>/submissions/  submit today's attempt
    """
    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        if self.request.method == "POST":
            self.throttle_scope = "submission-create"
        return super().get_throttles()

    def get(self, request, activity_id):
        activity = get_activity(activity_id)
        require_membership(request.user, activity.group)

        submissions = with_reviews(store.list_submissions(activity=activity))
        serializer = SubmissionSerializer(submissions, many=True)
        return Response(serializer.data)

    def post(self, request, activity_id):
        activity = get_activity(activity_id)

        serializer = SubmissionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        submission = store.create_submission(
            activity,
            request.user,
            description=data.get("description", ""),
            proofs=data.get("proofs", []),
            tagged_users=data.get("tagged_users", []),
        )
        submission = with_reviews(Submission.objects.select_related("activity__group", "user")).get(pk=submission.pk)
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)


class UserActivitySubmissionView(APIView):
    """
    GET /api/activities/<id>/submissions/user/<user_id>/
    Latest submission of that user for the activity, any day, or null.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, activity_id, user_id):
        activity = get_activity(activity_id)
        require_membership(request.user, activity.group)

        try:
            submitter = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFoundError("User not found")

        submission = store.get_submission(activity, submitter)
        if submission is None:
            return Response(None)

        submission = with_reviews(Submission.objects.select_related("activity__group", "user")).get(pk=submission.pk)
        return Response(SubmissionSerializer(submission).data)
