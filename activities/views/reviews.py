from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFoundError
from core.permissions import require_membership
from activities import quorum
from activities.models import Review, Submission
from activities.serializers import ReviewCreateSerializer, ReviewSerializer, SubmissionSerializer
from activities.submissions import list_pending_reviews_for_user


class SubmissionReviewListCreateView(APIView):
    """
    GET  /api/activities/submissions/<id>/reviews/  votes so far (members)
    POST /api/activities/submissions/<id>/reviews/  cast a vote
         Body: { "approved": true|false, "comment": "..." }
         Returns the submission with its (possibly new) status and reviews.
    """
    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        if self.request.method == "POST":
            self.throttle_scope = "review-create"
        return super().get_throttles()

    def get(self, request, submission_id):
        submission = Submission.objects.select_related("activity__group").filter(pk=submission_id).first()
        if submission is None:
            raise NotFoundError("Submission not found")
        require_membership(request.user, submission.activity.group)

        reviews = (
            Review.objects.filter(submission=submission)
            .select_related("reviewer")
            .order_by("-created_at")
        )
        return Response(ReviewSerializer(reviews, many=True).data)

    def post(self, request, submission_id):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        quorum.record_review(
            submission_id,
            request.user,
            approved=data["approved"],
            comment=data.get("comment") or "",
        )

        submission = (
            Submission.objects
            .select_related("activity__group", "user")
            .prefetch_related("reviews__reviewer")
            .get(pk=submission_id)
        )
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)


class PendingReviewsView(APIView):
    """
    GET /api/activities/reviews/pending/
    Submissions in my groups still waiting for my vote, oldest first.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        submissions = list_pending_reviews_for_user(request.user).prefetch_related("reviews__reviewer")
        return Response(SubmissionSerializer(submissions, many=True).data)
