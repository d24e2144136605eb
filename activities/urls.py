from django.urls import path

from .views import (
    GroupActivityListCreateView,
    ActivityDetailView,
    ActivitySubmissionListCreateView,
    UserActivitySubmissionView,
    SubmissionReviewListCreateView,
    PendingReviewsView,
)

urlpatterns = [
    # Specific routes first
    path("reviews/pending/", PendingReviewsView.as_view(), name="pending-reviews"),
    path(
        "submissions/<int:submission_id>/reviews/",
        SubmissionReviewListCreateView.as_view(),
        name="submission-reviews",
    ),
    path(
        "groups/<int:group_id>/",
        GroupActivityListCreateView.as_view(),
        name="group-activities",
    ),
    path(
        "<int:activity_id>/submissions/user/<int:user_id>/",
        UserActivitySubmissionView.as_view(),
        name="user-activity-submission",
    ),
    path(
        "<int:activity_id>/submissions/",
        ActivitySubmissionListCreateView.as_view(),
        name="activity-submissions",
    ),
    path("<int:activity_id>/", ActivityDetailView.as_view(), name="activity-detail"),
]
