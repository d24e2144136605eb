from .activities import GroupActivityListCreateView, ActivityDetailView
from .submissions import ActivitySubmissionListCreateView, UserActivitySubmissionView
from .reviews import SubmissionReviewListCreateView, PendingReviewsView
