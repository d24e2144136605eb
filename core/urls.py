from django.urls import path
from .views import (
    GroupListCreateView,
    GroupDetailView,
    GroupMemberListView,
    GroupMemberDetailView,
    GroupMemberPointsView,
)


urlpatterns = [
    path("", GroupListCreateView.as_view(), name="group-list-create"),
    path("<int:group_id>/", GroupDetailView.as_view(), name="group-detail"),
    path(
        "<int:group_id>/members/",
        GroupMemberListView.as_view(),
        name="group-member-list",
    ),
    path(
        "<int:group_id>/members/<int:membership_id>/",
        GroupMemberDetailView.as_view(),
        name="group-member-detail",
    ),
    path(
        "<int:group_id>/members/<int:user_id>/points/",
        GroupMemberPointsView.as_view(),
        name="group-member-points",
    ),
]
