from django.urls import path
from ux.views.calendar import DailyStatusView, DayDetailView

urlpatterns = [
    path(
        "groups/<int:group_id>/daily-status/",
        DailyStatusView.as_view(),
        name="calendar-daily-status",
    ),
    path(
        "groups/<int:group_id>/day/<str:date>/",
        DayDetailView.as_view(),
        name="calendar-day-detail",
    ),
]
