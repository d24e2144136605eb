# ux/views/calendar.py

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from activities.datetime_utils import parse_day, parse_year_month
from core.permissions import get_group
from ux.services.calendar import daily_status, day_detail


class DailyStatusView(APIView):
    """
    GET /api/calendar/groups/<group_id>/daily-status/?year=2026&month=10
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id):
        year, month = parse_year_month(
            request.query_params.get("year"),
            request.query_params.get("month"),
        )
        group = get_group(group_id)

        return Response(daily_status(request.user, group, year, month))


class DayDetailView(APIView):
    """
    GET /api/calendar/groups/<group_id>/day/<YYYY-MM-DD>/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id, date):
        day = parse_day(date)
        group = get_group(group_id)

        return Response(day_detail(request.user, group, day))
