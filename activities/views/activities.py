from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import get_group, require_membership
from activities.serializers import ActivitySerializer, ActivityWriteSerializer
from activities.services import ActivityService, get_activity, list_activities


class GroupActivityListCreateView(APIView):
    """
    GET  /api/activities/groups/<group_id>/   activities of a group (members)
    POST /api/activities/groups/<group_id>/   create one (admins)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id):
        group = get_group(group_id)
        require_membership(request.user, group)

        serializer = ActivitySerializer(list_activities(group), many=True)
        return Response(serializer.data)

    def post(self, request, group_id):
        group = get_group(group_id)

        serializer = ActivityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        activity = ActivityService.create(
            group,
            request.user,
            title=data.get("title"),
            description=data.get("description") or "",
            points=data.get("points"),
        )
        return Response(ActivitySerializer(activity).data, status=status.HTTP_201_CREATED)


class ActivityDetailView(APIView):
    """
    GET    activity detail (members)
    PATCH  partial update (admins); PUT behaves the same
    DELETE remove the activity and take back its awarded points (admins)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, activity_id):
        activity = get_activity(activity_id)
        require_membership(request.user, activity.group)
        return Response(ActivitySerializer(activity).data)

    def patch(self, request, activity_id):
        activity = get_activity(activity_id)

        serializer = ActivityWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        activity = ActivityService.update(activity, request.user, **serializer.validated_data)
        return Response(ActivitySerializer(activity).data)

    def put(self, request, activity_id):
        return self.patch(request, activity_id)

    def delete(self, request, activity_id):
        activity = get_activity(activity_id)
        reverted = ActivityService.delete(activity, request.user)
        return Response({"message": "Activity deleted", "points_reverted": reverted})
