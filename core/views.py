import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import ValidationError
from .models import Group, Membership
from .permissions import get_group, require_membership
from .serializers import (
    AddMemberSerializer,
    GroupCreateSerializer,
    GroupDetailSerializer,
    GroupSerializer,
    MemberPointsSerializer,
    MembershipSerializer,
)
from .services import GroupService


# -----------------------------
# GROUPS
# -----------------------------
class GroupListCreateView(APIView):
    """
    GET: Groups the current user belongs to, with their members.
    POST: Create a group; the creator becomes its admin.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        groups = (
            Group.objects
            .filter(memberships__user=request.user)
            .prefetch_related("memberships__user")
            .distinct()
        )
        serializer = GroupSerializer(groups, many=True)
        return Response(serializer.data)

    def post(self, request):
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = GroupService.create_group(request.user, serializer.validated_data.get("name"))
        return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)


class GroupDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id):
        group = get_group(group_id)
        require_membership(request.user, group)

        serializer = GroupDetailSerializer(group)
        return Response(serializer.data)


# -----------------------------
# MEMBERS
# -----------------------------
class GroupMemberListView(APIView):
    """
    GET: Members of a group (members only).
    POST: Add a registered user by email (admins only).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id):
        group = get_group(group_id)
        require_membership(request.user, group)

        memberships = (
            Membership.objects.filter(group=group)
            .select_related("user")
            .order_by("joined_at")
        )
        serializer = MembershipSerializer(memberships, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    def post(self, request, group_id):
        group = get_group(group_id)

        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = GroupService.add_member(group, request.user, serializer.validated_data.get("email"))
        return Response(MembershipSerializer(membership).data, status=status.HTTP_201_CREATED)


class GroupMemberDetailView(APIView):
    """
    DELETE: Remove a member (admins, or the member leaving). Never the last admin.
    """
    permission_classes = [IsAuthenticated]

    def delete(self, request, group_id, membership_id):
        group = get_group(group_id)
        GroupService.remove_member(group, request.user, membership_id)
        return Response({"message": "Member removed"}, status=status.HTTP_200_OK)


class GroupMemberPointsView(APIView):
    """
    PUT: Overwrite a member's point balance (admins only).
    """
    permission_classes = [IsAuthenticated]

    def put(self, request, group_id, user_id):
        group = get_group(group_id)

        serializer = MemberPointsSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Points must be a whole number")

        membership = GroupService.set_member_points(
            group, request.user, user_id, serializer.validated_data["points"]
        )
        return Response(
            {"message": "Points updated", "membership": MembershipSerializer(membership).data},
            status=status.HTTP_200_OK,
        )


class HealthCheckView(APIView):
    """
    Lightweight health endpoint for uptime checks.
    - Checks DB connectivity
    - Returns env and simple latency
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint

    def get(self, request, *args, **kwargs):
        start = time.time()

        db_ok = True
        try:
            connections["default"].cursor()
        except OperationalError:
            db_ok = False

        duration_ms = int((time.time() - start) * 1000)

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": duration_ms,
            }
        )
