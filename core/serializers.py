from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Group, Membership


class MembershipSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Membership
        fields = [
            "id",
            "group",
            "user",
            "role",
            "points",
            "joined_at",
        ]
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    memberships = MembershipSerializer(many=True, read_only=True)

    class Meta:
        model = Group
        fields = ["id", "name", "created_by", "created_at", "memberships"]
        read_only_fields = ["id", "created_by", "created_at", "memberships"]


class GroupDetailSerializer(GroupSerializer):
    activities = serializers.SerializerMethodField()

    class Meta(GroupSerializer.Meta):
        fields = GroupSerializer.Meta.fields + ["activities"]

    def get_activities(self, obj):
        # Local import: activities depends on core
        from activities.serializers import ActivitySerializer

        return ActivitySerializer(obj.activities.all(), many=True).data


class GroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)


class AddMemberSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254, required=False, allow_blank=True)


class MemberPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField()
