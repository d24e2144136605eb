from django.conf import settings
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Activity, Review, Submission


class ActivitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Activity
        fields = [
            'id',
            'group',
            'title',
            'description',
            'points',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ActivityWriteSerializer(serializers.Serializer):
    # Business validation (required title, non-negative points) lives in ActivityService
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    points = serializers.IntegerField(required=False, allow_null=True)


class ActivitySummarySerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(source='group.name', read_only=True)

    class Meta:
        model = Activity
        fields = ['id', 'title', 'points', 'group', 'group_name']
        read_only_fields = fields


class ProofSerializer(serializers.Serializer):
    """An attached proof blob, typically a base64 data URL from the client."""
    name = serializers.CharField(max_length=255)
    type = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    size = serializers.IntegerField(min_value=0, required=False, default=0)
    content = serializers.CharField(trim_whitespace=False)

    def validate_content(self, value):
        if len(value) > settings.LYFEZ_MAX_PROOF_BYTES:
            raise serializers.ValidationError("Proof is too large")
        return value


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = UserSummarySerializer(read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'submission', 'reviewer', 'approved', 'comment', 'created_at']
        read_only_fields = fields


class SubmissionSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    activity = ActivitySummarySerializer(read_only=True)
    reviews = ReviewSerializer(many=True, read_only=True)
    approvals = serializers.SerializerMethodField()
    rejections = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = [
            'id',
            'activity',
            'user',
            'submission_date',
            'description',
            'proofs',
            'tagged_users',
            'status',
            'approvals',
            'rejections',
            'reviews',
            'created_at',
        ]
        read_only_fields = fields

    def get_approvals(self, obj) -> int:
        return sum(1 for review in obj.reviews.all() if review.approved)

    def get_rejections(self, obj) -> int:
        return sum(1 for review in obj.reviews.all() if not review.approved)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # Rows written before JSON columns may carry null
        data['proofs'] = data.get('proofs') or []
        data['tagged_users'] = data.get('tagged_users') or []
        return data


class SubmissionCreateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False, allow_blank=True, default="")
    proofs = ProofSerializer(many=True, required=False, default=list)
    tagged_users = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        default=list,
    )


class ReviewCreateSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
