from rest_framework import serializers
from .models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Public projection of a user embedded in group, submission and review payloads."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name']
        read_only_fields = fields
