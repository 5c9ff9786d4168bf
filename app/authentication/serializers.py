"""
Serializers for authentication endpoints.
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Read-only view of the current user."""

    class Meta:
        model = User
        fields = ["id", "email", "name", "role"]
        read_only_fields = fields
