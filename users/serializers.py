from rest_framework import serializers

from core.assets import asset_url
from .models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Author/responder reference embedded in posts, events and contacts."""

    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email"]


class UserSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    lastLogin = serializers.DateTimeField(source="last_login", read_only=True)
    profileImage = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "name",
            "email",
            "role",
            "isActive",
            "lastLogin",
            "profileImage",
            "date_joined",
        ]

    def get_profileImage(self, obj):
        return asset_url(obj.profile_image)
