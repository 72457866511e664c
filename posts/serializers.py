from rest_framework import serializers

from core.assets import asset_url
from core.sanitizers import (
    sanitize_content,
    sanitize_description,
    sanitize_tags,
    sanitize_text,
    sanitize_title,
    validate_url,
    ValidationError as SanitizationError,
)
from users.serializers import UserSummarySerializer
from .models import Post


class PostSerializer(serializers.ModelSerializer):
    """
    camelCase representation of a Post. `image` is the public URL of the
    stored file; uploads are handled by the view.
    """
    author = UserSummarySerializer(read_only=True)
    image = serializers.SerializerMethodField()
    imageAlt = serializers.CharField(source="image_alt", max_length=255, required=False, allow_blank=True)
    tags = serializers.JSONField(required=False)
    registrationLink = serializers.CharField(
        source="registration_link", max_length=2048, required=False, allow_blank=True
    )
    publishedAt = serializers.DateTimeField(source="published_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "description",
            "content",
            "image",
            "imageAlt",
            "category",
            "tags",
            "status",
            "featured",
            "views",
            "likes",
            "registrationLink",
            "author",
            "publishedAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "views", "likes", "author"]

    def get_image(self, obj):
        return asset_url(obj.image)

    def validate_title(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate_description(self, value):
        value = sanitize_description(value)
        if not value:
            raise serializers.ValidationError("Description is required")
        return value

    def validate_content(self, value):
        return sanitize_content(value)

    def validate_category(self, value):
        return sanitize_text(value, max_length=50).lower() or "general"

    def validate_tags(self, value):
        try:
            return sanitize_tags(value)
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

    def validate_registrationLink(self, value):
        try:
            return validate_url(value) or ""
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

    def create(self, validated_data):
        # Alt text defaults to the title
        if not validated_data.get("image_alt"):
            validated_data["image_alt"] = validated_data.get("title", "")
        return super().create(validated_data)
