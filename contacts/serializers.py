from rest_framework import serializers

from core.sanitizers import sanitize_text, sanitize_title
from users.serializers import UserSummarySerializer
from .models import Contact


class ContactSubmitSerializer(serializers.ModelSerializer):
    """Public contact form."""

    class Meta:
        model = Contact
        fields = ["name", "email", "phone", "subject", "message", "category"]

    def validate_name(self, value):
        value = sanitize_title(value)
        if len(value) < 2:
            raise serializers.ValidationError("Name must be at least 2 characters")
        return value

    def validate_phone(self, value):
        return sanitize_text(value, max_length=30)

    def validate_subject(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("Subject is required")
        return value

    def validate_message(self, value):
        value = sanitize_text(value, max_length=5000)
        if len(value) < 10:
            raise serializers.ValidationError("Message must be at least 10 characters")
        return value


class ContactResponseSerializer(serializers.Serializer):
    message = serializers.CharField(
        max_length=5000,
        error_messages={
            "required": "Response message is required",
            "blank": "Response message is required",
        },
    )

    def validate_message(self, value):
        return sanitize_text(value)


class ContactSerializer(serializers.ModelSerializer):
    response = serializers.SerializerMethodField()
    ipAddress = serializers.CharField(source="ip_address", read_only=True)
    userAgent = serializers.CharField(source="user_agent", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Contact
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "subject",
            "message",
            "category",
            "status",
            "priority",
            "response",
            "ipAddress",
            "userAgent",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_response(self, obj):
        if not obj.has_response:
            return None
        return {
            "message": obj.response_message,
            "respondedBy": UserSummarySerializer(obj.responded_by).data if obj.responded_by else None,
            "respondedAt": serializers.DateTimeField().to_representation(obj.responded_at)
            if obj.responded_at else None,
        }


class ContactStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Contact.STATUS_CHOICES,
        required=False,
        error_messages={"invalid_choice": "Invalid status"},
    )
    priority = serializers.ChoiceField(
        choices=Contact.PRIORITY_CHOICES,
        required=False,
        error_messages={"invalid_choice": "Invalid priority"},
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide a status or a priority")
        return attrs
