from rest_framework import serializers

from core.assets import asset_url
from core.sanitizers import (
    sanitize_content,
    sanitize_description,
    sanitize_tags,
    sanitize_text,
    sanitize_title,
    validate_price,
    validate_url,
    ValidationError as SanitizationError,
)
from core.serializers import validate_records, validate_string_list
from users.serializers import UserSummarySerializer
from .models import Event


# -----------------------------------------
# SUB-RECORDS (stored as JSON on the event)
# -----------------------------------------
class CoordinatesSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)


class VenueSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zipCode = serializers.CharField(max_length=20, required=False, allow_blank=True)
    coordinates = CoordinatesSerializer(required=False)


class OrganizerSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    role = serializers.CharField(max_length=100, required=False, allow_blank=True)


class SpeakerSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    bio = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    image = serializers.CharField(max_length=1024, required=False, allow_blank=True)
    designation = serializers.CharField(max_length=100, required=False, allow_blank=True)
    company = serializers.CharField(max_length=100, required=False, allow_blank=True)


class AgendaItemSerializer(serializers.Serializer):
    time = serializers.CharField(max_length=32)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    speaker = serializers.CharField(max_length=100, required=False, allow_blank=True)


# -----------------------------------------
# EVENT SERIALIZER
# -----------------------------------------
class EventSerializer(serializers.ModelSerializer):
    """
    Read/write representation of an Event with camelCase keys.

    The image file itself is handled by the view (it arrives as a multipart
    part and is stored before the row is written); here `image` is the
    public URL of the stored file.

    List-valued fields accept either native JSON or a JSON-encoded string,
    since multipart bodies can only carry strings.
    """
    author = UserSummarySerializer(read_only=True)
    image = serializers.SerializerMethodField()
    imageAlt = serializers.CharField(source="image_alt", max_length=255, required=False, allow_blank=True)

    date = serializers.DateTimeField(input_formats=["iso-8601", "%Y-%m-%d"])
    endTime = serializers.CharField(source="end_time", max_length=32, required=False, allow_blank=True)
    venue = serializers.JSONField(required=False)

    type = serializers.ChoiceField(source="event_type", choices=Event.TYPE_CHOICES)
    maxAttendees = serializers.IntegerField(source="max_attendees", min_value=1)
    currentAttendees = serializers.IntegerField(source="current_attendees", min_value=0, required=False)
    registrationLink = serializers.CharField(
        source="registration_link", max_length=2048, required=False, allow_blank=True
    )
    registrationDeadline = serializers.DateTimeField(
        source="registration_deadline",
        required=False,
        allow_null=True,
        input_formats=["iso-8601", "%Y-%m-%d"],
    )

    tags = serializers.JSONField(required=False)
    organizers = serializers.JSONField(required=False)
    speakers = serializers.JSONField(required=False)
    requirements = serializers.JSONField(required=False)
    agenda = serializers.JSONField(required=False)

    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)

    spotsLeft = serializers.IntegerField(source="spots_left", read_only=True)
    isRegistrationOpen = serializers.BooleanField(source="is_registration_open", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "slug",
            "title",
            "description",
            "content",
            "image",
            "imageAlt",
            "date",
            "time",
            "endTime",
            "location",
            "venue",
            "type",
            "category",
            "maxAttendees",
            "currentAttendees",
            "registrationLink",
            "registrationDeadline",
            "status",
            "featured",
            "tags",
            "organizers",
            "speakers",
            "requirements",
            "agenda",
            "price",
            "currency",
            "author",
            "spotsLeft",
            "isRegistrationOpen",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "slug", "author"]

    def get_image(self, obj):
        return asset_url(obj.image)

    # --- text ---
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

    def validate_location(self, value):
        value = sanitize_text(value, max_length=255)
        if not value:
            raise serializers.ValidationError("Location is required")
        return value

    def validate_registrationLink(self, value):
        try:
            return validate_url(value) or ""
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

    def validate_price(self, value):
        try:
            return validate_price(value)
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

    def validate_currency(self, value):
        return sanitize_text(value, max_length=10).upper() or "INR"

    # --- JSON sub-records ---
    def validate_venue(self, value):
        if value in (None, ""):
            return {}
        return validate_records(VenueSerializer, value, many=False)

    def validate_tags(self, value):
        try:
            return sanitize_tags(value)
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

    def validate_requirements(self, value):
        if value is None:
            return []
        value = validate_string_list(value)
        return [item for item in (sanitize_text(v, max_length=500) for v in value) if item]

    def validate_organizers(self, value):
        return validate_records(OrganizerSerializer, value or [])

    def validate_speakers(self, value):
        return validate_records(SpeakerSerializer, value or [])

    def validate_agenda(self, value):
        return validate_records(AgendaItemSerializer, value or [])

    def validate(self, attrs):
        """
        currentAttendees may never exceed maxAttendees, also when only one
        of the two is part of an update.
        """
        maximum = attrs.get("max_attendees")
        current = attrs.get("current_attendees")

        if self.instance is not None:
            if maximum is None:
                maximum = self.instance.max_attendees
            if current is None:
                current = self.instance.current_attendees

        if maximum is not None and current is not None and current > maximum:
            raise serializers.ValidationError(
                {"currentAttendees": "Current attendees cannot exceed max attendees"}
            )

        return attrs
