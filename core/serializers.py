from rest_framework import serializers


def validate_records(serializer_class, value, *, many=True):
    """
    Validate a JSON sub-record (or list of them) against a plain
    Serializer and hand back plain dicts ready for a JSONField.

    Multipart bodies carry these as JSON strings; DRF's JSONField already
    decodes them, so `value` is a native list/dict here.
    """
    if many and not isinstance(value, list):
        raise serializers.ValidationError("Expected a list.")
    if not many and not isinstance(value, dict):
        raise serializers.ValidationError("Expected an object.")

    serializer = serializer_class(data=value, many=many)
    if not serializer.is_valid():
        raise serializers.ValidationError(serializer.errors)

    if many:
        return [_plain(item) for item in serializer.validated_data]
    return _plain(serializer.validated_data)


def _plain(data):
    if isinstance(data, dict):
        return {key: _plain(value) for key, value in data.items() if value is not None}
    if isinstance(data, list):
        return [_plain(item) for item in data]
    return data


def validate_string_list(value, *, max_items=50):
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise serializers.ValidationError("Expected a list of strings.")
    if len(value) > max_items:
        raise serializers.ValidationError(f"At most {max_items} items allowed.")
    return value
