"""Serializers for validating record input and rendering domain models.

Input serializers enforce the field-level schema (required, non-blank after
trimming, non-empty lists, email shape). Output serializers render domain
models in the JSON shape of the stored documents.
"""

from datetime import date
from typing import Any

from bson import ObjectId
from rest_framework import serializers

from eventhub.domain.errors import ValidationFailedError
from eventhub.domain.value_objects import EMAIL_PATTERN


def _plain(errors: Any) -> Any:
    if isinstance(errors, dict):
        return {str(key): _plain(value) for key, value in errors.items()}
    if isinstance(errors, list):
        return [_plain(item) for item in errors]
    return str(errors)


def validate_input(serializer: serializers.Serializer) -> dict[str, Any]:
    """Return validated data or raise ValidationFailedError with plain messages."""
    if not serializer.is_valid():
        raise ValidationFailedError(_plain(serializer.errors))
    return dict(serializer.validated_data)


class PassthroughCharField(serializers.CharField):
    """CharField that lets already-typed values through untouched."""

    passthrough_types: tuple[type, ...] = ()

    def to_internal_value(self, data):
        if isinstance(data, self.passthrough_types):
            return data
        return super().to_internal_value(data)


class DateInputField(PassthroughCharField):
    passthrough_types = (date,)


class ObjectIdInputField(PassthroughCharField):
    passthrough_types = (ObjectId,)


class EventInputSerializer(serializers.Serializer):
    """Schema for creating or updating an Event."""

    title = serializers.CharField()
    description = serializers.CharField()
    overview = serializers.CharField()
    image = serializers.CharField()
    venue = serializers.CharField()
    location = serializers.CharField()
    date = DateInputField()
    time = serializers.CharField()
    mode = serializers.CharField()
    audience = serializers.CharField()
    agenda = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    organizer = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField(), allow_empty=False)


class BookingInputSerializer(serializers.Serializer):
    """Schema for creating a Booking."""

    eventId = ObjectIdInputField(source="event_id")
    email = serializers.RegexField(
        EMAIL_PATTERN,
        error_messages={"invalid": "Invalid email address"},
    )


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    _id = serializers.CharField(source="id")
    title = serializers.CharField()
    slug = serializers.CharField()
    description = serializers.CharField()
    overview = serializers.CharField()
    image = serializers.CharField()
    venue = serializers.CharField()
    location = serializers.CharField()
    date = serializers.CharField()
    time = serializers.CharField()
    mode = serializers.CharField()
    audience = serializers.CharField()
    agenda = serializers.ListField(child=serializers.CharField())
    organizer = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField())
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    _id = serializers.CharField(source="id")
    eventId = serializers.CharField(source="event_id")
    email = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
