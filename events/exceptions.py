from rest_framework import status
from rest_framework.exceptions import APIException


class RegistrationError(APIException):
    """Base class for the registration gates. All map to 400."""
    status_code = status.HTTP_400_BAD_REQUEST


class RegistrationClosed(RegistrationError):
    default_detail = "Registration is not available for this event"
    default_code = "registration_closed"


class EventFull(RegistrationError):
    default_detail = "Event is full"
    default_code = "event_full"


class DeadlinePassed(RegistrationError):
    default_detail = "Registration deadline has passed"
    default_code = "deadline_passed"
