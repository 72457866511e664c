from django.conf import settings
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework import status
import logging

logger = logging.getLogger("hub.errors")


class InvalidFile(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Only image files are allowed."
    default_code = "invalid_file"


class FileTooLarge(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "File size too large. Maximum size is 5MB."
    default_code = "file_too_large"


class StorageError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Could not store the uploaded file."
    default_code = "storage_error"


def _error_message(data, fallback):
    """
    Pick a human readable message out of DRF error data.
    """
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for field, value in data.items():
            first = value[0] if isinstance(value, list) and value else value
            if isinstance(first, (dict, list)):
                return fallback
            if field == api_settings.NON_FIELD_ERRORS_KEY:
                return str(first)
            return f"{field}: {first}"
    if isinstance(data, list) and data:
        return str(data[0])
    return fallback


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format:
    {"success": false, "message": "...", "errors": {...}}

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        data = response.data
        errors = data if isinstance(data, dict) else {"detail": data}
        body = {
            "success": False,
            "message": _error_message(data, "Request failed."),
            "errors": errors,
        }
        code = getattr(exc, "default_code", None)
        if isinstance(data, dict) and "detail" in data and code:
            body["code"] = getattr(data["detail"], "code", code)
        return Response(body, status=response.status_code, headers=_copy_headers(response))

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    body = {
        "success": False,
        "message": "Internal server error.",
        "errors": {"detail": "Internal server error."},
    }
    if settings.DEBUG:
        body["errors"]["debug"] = str(exc)

    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _copy_headers(response):
    # Keep WWW-Authenticate / Retry-After set by DRF
    return {
        key: value
        for key, value in response.items()
        if key in ("WWW-Authenticate", "Retry-After")
    }
