from rest_framework.response import Response
from rest_framework import status


def api_success(message: str, data=None, status_code=status.HTTP_200_OK, **extra):
    """
    Standard success envelope shared by every app:
    {"success": true, "message": "...", "data": ..., **extra}

    `data` is omitted when None, extra keys (pagination, statusCounts, ...)
    are merged at the top level.
    """
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return Response(body, status=status_code)


def api_created(message: str, data=None):
    return api_success(message, data, status_code=status.HTTP_201_CREATED)


def api_error(message: str, status_code=status.HTTP_400_BAD_REQUEST, errors=None):
    """
    Small helper for errors returned directly from a view.
    Always returns: {"success": false, "message": "<message>"} with the given status code.
    """
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return Response(body, status=status_code)
