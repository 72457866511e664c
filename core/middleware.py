# core/middleware.py
import logging

logger = logging.getLogger("hub.requests")


class RequestLoggingMiddleware:
    """
    Log method, path, status and client IP for every API request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if request.path.startswith("/api/"):
            logger.info(
                f"{request.method} {request.path} -> {response.status_code} "
                f"ip={client_ip(request)}"
            )

        return response


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")
