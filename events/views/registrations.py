from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.responses import api_success
from events.registration import register_attendee


class RegisterEventView(APIView):
    """
    Anonymous attendance registration. The count is the only state kept;
    every gate failure surfaces as a 400 through the exception handler.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, pk):
        result = register_attendee(pk)
        return api_success("Successfully registered for event", result.as_dict())

    put = post
