from rest_framework import viewsets

from core.permissions import IsAdminRole
from .models import User
from .serializers import UserSerializer


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin-only listing of staff accounts.
    """
    permission_classes = [IsAdminRole]
    serializer_class = UserSerializer
    queryset = User.objects.all().order_by("-date_joined")
