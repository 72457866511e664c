import logging

from django.contrib.auth.models import update_last_login
from django.db import transaction
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from core.assets import AssetKind, delete_asset_on_commit, store_optional_image
from core.permissions import IsAdminRole
from core.responses import api_created, api_success
from users.serializers import UserSerializer
from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
)

logger = logging.getLogger("hub.auth")


def token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class RegisterView(APIView):
    """
    Staff accounts are created by an existing admin.
    """
    permission_classes = [IsAdminRole]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info(f"User {user.pk} ({user.email}) registered by {request.user.pk}")
        return api_created(
            "User registered successfully",
            {"tokens": token_pair(user), "user": UserSerializer(user).data},
        )


class LoginView(APIView):
    # allow unauthenticated
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data["user"]
        update_last_login(None, user)

        logger.info(f"User {user.pk} logged in")
        return api_success(
            "Login successful",
            {"tokens": token_pair(user), "user": UserSerializer(user).data},
        )


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_success("User retrieved successfully", UserSerializer(request.user).data)

    def put(self, request):
        user = request.user
        old_image = user.profile_image

        with store_optional_image(request.FILES.get("profileImage"), AssetKind.USERS) as pending:
            serializer = ProfileUpdateSerializer(user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)

            changes = {"profile_image": pending.name} if pending.name else {}
            with transaction.atomic():
                user = serializer.save(**changes)
            pending.commit()

        if pending.name and old_image != pending.name:
            delete_asset_on_commit(old_image)

        return api_success("Profile updated successfully", UserSerializer(user).data)

    patch = put


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data["newPassword"])
        user.save(update_fields=["password"])

        logger.info(f"User {user.pk} changed password")
        return api_success("Password changed successfully")

    post = put
