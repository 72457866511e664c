# authx/tests/test_auth.py
from django.core.files.storage import default_storage
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from core.tests.helpers import TempMediaMixin, image_upload, make_user


class LoginTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user(email="editor@example.com", password="Sup3r-secret!")

    def test_login_returns_tokens_and_user(self):
        r = self.client.post(
            reverse("login"),
            {"email": "editor@example.com", "password": "Sup3r-secret!"},
            format="json",
        )

        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(r.data["message"], "Login successful")
        self.assertIn("access", r.data["data"]["tokens"])
        self.assertIn("refresh", r.data["data"]["tokens"])
        self.assertEqual(r.data["data"]["user"]["email"], "editor@example.com")
        self.assertIsNotNone(r.data["data"]["user"]["lastLogin"])

        access = r.data["data"]["tokens"]["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        me = self.client.get(reverse("me"))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["data"]["id"], self.user.pk)
        self.assertEqual(me.data["data"]["role"], "editor")

    def test_wrong_password(self):
        r = self.client.post(
            reverse("login"), {"email": "editor@example.com", "password": "nope"}, format="json"
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "Invalid credentials")

    def test_unknown_email(self):
        r = self.client.post(
            reverse("login"), {"email": "ghost@example.com", "password": "x"}, format="json"
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "Invalid credentials")

    def test_deactivated_account(self):
        self.user.is_active = False
        self.user.save()

        r = self.client.post(
            reverse("login"),
            {"email": "editor@example.com", "password": "Sup3r-secret!"},
            format="json",
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "Account is deactivated")

    def test_me_requires_token(self):
        r = self.client.get(reverse("me"))
        self.assertEqual(r.status_code, 401)
        self.assertFalse(r.data["success"])


class RegisterTest(TestCase):
    def setUp(self):
        self.admin = make_user(email="admin@example.com", role="admin")
        self.client = APIClient()
        self.client.force_authenticate(self.admin)
        self.payload = {"name": "New Editor", "email": "New@Example.com", "password": "Sup3r-secret!", "role": "editor"}

    def test_admin_registers_staff(self):
        r = self.client.post(reverse("register"), self.payload, format="json")

        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["data"]["user"]["email"], "new@example.com")
        self.assertEqual(r.data["data"]["user"]["role"], "editor")
        self.assertIn("access", r.data["data"]["tokens"])

    def test_duplicate_email(self):
        self.client.post(reverse("register"), self.payload, format="json")
        r = self.client.post(reverse("register"), self.payload, format="json")

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "email: User with this email already exists")

    def test_editor_cannot_register(self):
        editor = make_user(email="editor@example.com")
        client = APIClient()
        client.force_authenticate(editor)

        r = client.post(reverse("register"), self.payload, format="json")
        self.assertEqual(r.status_code, 403)


class ProfileTest(TempMediaMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.user = make_user(email="editor@example.com", password="Sup3r-secret!")
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_change_password(self):
        r = self.client.put(
            reverse("change-password"),
            {"currentPassword": "Sup3r-secret!", "newPassword": "Another-Str0ng-one"},
            format="json",
        )

        self.assertEqual(r.status_code, 200, r.data)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Another-Str0ng-one"))

    def test_change_password_checks_current(self):
        r = self.client.put(
            reverse("change-password"),
            {"currentPassword": "wrong", "newPassword": "Another-Str0ng-one"},
            format="json",
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "currentPassword: Current password is incorrect")

    def test_profile_image_is_stored_under_users(self):
        with self.captureOnCommitCallbacks(execute=True):
            r = self.client.put(
                reverse("me"),
                {"name": "Renamed", "profileImage": image_upload("me.png")},
                format="multipart",
            )

        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(r.data["data"]["name"], "Renamed")
        self.assertTrue(r.data["data"]["profileImage"].startswith("/uploads/users/"))

        self.user.refresh_from_db()
        first = self.user.profile_image
        self.assertTrue(default_storage.exists(first))

        with self.captureOnCommitCallbacks(execute=True):
            self.client.put(reverse("me"), {"profileImage": image_upload("me2.png")}, format="multipart")

        self.user.refresh_from_db()
        self.assertFalse(default_storage.exists(first))
        self.assertTrue(default_storage.exists(self.user.profile_image))
