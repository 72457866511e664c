import shutil
import tempfile
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.utils import timezone

User = get_user_model()

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def make_user(email="editor@example.com", role="editor", password="pass12345", **extra):
    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        role=role,
        name=extra.pop("name", email.split("@")[0]),
        **extra,
    )


def image_upload(name="cover.png", content=PNG_BYTES, content_type="image/png"):
    return SimpleUploadedFile(name, content, content_type=content_type)


def make_event(author, **overrides):
    from events.models import Event

    fields = {
        "title": "Intro to Git",
        "description": "Version control basics",
        "image": "events/cover.png",
        "date": timezone.now() + timedelta(days=7),
        "time": "10:00",
        "location": "Main Hall",
        "event_type": Event.TYPE_WORKSHOP,
        "max_attendees": 2,
    }
    fields.update(overrides)
    return Event.objects.create(author=author, **fields)


class TempMediaMixin:
    """
    Points MEDIA_ROOT at a throwaway directory for the duration of each test.
    """

    def setUp(self):
        super().setUp()
        self.temp_media = tempfile.mkdtemp(prefix="test_media_")
        self._media_override = override_settings(MEDIA_ROOT=self.temp_media)
        self._media_override.enable()

    def tearDown(self):
        self._media_override.disable()
        shutil.rmtree(self.temp_media, ignore_errors=True)
        super().tearDown()
