# events/tests/test_event_api.py
import json
import os
from datetime import timedelta

from django.core.files.storage import default_storage
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from core.tests.helpers import TempMediaMixin, image_upload, make_event, make_user
from events.models import Event


class EventCrudTest(TempMediaMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.editor = make_user()
        self.client_staff = APIClient()
        self.client_staff.force_authenticate(self.editor)
        self.client_public = APIClient()

    def _payload(self, **overrides):
        data = {
            "title": "Git Workshop",
            "description": "Hands-on version control",
            "date": (timezone.now() + timedelta(days=10)).isoformat(),
            "time": "10:00",
            "location": "Lab 1",
            "type": "workshop",
            "maxAttendees": "30",
            "tags": json.dumps(["git", "vcs"]),
            "organizers": json.dumps([{"name": "Asha", "email": "asha@example.com"}]),
            "image": image_upload(),
        }
        data.update(overrides)
        return data

    def _event_files(self):
        directory = os.path.join(self.temp_media, "events")
        return os.listdir(directory) if os.path.isdir(directory) else []

    def test_create_event(self):
        r = self.client_staff.post(reverse("event-list"), self._payload(), format="multipart")

        self.assertEqual(r.status_code, 201, r.data)
        data = r.data["data"]
        self.assertTrue(r.data["success"])
        self.assertTrue(data["slug"].startswith("git-workshop-"))
        self.assertEqual(data["status"], "upcoming")
        self.assertEqual(data["category"], "technical")
        self.assertEqual(data["currentAttendees"], 0)
        self.assertEqual(data["spotsLeft"], 30)
        self.assertEqual(data["tags"], ["git", "vcs"])
        self.assertEqual(data["organizers"], [{"name": "Asha", "email": "asha@example.com"}])
        self.assertEqual(data["author"]["id"], self.editor.pk)
        self.assertTrue(data["image"].startswith("/uploads/events/"))

        event = Event.objects.get(pk=data["id"])
        self.assertTrue(default_storage.exists(event.image))

    def test_create_requires_image(self):
        payload = self._payload()
        payload.pop("image")
        r = self.client_staff.post(reverse("event-list"), payload, format="multipart")

        self.assertEqual(r.status_code, 400)
        self.assertEqual(Event.objects.count(), 0)

    def test_rejects_non_image_upload(self):
        payload = self._payload(image=image_upload("notes.txt", b"hello", "text/plain"))
        r = self.client_staff.post(reverse("event-list"), payload, format="multipart")

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "invalid_file")
        self.assertEqual(self._event_files(), [])

    def test_rejects_oversized_image(self):
        with self.settings(MAX_IMAGE_UPLOAD_SIZE=10):
            r = self.client_staff.post(reverse("event-list"), self._payload(), format="multipart")

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "file_too_large")
        self.assertEqual(self._event_files(), [])

    def test_failed_create_leaves_no_orphan_file(self):
        r = self.client_staff.post(
            reverse("event-list"), self._payload(maxAttendees="0"), format="multipart"
        )

        self.assertEqual(r.status_code, 400)
        self.assertIn("maxAttendees", r.data["errors"])
        self.assertEqual(Event.objects.count(), 0)
        self.assertEqual(self._event_files(), [])

    def test_invalid_registration_link(self):
        r = self.client_staff.post(
            reverse("event-list"),
            self._payload(registrationLink="ftp://example.com/form"),
            format="multipart",
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("registrationLink", r.data["errors"])

    def test_anonymous_cannot_create(self):
        r = self.client_public.post(reverse("event-list"), self._payload(), format="multipart")
        self.assertEqual(r.status_code, 401)
        self.assertFalse(r.data["success"])

    def test_detail_and_slug_lookup(self):
        event = make_event(self.editor, title="Design Sprint")

        r = self.client_public.get(reverse("event-detail", args=[event.pk]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"]["title"], "Design Sprint")

        r = self.client_public.get(reverse("event-by-slug", args=[event.slug]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"]["id"], event.pk)

    def test_missing_event_is_404(self):
        r = self.client_public.get(reverse("event-detail", args=[424242]))
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data["message"], "Event not found")

    def test_update_title_changes_slug_only(self):
        event = make_event(self.editor, title="Old Title")
        millis = event.slug.rsplit("-", 1)[1]

        r = self.client_staff.patch(
            reverse("event-detail", args=[event.pk]), {"title": "New Title"}, format="json"
        )

        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(r.data["data"]["slug"], f"new-title-{millis}")
        self.assertEqual(r.data["data"]["location"], "Main Hall")

    def test_update_rejects_attendees_over_capacity(self):
        event = make_event(self.editor, max_attendees=5)
        r = self.client_staff.put(
            reverse("event-detail", args=[event.pk]), {"currentAttendees": 6}, format="json"
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("currentAttendees", r.data["errors"])

    def test_replacing_image_deletes_old_file_after_save(self):
        created = self.client_staff.post(reverse("event-list"), self._payload(), format="multipart")
        event = Event.objects.get(pk=created.data["data"]["id"])
        old_image = event.image

        with self.captureOnCommitCallbacks(execute=True):
            r = self.client_staff.patch(
                reverse("event-detail", args=[event.pk]),
                {"image": image_upload("new-cover.png")},
                format="multipart",
            )

        self.assertEqual(r.status_code, 200, r.data)
        event.refresh_from_db()
        self.assertNotEqual(event.image, old_image)
        self.assertTrue(default_storage.exists(event.image))
        self.assertFalse(default_storage.exists(old_image))

    def test_failed_update_keeps_old_image_and_drops_new(self):
        created = self.client_staff.post(reverse("event-list"), self._payload(), format="multipart")
        event = Event.objects.get(pk=created.data["data"]["id"])

        with self.captureOnCommitCallbacks(execute=True):
            r = self.client_staff.patch(
                reverse("event-detail", args=[event.pk]),
                {"image": image_upload("new-cover.png"), "type": "party"},
                format="multipart",
            )

        self.assertEqual(r.status_code, 400)
        self.assertTrue(default_storage.exists(event.image))
        self.assertEqual(self._event_files(), [os.path.basename(event.image)])

    def test_delete_removes_image(self):
        created = self.client_staff.post(reverse("event-list"), self._payload(), format="multipart")
        event = Event.objects.get(pk=created.data["data"]["id"])
        self.assertTrue(default_storage.exists(event.image))

        with self.captureOnCommitCallbacks(execute=True):
            r = self.client_staff.delete(reverse("event-detail", args=[event.pk]))

        self.assertEqual(r.status_code, 200)
        self.assertFalse(Event.objects.filter(pk=event.pk).exists())
        self.assertFalse(default_storage.exists(event.image))


class EventListTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.author = make_user()
        self.other = make_user(email="other@example.com")
        self.base = timezone.now() + timedelta(days=1)

    def test_pagination_envelope(self):
        for i in range(12):
            make_event(self.author, title=f"Event {i}", date=self.base + timedelta(days=i))

        r = self.client.get(reverse("event-list"), {"page": 2})

        self.assertEqual(r.status_code, 200)
        self.assertEqual([e["title"] for e in r.data["data"]], ["Event 10", "Event 11"])
        self.assertEqual(
            r.data["pagination"],
            {"currentPage": 2, "totalPages": 2, "totalCount": 12, "hasNext": False, "hasPrev": True},
        )

    def test_exact_filters(self):
        make_event(self.author, title="Hack Night", event_type=Event.TYPE_HACKATHON, featured=True)
        make_event(self.other, title="Chess Meetup", event_type=Event.TYPE_MEETUP, category=Event.CATEGORY_SOCIAL)

        r = self.client.get(reverse("event-list"), {"type": "hackathon"})
        self.assertEqual([e["title"] for e in r.data["data"]], ["Hack Night"])

        r = self.client.get(reverse("event-list"), {"featured": "true"})
        self.assertEqual([e["title"] for e in r.data["data"]], ["Hack Night"])

        r = self.client.get(reverse("event-list"), {"category": "social"})
        self.assertEqual([e["title"] for e in r.data["data"]], ["Chess Meetup"])

        r = self.client.get(reverse("event-list"), {"author": self.other.pk})
        self.assertEqual([e["title"] for e in r.data["data"]], ["Chess Meetup"])

    def test_malformed_filters_are_400(self):
        for params in ({"author": "abc"}, {"author": "0"}, {"type": "party"}, {"status": "bogus"}):
            r = self.client.get(reverse("event-list"), params)
            self.assertEqual(r.status_code, 400, params)
            self.assertFalse(r.data["success"])
            self.assertIn(next(iter(params)), r.data["errors"])

    def test_search_covers_location_and_tags(self):
        make_event(self.author, title="Robotics", location="Innovation Lab")
        make_event(self.author, title="Poetry Slam", tags=["Literature", "open-mic"])
        make_event(self.author, title="Football")

        r = self.client.get(reverse("event-list"), {"search": "innovation"})
        self.assertEqual([e["title"] for e in r.data["data"]], ["Robotics"])

        r = self.client.get(reverse("event-list"), {"search": "open-mic"})
        self.assertEqual([e["title"] for e in r.data["data"]], ["Poetry Slam"])

    def test_date_range_is_inclusive(self):
        day = (self.base + timedelta(days=3)).replace(hour=18, minute=0, second=0, microsecond=0)
        make_event(self.author, title="Inside", date=day)
        make_event(self.author, title="Outside", date=day + timedelta(days=2))

        r = self.client.get(
            reverse("event-list"),
            {"dateFrom": day.date().isoformat(), "dateTo": day.date().isoformat()},
        )
        self.assertEqual([e["title"] for e in r.data["data"]], ["Inside"])

    def test_invalid_page_is_400(self):
        r = self.client.get(reverse("event-list"), {"page": "abc"})
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.data["success"])

    def test_limit_is_capped(self):
        make_event(self.author, title="Only")
        r = self.client.get(reverse("event-list"), {"limit": 1000})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["pagination"]["totalPages"], 1)
