# posts/tests/test_posts_api.py
import json
from datetime import timedelta

from django.core.files.storage import default_storage
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from core.tests.helpers import TempMediaMixin, image_upload, make_user
from posts.models import Post


def make_post(author, **overrides):
    fields = {
        "title": "Welcome back",
        "description": "Semester kickoff",
        "image": "posts/cover.png",
        "status": Post.STATUS_PUBLISHED,
    }
    fields.update(overrides)
    return Post.objects.create(author=author, **fields)


class PostVisibilityTest(TestCase):
    def setUp(self):
        self.editor = make_user()
        self.client_public = APIClient()
        self.client_staff = APIClient()
        self.client_staff.force_authenticate(self.editor)

    def test_published_read_increments_views_once(self):
        post = make_post(self.editor)

        r = self.client_public.get(reverse("post-detail", args=[post.pk]))

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"]["views"], 1)
        post.refresh_from_db()
        self.assertEqual(post.views, 1)

    def test_draft_is_hidden_without_view_increment(self):
        draft = make_post(self.editor, status=Post.STATUS_DRAFT)

        r = self.client_public.get(reverse("post-detail", args=[draft.pk]))

        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data["message"], "Post not found")
        draft.refresh_from_db()
        self.assertEqual(draft.views, 0)

    def test_staff_sees_draft_without_counting(self):
        draft = make_post(self.editor, status=Post.STATUS_DRAFT)

        r = self.client_staff.get(reverse("post-detail", args=[draft.pk]))

        self.assertEqual(r.status_code, 200)
        draft.refresh_from_db()
        self.assertEqual(draft.views, 0)

    def test_public_list_only_shows_published(self):
        make_post(self.editor, title="Live")
        make_post(self.editor, title="Hidden", status=Post.STATUS_DRAFT)

        r = self.client_public.get(reverse("post-list"), {"status": "draft"})

        self.assertEqual([p["title"] for p in r.data["data"]], ["Live"])

    def test_staff_can_filter_drafts(self):
        make_post(self.editor, title="Live")
        make_post(self.editor, title="Hidden", status=Post.STATUS_DRAFT)

        r = self.client_staff.get(reverse("post-list"), {"status": "draft"})
        self.assertEqual([p["title"] for p in r.data["data"]], ["Hidden"])

        r = self.client_staff.get(reverse("post-list"))
        self.assertEqual(r.data["pagination"]["totalCount"], 2)

    def test_like_published_post(self):
        post = make_post(self.editor)

        self.client_public.put(reverse("post-like", args=[post.pk]))
        r = self.client_public.post(reverse("post-like", args=[post.pk]))

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"], {"likes": 2})

    def test_cannot_like_draft(self):
        draft = make_post(self.editor, status=Post.STATUS_DRAFT)
        r = self.client_public.put(reverse("post-like", args=[draft.pk]))
        self.assertEqual(r.status_code, 404)


class PostListTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.editor = make_user()

    def test_second_page_of_twenty_five(self):
        newest = timezone.now()
        for i in range(25):
            make_post(self.editor, title=f"Post {i + 1}", published_at=newest - timedelta(minutes=i))

        r = self.client.get(reverse("post-list"), {"page": 2, "limit": 10})

        self.assertEqual(r.status_code, 200)
        self.assertEqual([p["title"] for p in r.data["data"]], [f"Post {i}" for i in range(11, 21)])
        self.assertEqual(
            r.data["pagination"],
            {"currentPage": 2, "totalPages": 3, "totalCount": 25, "hasNext": True, "hasPrev": True},
        )

    def test_search_title_description_and_tags(self):
        make_post(self.editor, title="Robotics club", tags=[])
        make_post(self.editor, title="Music night", description="Bands and robots", tags=[])
        make_post(self.editor, title="Quiz", tags=["trivia"])

        r = self.client.get(reverse("post-list"), {"search": "robot"})
        self.assertEqual(sorted(p["title"] for p in r.data["data"]), ["Music night", "Robotics club"])

        r = self.client.get(reverse("post-list"), {"search": "TRIVIA"})
        self.assertEqual([p["title"] for p in r.data["data"]], ["Quiz"])

    def test_category_and_featured_filters(self):
        make_post(self.editor, title="News", category="news", featured=True)
        make_post(self.editor, title="Blog", category="blog")

        r = self.client.get(reverse("post-list"), {"category": "news"})
        self.assertEqual([p["title"] for p in r.data["data"]], ["News"])

        r = self.client.get(reverse("post-list"), {"featured": "false"})
        self.assertEqual([p["title"] for p in r.data["data"]], ["Blog"])

    def test_malformed_author_is_400(self):
        r = self.client.get(reverse("post-list"), {"author": "abc"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "author: author must be a positive integer")

    def test_unknown_status_is_400_for_staff(self):
        self.client.force_authenticate(self.editor)
        r = self.client.get(reverse("post-list"), {"status": "archived"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["message"], "status: Invalid status")


class PostCrudTest(TempMediaMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.editor = make_user()
        self.client_staff = APIClient()
        self.client_staff.force_authenticate(self.editor)

    def _create(self, **overrides):
        data = {
            "title": "Hackathon results",
            "description": "Winners announced",
            "content": "<p>Congrats!</p><script>alert(1)</script>",
            "tags": json.dumps(["hackathon", "results"]),
            "image": image_upload(),
        }
        data.update(overrides)
        return self.client_staff.post(reverse("post-list"), data, format="multipart")

    def test_create_defaults_to_draft(self):
        r = self._create()

        self.assertEqual(r.status_code, 201, r.data)
        data = r.data["data"]
        self.assertEqual(data["status"], "draft")
        self.assertIsNone(data["publishedAt"])
        self.assertEqual(data["imageAlt"], "Hackathon results")
        self.assertEqual(data["tags"], ["hackathon", "results"])
        self.assertNotIn("<script>", data["content"])
        self.assertTrue(data["image"].startswith("/uploads/posts/"))

    def test_publishing_stamps_published_at(self):
        post_id = self._create().data["data"]["id"]

        r = self.client_staff.patch(
            reverse("post-detail", args=[post_id]), {"status": "published"}, format="json"
        )

        self.assertEqual(r.status_code, 200)
        self.assertIsNotNone(r.data["data"]["publishedAt"])

    def test_anonymous_cannot_create(self):
        r = APIClient().post(reverse("post-list"), {"title": "x"}, format="multipart")
        self.assertEqual(r.status_code, 401)

    def test_replace_and_delete_release_images(self):
        post = Post.objects.get(pk=self._create().data["data"]["id"])
        first_image = post.image

        with self.captureOnCommitCallbacks(execute=True):
            r = self.client_staff.put(
                reverse("post-detail", args=[post.pk]),
                {"image": image_upload("second.png")},
                format="multipart",
            )
        self.assertEqual(r.status_code, 200, r.data)
        post.refresh_from_db()
        self.assertFalse(default_storage.exists(first_image))
        self.assertTrue(default_storage.exists(post.image))

        with self.captureOnCommitCallbacks(execute=True):
            r = self.client_staff.delete(reverse("post-detail", args=[post.pk]))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(default_storage.exists(post.image))
