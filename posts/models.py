# posts/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class Post(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
    ]

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    title = models.CharField(max_length=200)
    description = models.TextField()
    content = models.TextField(blank=True)

    # Storage path under MEDIA_ROOT/posts/
    image = models.CharField(max_length=1024)
    image_alt = models.CharField(max_length=255, blank=True, default="")

    category = models.CharField(max_length=50, default="general")
    tags = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    featured = models.BooleanField(default=False)
    views = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)
    registration_link = models.URLField(max_length=2048, blank=True, default="")

    published_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = [models.F("published_at").desc(nulls_last=True), "-created_at"]
        indexes = [
            models.Index(fields=["status", "published_at"], name="post_status_published_idx"),
            models.Index(fields=["category"], name="post_category_idx"),
            models.Index(fields=["author"], name="post_author_idx"),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        # First publication is stamped once and kept across unpublish/republish.
        if self.status == self.STATUS_PUBLISHED and self.published_at is None:
            self.published_at = timezone.now()
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = set(update_fields) | {"published_at"}
        super().save(*args, **kwargs)

    @property
    def is_published(self) -> bool:
        return self.status == self.STATUS_PUBLISHED
