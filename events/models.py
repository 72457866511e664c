# events/models.py
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class Event(models.Model):
    STATUS_UPCOMING = "upcoming"
    STATUS_ONGOING = "ongoing"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_POSTPONED = "postponed"

    STATUS_CHOICES = [
        (STATUS_UPCOMING, "Upcoming"),
        (STATUS_ONGOING, "Ongoing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_POSTPONED, "Postponed"),
    ]

    TYPE_WORKSHOP = "workshop"
    TYPE_SEMINAR = "seminar"
    TYPE_COMPETITION = "competition"
    TYPE_CONFERENCE = "conference"
    TYPE_BOOTCAMP = "bootcamp"
    TYPE_HACKATHON = "hackathon"
    TYPE_MEETUP = "meetup"
    TYPE_WEBINAR = "webinar"

    TYPE_CHOICES = [
        (TYPE_WORKSHOP, "Workshop"),
        (TYPE_SEMINAR, "Seminar"),
        (TYPE_COMPETITION, "Competition"),
        (TYPE_CONFERENCE, "Conference"),
        (TYPE_BOOTCAMP, "Bootcamp"),
        (TYPE_HACKATHON, "Hackathon"),
        (TYPE_MEETUP, "Meetup"),
        (TYPE_WEBINAR, "Webinar"),
    ]

    CATEGORY_TECHNICAL = "technical"
    CATEGORY_CULTURAL = "cultural"
    CATEGORY_SPORTS = "sports"
    CATEGORY_ACADEMIC = "academic"
    CATEGORY_SOCIAL = "social"
    CATEGORY_CAREER = "career"

    CATEGORY_CHOICES = [
        (CATEGORY_TECHNICAL, "Technical"),
        (CATEGORY_CULTURAL, "Cultural"),
        (CATEGORY_SPORTS, "Sports"),
        (CATEGORY_ACADEMIC, "Academic"),
        (CATEGORY_SOCIAL, "Social"),
        (CATEGORY_CAREER, "Career"),
    ]

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="events",
    )
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=255, unique=True, editable=False)
    description = models.TextField()
    content = models.TextField(blank=True)

    # Storage path under MEDIA_ROOT/events/
    image = models.CharField(max_length=1024)
    image_alt = models.CharField(max_length=255, blank=True, default="")

    date = models.DateTimeField()
    time = models.CharField(max_length=32)
    end_time = models.CharField(max_length=32, blank=True, default="")
    location = models.CharField(max_length=255)
    # {address, city, state, zipCode, coordinates: {latitude, longitude}}
    venue = models.JSONField(default=dict, blank=True)

    event_type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, default=CATEGORY_TECHNICAL)

    max_attendees = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    current_attendees = models.PositiveIntegerField(default=0)
    registration_link = models.URLField(max_length=2048, blank=True, default="")
    registration_deadline = models.DateTimeField(blank=True, null=True)

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_UPCOMING)
    featured = models.BooleanField(default=False)

    # Ordered sub-records
    tags = models.JSONField(default=list, blank=True)
    organizers = models.JSONField(default=list, blank=True)
    speakers = models.JSONField(default=list, blank=True)
    requirements = models.JSONField(default=list, blank=True)
    agenda = models.JSONField(default=list, blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=10, default="INR")

    # Set before the first save so the slug can be derived from it
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(current_attendees__lte=F("max_attendees")),
                name="event_attendees_within_capacity",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="event_date_status_idx"),
            models.Index(fields=["author"], name="event_author_idx"),
            models.Index(fields=["event_type", "category"], name="event_type_category_idx"),
            models.Index(fields=["featured", "date"], name="event_featured_date_idx"),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        from .lifecycle import apply_derived_fields

        apply_derived_fields(self)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"slug", "status", "updated_at"}
        super().save(*args, **kwargs)

    @property
    def effective_deadline(self):
        return self.registration_deadline or self.date

    @property
    def spots_left(self) -> int:
        return max(0, self.max_attendees - self.current_attendees)

    @property
    def is_registration_open(self) -> bool:
        from .lifecycle import registration_block_reason

        return registration_block_reason(self) is None
