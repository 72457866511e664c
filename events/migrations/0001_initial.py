import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("slug", models.SlugField(editable=False, max_length=255, unique=True)),
                ("description", models.TextField()),
                ("content", models.TextField(blank=True)),
                ("image", models.CharField(max_length=1024)),
                ("image_alt", models.CharField(blank=True, default="", max_length=255)),
                ("date", models.DateTimeField()),
                ("time", models.CharField(max_length=32)),
                ("end_time", models.CharField(blank=True, default="", max_length=32)),
                ("location", models.CharField(max_length=255)),
                ("venue", models.JSONField(blank=True, default=dict)),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("workshop", "Workshop"),
                            ("seminar", "Seminar"),
                            ("competition", "Competition"),
                            ("conference", "Conference"),
                            ("bootcamp", "Bootcamp"),
                            ("hackathon", "Hackathon"),
                            ("meetup", "Meetup"),
                            ("webinar", "Webinar"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("technical", "Technical"),
                            ("cultural", "Cultural"),
                            ("sports", "Sports"),
                            ("academic", "Academic"),
                            ("social", "Social"),
                            ("career", "Career"),
                        ],
                        default="technical",
                        max_length=32,
                    ),
                ),
                (
                    "max_attendees",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("current_attendees", models.PositiveIntegerField(default=0)),
                ("registration_link", models.URLField(blank=True, default="", max_length=2048)),
                ("registration_deadline", models.DateTimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("upcoming", "Upcoming"),
                            ("ongoing", "Ongoing"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                            ("postponed", "Postponed"),
                        ],
                        default="upcoming",
                        max_length=32,
                    ),
                ),
                ("featured", models.BooleanField(default=False)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("organizers", models.JSONField(blank=True, default=list)),
                ("speakers", models.JSONField(blank=True, default=list)),
                ("requirements", models.JSONField(blank=True, default=list)),
                ("agenda", models.JSONField(blank=True, default=list)),
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["date", "-created_at"],
                "indexes": [
                    models.Index(fields=["date", "status"], name="event_date_status_idx"),
                    models.Index(fields=["author"], name="event_author_idx"),
                    models.Index(fields=["event_type", "category"], name="event_type_category_idx"),
                    models.Index(fields=["featured", "date"], name="event_featured_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("current_attendees__lte", models.F("max_attendees"))),
                        name="event_attendees_within_capacity",
                    ),
                ],
            },
        ),
    ]
