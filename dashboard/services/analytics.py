# dashboard/services/analytics.py

from datetime import timedelta

from django.db.models import Count
from django.db.models.functions import TruncDate
from django.utils import timezone

from contacts.models import Contact
from events.models import Event
from posts.models import Post

DEFAULT_PERIOD_DAYS = 30
MAX_PERIOD_DAYS = 365


def daily_counts(queryset, since):
    rows = (
        queryset.filter(created_at__gte=since)
        .annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(count=Count("id"))
        .order_by("day")
    )
    return [{"date": row["day"].isoformat(), "count": row["count"]} for row in rows]


def distribution(queryset, field):
    rows = queryset.order_by().values(field).annotate(count=Count("id")).order_by("-count", field)
    return [{"name": row[field], "count": row["count"]} for row in rows]


def get_analytics(period_days=DEFAULT_PERIOD_DAYS, now=None):
    now = now or timezone.now()
    period_days = min(period_days, MAX_PERIOD_DAYS)
    since = now - timedelta(days=period_days)

    return {
        "period": period_days,
        "dailyStats": {
            "posts": daily_counts(Post.objects.all(), since),
            "events": daily_counts(Event.objects.all(), since),
            "contacts": daily_counts(Contact.objects.all(), since),
        },
        "distributions": {
            "postCategories": distribution(Post.objects.all(), "category"),
            "eventTypes": distribution(Event.objects.all(), "event_type"),
            "contactCategories": distribution(Contact.objects.all(), "category"),
        },
    }
