# dashboard/services/stats.py

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, F, FloatField, Q, Sum
from django.db.models.functions import Cast, TruncMonth
from django.utils import timezone

from contacts.models import Contact
from events.lifecycle import complete_past_events
from events.models import Event
from posts.models import Post

RECENT_LIMIT = 5
POPULAR_LIMIT = 5


def get_overview():
    # Status counts must see auto-completed events.
    complete_past_events()

    User = get_user_model()

    post_counts = Post.objects.aggregate(
        total=Count("id"),
        published=Count("id", filter=Q(status=Post.STATUS_PUBLISHED)),
        drafts=Count("id", filter=Q(status=Post.STATUS_DRAFT)),
        views=Sum("views"),
    )
    event_counts = Event.objects.aggregate(
        total=Count("id"),
        upcoming=Count("id", filter=Q(status=Event.STATUS_UPCOMING)),
        completed=Count("id", filter=Q(status=Event.STATUS_COMPLETED)),
    )
    contact_counts = Contact.objects.aggregate(
        total=Count("id"),
        unread=Count("id", filter=Q(status=Contact.STATUS_NEW)),
    )

    return {
        "totalPosts": post_counts["total"],
        "publishedPosts": post_counts["published"],
        "draftPosts": post_counts["drafts"],
        "totalEvents": event_counts["total"],
        "upcomingEvents": event_counts["upcoming"],
        "completedEvents": event_counts["completed"],
        "totalContacts": contact_counts["total"],
        "unreadContacts": contact_counts["unread"],
        "totalUsers": User.objects.count(),
        "totalViews": post_counts["views"] or 0,
    }


def get_recent_activity():
    posts = Post.objects.order_by("-created_at").values(
        "id", "title", "status", "views", "created_at", author_name=F("author__name")
    )[:RECENT_LIMIT]
    events = Event.objects.order_by("-created_at").values(
        "id", "title", "status", "date", "current_attendees", "max_attendees", author_name=F("author__name")
    )[:RECENT_LIMIT]
    contacts = Contact.objects.order_by("-created_at").values(
        "id", "name", "email", "subject", "status", "created_at"
    )[:RECENT_LIMIT]

    return {
        "posts": [
            {
                "id": p["id"],
                "title": p["title"],
                "status": p["status"],
                "views": p["views"],
                "author": p["author_name"],
                "createdAt": p["created_at"],
            }
            for p in posts
        ],
        "events": [
            {
                "id": e["id"],
                "title": e["title"],
                "status": e["status"],
                "date": e["date"],
                "currentAttendees": e["current_attendees"],
                "maxAttendees": e["max_attendees"],
                "author": e["author_name"],
            }
            for e in events
        ],
        "contacts": [
            {
                "id": c["id"],
                "name": c["name"],
                "email": c["email"],
                "subject": c["subject"],
                "status": c["status"],
                "createdAt": c["created_at"],
            }
            for c in contacts
        ],
    }


def monthly_counts(queryset, year):
    """
    [{"month": 1..12, "count": n}] for months of `year` that have rows,
    bucketed in the active timezone.
    """
    rows = (
        queryset.filter(created_at__year=year)
        .annotate(month=TruncMonth("created_at"))
        .values("month")
        .annotate(count=Count("id"))
        .order_by("month")
    )
    return [{"month": row["month"].month, "count": row["count"]} for row in rows]


def get_popular_posts():
    rows = (
        Post.objects.filter(status=Post.STATUS_PUBLISHED)
        .order_by("-views", "-created_at")
        .values("id", "title", "views", "likes", "created_at", author_name=F("author__name"))[:POPULAR_LIMIT]
    )
    return [
        {
            "id": row["id"],
            "title": row["title"],
            "views": row["views"],
            "likes": row["likes"],
            "author": row["author_name"],
            "createdAt": row["created_at"],
        }
        for row in rows
    ]


def get_event_stats():
    """
    Capacity totals plus the mean fill ratio per event. Events without
    capacity (maxAttendees == 0) are left out of the average.
    """
    ratio = Cast("current_attendees", FloatField()) / Cast("max_attendees", FloatField())
    stats = Event.objects.aggregate(
        totalCapacity=Sum("max_attendees"),
        totalAttendees=Sum("current_attendees"),
        averageAttendance=Avg(ratio, filter=Q(max_attendees__gt=0)),
    )
    return {
        "totalCapacity": stats["totalCapacity"] or 0,
        "totalAttendees": stats["totalAttendees"] or 0,
        "averageAttendance": round(stats["averageAttendance"] or 0.0, 4),
    }


def get_dashboard_stats(now=None):
    now = timezone.localtime(now or timezone.now())

    return {
        "overview": get_overview(),
        "recentActivity": get_recent_activity(),
        "charts": {
            "monthlyPosts": monthly_counts(Post.objects.all(), now.year),
            "monthlyEvents": monthly_counts(Event.objects.all(), now.year),
        },
        "popularPosts": get_popular_posts(),
        "eventStats": get_event_stats(),
    }
