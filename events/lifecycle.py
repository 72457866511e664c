# events/lifecycle.py
"""
Derived fields of an Event.

- slug: built from (title, created_at), so re-saving without a title
  change keeps it and a new title yields a new, predictable slug.
- status: the only automatic transition is upcoming -> completed once
  the event date is in the past. It is applied when an event is loaded
  through this module and right before every save, never by a scheduler.

Everything here takes an explicit `now` so tests can pin the clock.
"""
import logging
import re
from datetime import datetime
from typing import Optional

from django.utils import timezone

from .models import Event

logger = logging.getLogger("hub.events")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp()) * 1000 + moment.microsecond // 1000


def build_slug(title: str, created_at: datetime) -> str:
    """
    "Intro to Git & GitHub!" created at 1700000000123 ms
    -> "intro-to-git-github-1700000000123"
    """
    base = _NON_ALNUM.sub("-", (title or "").lower()).strip("-")
    return f"{base or 'event'}-{epoch_millis(created_at)}"


def derive_status(status: str, date: Optional[datetime], now: Optional[datetime] = None) -> str:
    now = now or timezone.now()
    if status == Event.STATUS_UPCOMING and date is not None and date < now:
        return Event.STATUS_COMPLETED
    return status


def apply_derived_fields(event: Event, now: Optional[datetime] = None) -> Event:
    """
    Recompute slug and status in place. Called right before persisting.
    """
    if event.created_at is None:
        event.created_at = timezone.now()
    event.slug = build_slug(event.title, event.created_at)

    new_status = derive_status(event.status, event.date, now)
    if new_status != event.status:
        logger.info(f"Event {event.pk or 'new'} auto-completed (date {event.date} is past)")
        event.status = new_status
    return event


def complete_past_events(queryset=None, now: Optional[datetime] = None) -> int:
    """
    Persist the upcoming -> completed rule for every matching event whose
    date has passed, in a single UPDATE. Run before reads so callers never
    observe a stale 'upcoming'.
    """
    now = now or timezone.now()
    qs = queryset if queryset is not None else Event.objects.all()
    updated = qs.filter(status=Event.STATUS_UPCOMING, date__lt=now).update(
        status=Event.STATUS_COMPLETED,
        updated_at=now,
    )
    if updated:
        logger.info(f"Auto-completed {updated} past event(s)")
    return updated


def load_event(now: Optional[datetime] = None, **lookup) -> Event:
    """
    Fetch a single event with its status already derived.
    Raises Event.DoesNotExist like a normal .get().
    """
    complete_past_events(Event.objects.filter(**lookup), now=now)
    return Event.objects.select_related("author").get(**lookup)


def registration_block_reason(event: Event, now: Optional[datetime] = None):
    """
    Return the exception class that blocks registration for this event
    state, or None when registration is open. Checks run in order:
    status, capacity, deadline.
    """
    from .exceptions import DeadlinePassed, EventFull, RegistrationClosed

    now = now or timezone.now()

    if event.status != Event.STATUS_UPCOMING:
        return RegistrationClosed
    if event.current_attendees >= event.max_attendees:
        return EventFull
    if now > event.effective_deadline:
        return DeadlinePassed
    return None
