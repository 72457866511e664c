# events/registration.py
"""
Attendance counter for events.

The capacity check and the increment are one conditional UPDATE:

    UPDATE event SET current_attendees = current_attendees + 1
    WHERE id = %s AND status = 'upcoming'
      AND current_attendees < max_attendees
      AND now <= COALESCE(registration_deadline, date)

so concurrent registrations can never push current_attendees past
max_attendees. When no row matches, the event is re-read to report the
first failing gate (not found, closed, full, deadline).
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from .exceptions import RegistrationError
from .lifecycle import complete_past_events, registration_block_reason
from .models import Event
from .signals import attendee_registered

logger = logging.getLogger("hub.events")

MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class RegistrationResult:
    event_id: int
    current_attendees: int
    max_attendees: int

    @property
    def spots_left(self) -> int:
        return self.max_attendees - self.current_attendees

    def as_dict(self) -> dict:
        return {
            "currentAttendees": self.current_attendees,
            "spotsLeft": self.spots_left,
        }


def _open_for_registration(now: datetime) -> Q:
    return (
        Q(status=Event.STATUS_UPCOMING)
        & Q(current_attendees__lt=F("max_attendees"))
        & (
            Q(registration_deadline__gte=now)
            | Q(registration_deadline__isnull=True, date__gte=now)
        )
    )


def _try_increment(event_id, now: datetime) -> Optional[RegistrationResult]:
    with transaction.atomic():
        updated = (
            Event.objects
            .filter(pk=event_id)
            .filter(_open_for_registration(now))
            .update(current_attendees=F("current_attendees") + 1, updated_at=now)
        )
        if not updated:
            return None

        # The UPDATE holds the row until commit, so this read sees our own value.
        current, maximum = (
            Event.objects
            .filter(pk=event_id)
            .values_list("current_attendees", "max_attendees")
            .get()
        )
    return RegistrationResult(event_id=int(event_id), current_attendees=current, max_attendees=maximum)


def register_attendee(event_id, now: Optional[datetime] = None) -> RegistrationResult:
    """
    Add one attendee to an event.

    Raises (first match wins):
        NotFound, RegistrationClosed, EventFull, DeadlinePassed
    """
    now = now or timezone.now()

    for _ in range(MAX_ATTEMPTS):
        result = _try_increment(event_id, now)
        if result is not None:
            logger.info(
                f"Event registration: event={event_id}, "
                f"newTotal={result.current_attendees}, spotsLeft={result.spots_left}"
            )
            _notify(result)
            return result

        try:
            event = Event.objects.get(pk=event_id)
        except Event.DoesNotExist:
            raise NotFound("Event not found")

        # Diagnose on the stored state, then persist the auto-completion.
        reason = registration_block_reason(event, now)
        complete_past_events(Event.objects.filter(pk=event_id), now=now)

        if reason is not None:
            logger.warning(
                f"Registration rejected: event={event_id}, reason={reason.default_code}, "
                f"attendees={event.current_attendees}/{event.max_attendees}"
            )
            raise reason()

        # The row changed between the UPDATE and the read; try again.

    raise RegistrationError("Could not complete registration, please try again")


def _notify(result: RegistrationResult):
    """
    Best-effort fan-out to listeners (emails, analytics). A failing
    receiver never fails the registration.
    """
    responses = attendee_registered.send_robust(sender=Event, result=result)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.warning(f"Registration listener {receiver} failed for event {result.event_id}: {response}")
