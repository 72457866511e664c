# contacts/tasks.py
import logging

from celery import shared_task

from .emails import send_contact_notification, send_contact_response
from .models import Contact

logger = logging.getLogger("hub.contacts")


@shared_task
def send_contact_notification_task(contact_id: int):
    """
    Async wrapper for the admin notification email.
    """
    try:
        contact = Contact.objects.get(id=contact_id)
    except Contact.DoesNotExist:
        return

    try:
        send_contact_notification(contact)
    except Exception as e:
        # Avoid crashing worker if email fails
        logger.warning(f"Failed to send contact notification for {contact_id}: {e}")


@shared_task
def send_contact_response_task(contact_id: int):
    """
    Async wrapper for mailing a response to the requester.
    """
    try:
        contact = Contact.objects.get(id=contact_id)
    except Contact.DoesNotExist:
        return

    try:
        send_contact_response(contact)
    except Exception as e:
        logger.warning(f"Failed to send contact response for {contact_id}: {e}")
