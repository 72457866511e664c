from django.db.models.signals import post_delete
from django.dispatch import Signal, receiver
import logging

from core.assets import delete_asset_on_commit
from .models import Event

logger = logging.getLogger('hub.events')


# Sent after a successful registration with `result=RegistrationResult`.
# Dispatched with send_robust: receivers may fail without affecting the caller.
attendee_registered = Signal()


@receiver(post_delete, sender=Event)
def release_event_image(sender, instance, **kwargs):
    """Remove the event's image once the delete is committed."""
    image = instance.image
    if image:
        delete_asset_on_commit(image)
        logger.info(f"Event {instance.pk} deleted, releasing image {image}")
