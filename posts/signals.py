from django.db.models.signals import post_delete
from django.dispatch import receiver
import logging

from core.assets import delete_asset_on_commit
from .models import Post

logger = logging.getLogger('hub.posts')


@receiver(post_delete, sender=Post)
def release_post_image(sender, instance, **kwargs):
    image = instance.image
    if image:
        delete_asset_on_commit(image)
        logger.info(f"Post {instance.pk} deleted, releasing image {image}")
