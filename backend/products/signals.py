from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from core_backend.infrastructure.cache_utils import invalidate_cache_pattern
from .models import Category
import logging

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=Category)
def invalidate_category_cache(sender, instance, **kwargs):
    """Drop the cached category list whenever a category changes."""
    invalidate_cache_pattern("list_categories")
    logger.debug(f"Category cache invalidated after change to '{instance.name}'")
