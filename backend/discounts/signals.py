from django.db.models.signals import m2m_changed
from django.dispatch import receiver
from django.utils import timezone

from .models import Discount


@receiver(m2m_changed, sender=Discount.applicable_foods.through)
def discount_applicable_foods_changed(sender, instance, action, reverse, model, pk_set, **kwargs):
    if action in ("post_add", "post_remove", "post_clear") and not reverse:
        instance.updated_at = timezone.now()
        instance.save(update_fields=["updated_at"])


@receiver(m2m_changed, sender=Discount.applicable_categories.through)
def discount_applicable_categories_changed(sender, instance, action, reverse, model, pk_set, **kwargs):
    if action in ("post_add", "post_remove", "post_clear") and not reverse:
        instance.updated_at = timezone.now()
        instance.save(update_fields=["updated_at"])
