import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .events import TableEventPublisher
from .models import TableRecord
from .records import TableSnapshot
from .store import table_store

logger = logging.getLogger(__name__)


@receiver(post_save, sender=TableRecord)
def table_record_saved(sender, instance, created, **kwargs):
    logger.debug(f"Table {instance.pk} {'created' if created else 'updated'} ({instance.status})")
    table_store.publish(instance.pk)
    TableEventPublisher.table_changed(TableSnapshot.from_record(instance))


@receiver(post_delete, sender=TableRecord)
def table_record_deleted(sender, instance, **kwargs):
    logger.info(f"Table {instance.pk} '{instance.name}' deleted")
    table_store.publish(instance.pk)
    TableEventPublisher.table_changed(TableSnapshot.missing(instance.pk))
