"""
Love Nest - Signals

Feed every saved or deleted journal row into the change feed.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .entities import MODEL_COLLECTIONS
from .feed import Operation, feed


@receiver(post_save, dispatch_uid='journal_publish_row_saved')
def publish_row_saved(sender, instance, created, raw=False, **kwargs):
    """Announce inserts and updates of watched rows (fixtures loading raw rows are skipped)."""
    collection = MODEL_COLLECTIONS.get(sender)
    if collection is None or raw:
        return
    operation = Operation.INSERT if created else Operation.UPDATE
    feed.publish_instance(collection, operation, instance)


@receiver(post_delete, dispatch_uid='journal_publish_row_deleted')
def publish_row_deleted(sender, instance, **kwargs):
    collection = MODEL_COLLECTIONS.get(sender)
    if collection is None:
        return
    feed.publish_instance(collection, Operation.DELETE, instance)
