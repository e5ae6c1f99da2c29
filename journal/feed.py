"""
Love Nest - Change Feed

In-process change notifications for journal rows. Every insert, update and
delete of a watched row is published as a ChangeEvent tagged with the
collection name and the set of profiles allowed to see the row. Subscribers
only hear about rows their viewer could see.

Events are a trigger only: subscribers refetch, they never patch from the
event payload.
"""

import logging
import uuid
from dataclasses import dataclass

from django.db import models
from django.dispatch import Signal

from .entities import get_spec

logger = logging.getLogger(__name__)


class Operation(models.TextChoices):
    INSERT = 'insert', 'Insert'
    UPDATE = 'update', 'Update'
    DELETE = 'delete', 'Delete'


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    operation: str
    pk: object = None
    # None means the audience could not be determined: deliver to everyone.
    audience: frozenset = None

    def visible_to(self, viewer_id):
        return self.audience is None or viewer_id in self.audience


class Subscription:
    """Handle returned by ChangeFeed.subscribe(). unsubscribe() is idempotent."""

    def __init__(self, feed, collection, callback, viewer_id=None):
        self.feed = feed
        self.collection = collection
        self.callback = callback
        self.viewer_id = viewer_id
        self.uid = f'journal-subscription-{uuid.uuid4().hex}'
        self.active = True

    def __repr__(self):
        return f'<Subscription {self.collection} viewer={self.viewer_id} active={self.active}>'

    def receive(self, sender, event, **kwargs):
        if not self.active or event.collection != self.collection:
            return
        if self.viewer_id is not None and not event.visible_to(self.viewer_id):
            return
        self.callback(event)

    def unsubscribe(self):
        if not self.active:
            return
        self.active = False
        self.feed.signal.disconnect(dispatch_uid=self.uid)
        logger.debug('Unsubscribed %r', self)


class ChangeFeed:

    def __init__(self):
        self.signal = Signal()

    def subscribe(self, collection, callback, viewer=None):
        """
        Call `callback(event)` for every change to `collection` visible to
        `viewer` (a profile; None hears every change).
        """
        collection = get_spec(collection).collection
        viewer_id = viewer.id if viewer is not None else None
        subscription = Subscription(self, collection, callback, viewer_id)
        self.signal.connect(subscription.receive, weak=False, dispatch_uid=subscription.uid)
        logger.debug('Subscribed %r', subscription)
        return subscription

    def has_subscribers(self):
        return self.signal.has_listeners()

    def publish(self, event):
        results = self.signal.send_robust(sender=self.__class__, event=event)
        for receiver, result in results:
            if isinstance(result, Exception):
                logger.warning(
                    'Change subscriber failed on %s %s: %r',
                    event.collection, event.operation, result,
                )
        return event

    def publish_instance(self, collection, operation, instance):
        spec = get_spec(collection)
        event = ChangeEvent(
            collection=spec.collection,
            operation=operation,
            pk=instance.pk,
            audience=audience_for(spec, instance),
        )
        return self.publish(event)


def audience_for(spec, instance):
    """
    Profiles allowed to see `instance`: its scope owner and the owner's partner.

    Returns None when the scope owner cannot be found anymore (e.g. during a
    cascading delete).
    """
    if not spec.scope_field:
        return frozenset(pk for pk in (instance.pk, instance.partner_id) if pk)

    head, _, rest = spec.scope_field.partition('__')
    field = instance._meta.get_field(head)
    ref_id = getattr(instance, field.attname)
    if rest:
        columns = (f'{rest}__id', f'{rest}__partner')
    else:
        columns = ('id', 'partner')
    row = field.related_model.objects.filter(pk=ref_id).values_list(*columns).first()
    if row is None:
        return None
    return frozenset(pk for pk in row if pk)


feed = ChangeFeed()
