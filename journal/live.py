"""
Love Nest - Live Collections

A Live Collection is a scoped listing that keeps itself current:

    Idle -> Loading -> Ready <-> Refreshing        (any) -> Disposed

It fetches once on start, subscribes to the change feed, and on every
visible change refetches the whole listing and swaps the snapshot in one
step. Writes never touch a snapshot directly; they show up through the
change notification.

A failed fetch lands in Ready with an empty snapshot and `error` set. There
is no automatic retry: `refresh()` is the explicit retry.
"""

import logging
import threading

from django.db import DatabaseError, models

from .entities import get_spec
from .exceptions import TransientFetchFailure
from .feed import feed as default_feed
from .scoping import Audience, scoped_queryset

logger = logging.getLogger(__name__)


class State(models.TextChoices):
    IDLE = 'idle', 'Idle'
    LOADING = 'loading', 'Loading'
    READY = 'ready', 'Ready'
    REFRESHING = 'refreshing', 'Refreshing'
    DISPOSED = 'disposed', 'Disposed'


class LiveCollection:
    """
    Always-current ordered view of one collection for one identity.

    Args:
        collection: collection name (see journal.entities.Collection)
        identity: the viewer's Identity
        audience: mine / theirs / both
        feed: change feed to subscribe to
        filters: extra queryset filters (e.g. a time window)
        limit: maximum number of rows
        fetch: callable returning the rows; defaults to the scoped query
        start: fetch and subscribe immediately
    """

    def __init__(self, collection, identity, audience=Audience.BOTH, feed=None,
                 filters=None, limit=None, fetch=None, start=True):
        self.spec = get_spec(collection)
        self.identity = identity
        self.audience = Audience(audience)
        self.feed = feed or default_feed
        self.filters = dict(filters or {})
        self.limit = limit
        self.listeners = []

        self.state = State.IDLE
        self.items = ()
        self.error = None
        self.version = 0

        self._fetch = fetch or self._query
        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._generation = 0
        self._fetching = False
        self._stale = False
        self._subscription = None

        if start:
            self.start()

    def __repr__(self):
        return (
            f'<LiveCollection {self.spec.collection}/{self.audience} '
            f'state={self.state} items={len(self.items)} v{self.version}>'
        )

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.dispose()
        return False

    @property
    def is_ready(self):
        return self.state == State.READY

    @property
    def disposed(self):
        return self.state == State.DISPOSED

    @property
    def has_error(self):
        return self.error is not None

    def _query(self):
        return scoped_queryset(
            self.spec, self.identity, self.audience,
            filters=self.filters, limit=self.limit,
        )

    def start(self):
        with self._lock:
            if self.state != State.IDLE:
                return
            self.state = State.LOADING
        # Subscribe first so a change during the first fetch is not missed.
        self._subscription = self.feed.subscribe(
            self.spec.collection, self._on_change, viewer=self.identity.me
        )
        self._load()

    def _on_change(self, event):
        logger.debug('%r heard %s %s', self, event.operation, event.pk)
        self.refresh()

    def refresh(self):
        """Refetch now. A refresh requested mid-fetch reruns the fetch once it completes."""
        with self._lock:
            if self.state in (State.IDLE, State.DISPOSED):
                return
            if self._fetching:
                self._stale = True
                return
            if self.state == State.READY:
                self.state = State.REFRESHING
        self._load()

    def _load(self):
        while True:
            with self._lock:
                if self.state == State.DISPOSED:
                    return
                self._fetching = True
                self._stale = False
                generation = self._generation

            items, error = (), None
            try:
                items = tuple(self._fetch())
            except DatabaseError as exc:
                error = TransientFetchFailure(
                    f'Could not load {self.spec.collection}.',
                    collection=self.spec.collection,
                )
                logger.warning('Fetch of %s failed: %s', self.spec.collection, exc)

            with self._lock:
                self._fetching = False
                if self.state == State.DISPOSED or generation != self._generation:
                    logger.debug('Discarding %s rows fetched before dispose', self.spec.collection)
                    return
                if self._stale:
                    self.state = State.REFRESHING
                    continue
                self.items = items
                self.error = error
                self.state = State.READY
                self.version += 1
                self._changed.notify_all()
                listeners = list(self.listeners)

            for listener in listeners:
                listener(self)
            return

    def wait_for_change(self, version, timeout=None):
        """Block until a snapshot newer than `version` is applied. Returns True if one was."""
        with self._changed:
            self._changed.wait_for(
                lambda: self.version != version or self.state == State.DISPOSED,
                timeout=timeout,
            )
            return self.version != version and self.state != State.DISPOSED

    def dispose(self):
        """Unsubscribe and drop the snapshot. Idempotent."""
        with self._lock:
            if self.state == State.DISPOSED:
                return
            self.state = State.DISPOSED
            self._generation += 1
            self.items = ()
            self.error = None
            self.listeners = []
            subscription, self._subscription = self._subscription, None
            self._changed.notify_all()
        if subscription is not None:
            subscription.unsubscribe()
