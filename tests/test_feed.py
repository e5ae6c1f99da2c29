import pytest

from journal.entities import Collection, get_spec
from journal.feed import ChangeEvent, ChangeFeed, Operation, audience_for, feed
from journal.models import ChatMessage, Post, Quote, Reaction


@pytest.fixture
def heard():
    """Subscribe to the global feed and collect events; unsubscribes afterwards."""
    subscriptions = []

    def listen(collection, viewer=None):
        events = []
        subscriptions.append(feed.subscribe(collection, events.append, viewer=viewer))
        return events

    yield listen
    for subscription in subscriptions:
        subscription.unsubscribe()


def test_saves_and_deletes_are_published(alice, bob, heard):
    events = heard(Collection.POST)

    post = Post.objects.create(owner=alice, content='hello')
    post.content = 'hello again'
    post.save()
    post_id = post.pk
    post.delete()

    assert [e.operation for e in events] == [Operation.INSERT, Operation.UPDATE, Operation.DELETE]
    assert {e.pk for e in events} == {post_id}
    assert events[0].audience == {alice.id, bob.id}


def test_events_are_filtered_by_collection(alice, heard):
    events = heard(Collection.PHOTO)
    Post.objects.create(owner=alice, content='not a photo')
    assert events == []


def test_viewers_only_hear_rows_they_can_see(alice, bob, carol, heard):
    bob_events = heard(Collection.CHAT, viewer=bob)
    carol_events = heard(Collection.CHAT, viewer=carol)

    ChatMessage.objects.create(sender=alice, text='hi')

    assert len(bob_events) == 1
    assert carol_events == []


def test_unsubscribe_is_idempotent(alice):
    events = []
    subscription = feed.subscribe(Collection.POST, events.append)
    subscription.unsubscribe()
    subscription.unsubscribe()

    Post.objects.create(owner=alice, content='nobody listening')
    assert events == []
    assert not subscription.active


def test_failing_subscriber_does_not_break_the_write(alice):
    def explode(event):
        raise RuntimeError('boom')

    subscription = feed.subscribe(Collection.POST, explode)
    try:
        post = Post.objects.create(owner=alice, content='still saved')
    finally:
        subscription.unsubscribe()
    assert Post.objects.filter(pk=post.pk).exists()


def test_private_feed_publish():
    private = ChangeFeed()
    events = []
    subscription = private.subscribe(Collection.QUOTE, events.append)
    assert private.has_subscribers()

    event = ChangeEvent(Collection.QUOTE, Operation.UPDATE, pk=1, audience=frozenset())
    private.publish(event)
    subscription.unsubscribe()
    private.publish(event)

    assert events == [event]
    assert not private.has_subscribers()


def test_subscribe_rejects_unknown_collection():
    with pytest.raises(LookupError):
        ChangeFeed().subscribe('letters', lambda event: None)


def test_event_with_unknown_audience_reaches_everyone():
    event = ChangeEvent(Collection.POST, Operation.DELETE, pk=1)
    assert event.visible_to('anyone')


def test_audience_for_related_scope(alice, bob):
    post = Post.objects.create(owner=bob, content='hi')
    reaction = Reaction.objects.create(post=post, owner=alice, kind='hug')
    assert audience_for(get_spec(Collection.REACTION), reaction) == {alice.id, bob.id}


def test_audience_for_quote_follows_recipient(alice, bob):
    quote = Quote.objects.create(owner=bob, author=alice, text='for you')
    assert audience_for(get_spec(Collection.QUOTE), quote) == {alice.id, bob.id}


def test_audience_for_profile(alice, bob, carol):
    assert audience_for(get_spec(Collection.PROFILE), alice) == {alice.id, bob.id}
    assert audience_for(get_spec(Collection.PROFILE), carol) == {carol.id}
