"""End-to-end flows through SessionContext, Live Collections and the gateway."""

import pytest

from journal.aggregation import group_by_post, partition_unread, reaction_counts
from journal.entities import Collection
from journal.exceptions import OwnershipViolation
from journal.identity import SessionContext
from journal.models import Mood
from journal.scoping import Audience


def test_solo_user_timeline(carol):
    with SessionContext.init(carol.user) as ctx:
        mine = ctx.open(Collection.POST, Audience.MINE)
        theirs = ctx.open(Collection.POST, Audience.THEIRS)

        ctx.gateway().create(Collection.POST, {'content': 'just me', 'mood': Mood.HAPPY})

        assert [post.mood for post in mine] == [Mood.HAPPY]
        assert list(theirs) == []


def test_chat_is_read_on_load(alice, bob):
    with SessionContext.init(alice.user) as a, SessionContext.init(bob.user) as b:
        bobs_chat = b.open(Collection.CHAT)
        a.gateway().create(Collection.CHAT, {'text': 'hi'})

        # Bob's collection caught the insert through the change feed.
        assert len(bobs_chat) == 1
        message = bobs_chat.items[0]
        assert message.sender_id == alice.id
        assert not message.is_read

        unread, _ = partition_unread(bobs_chat.items, bob.id, 'sender_id')
        assert unread == [message]
        assert b.gateway().mark_read(Collection.CHAT, [m.pk for m in unread]) == 1

        # The mark-read update is itself a change, so the listing is already fresh.
        assert bobs_chat.items[0].is_read
        second_load = b.open(Collection.CHAT)
        assert [m.is_read for m in second_load] == [True]


def test_reaction_switch_is_not_additive(alice, bob):
    with SessionContext.init(alice.user) as a, SessionContext.init(bob.user) as b:
        post = b.gateway().create(Collection.POST, {'content': 'our trip'})
        bobs_reactions = b.open(Collection.REACTION)

        def counts():
            return reaction_counts(group_by_post(bobs_reactions.items).get(post.pk, []))

        a.gateway().toggle_reaction(post.pk, 'love')
        assert counts() == {'love': 1, 'hug': 0, 'smile': 0}

        a.gateway().toggle_reaction(post.pk, 'smile')
        assert counts() == {'love': 0, 'hug': 0, 'smile': 1}


def test_cannot_delete_partner_photo(alice, bob):
    with SessionContext.init(alice.user) as a, SessionContext.init(bob.user) as b:
        photo = b.gateway().create(Collection.PHOTO, {'url': 'https://example.com/us.jpg'})
        album = a.open(Collection.PHOTO)

        with pytest.raises(OwnershipViolation):
            a.gateway().delete(Collection.PHOTO, photo.pk)

        assert [p.pk for p in album] == [photo.pk]
        a.reload()
        assert [p.pk for p in a.open(Collection.PHOTO)] == [photo.pk]
