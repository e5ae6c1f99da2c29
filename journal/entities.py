"""
Love Nest - Entity Registry

One EntitySpec per collection. This is the single place that says, for
each kind of row, who it is scoped to, who may write it, which fields are
writable (always, or only at creation) and required, and how a listing is
ordered.
"""

from dataclasses import dataclass, field

from django.db import models

from .models import (
    ChatMessage, DiaryEntry, Mood, Photo, PlaylistItem, Post, Profile,
    Quote, Reaction, ReactionKind,
)


class Collection(models.TextChoices):
    PROFILE = 'profile', 'Profiles'
    POST = 'post', 'Posts'
    REACTION = 'reaction', 'Reactions'
    PHOTO = 'photo', 'Photos'
    PLAYLIST = 'playlist', 'Playlist'
    DIARY = 'diary', 'Diary'
    QUOTE = 'quote', 'Quotes'
    CHAT = 'chat', 'Chat'


class WritePolicy(models.TextChoices):
    OWNER = 'owner', 'Written by the owner'
    PARTNER_OF_OWNER = 'partner_of_owner', "Written by the owner's partner"


@dataclass(frozen=True)
class EntitySpec:
    collection: str
    model: type
    scope_field: str
    owner_field: str
    ordering: tuple
    policy: str = WritePolicy.OWNER
    writable: tuple = ()
    create_only: tuple = ()
    required: tuple = ()
    choices: dict = field(default_factory=dict)
    related: tuple = ()
    read_field: str = ''
    author_field: str = ''

    @property
    def owner_attname(self):
        return f'{self.owner_field}_id' if self.owner_field else 'pk'

    def queryset(self):
        qs = self.model.objects.all()
        if self.related:
            qs = qs.select_related(*self.related)
        return qs


REGISTRY = {
    Collection.POST: EntitySpec(
        collection=Collection.POST,
        model=Post,
        scope_field='owner',
        owner_field='owner',
        ordering=('-created_at', 'id'),
        writable=('content', 'mood', 'image_url', 'song_link', 'is_miss_you'),
        required=('content',),
        choices={'mood': Mood.values},
        related=('owner',),
    ),
    Collection.REACTION: EntitySpec(
        collection=Collection.REACTION,
        model=Reaction,
        scope_field='post__owner',
        owner_field='owner',
        ordering=('created_at', 'id'),
        writable=('kind',),
        create_only=('post',),
        required=('kind',),
        choices={'kind': ReactionKind.values},
    ),
    Collection.PHOTO: EntitySpec(
        collection=Collection.PHOTO,
        model=Photo,
        scope_field='owner',
        owner_field='owner',
        ordering=('-uploaded_at', 'id'),
        writable=('url', 'caption'),
        required=('url',),
        related=('owner',),
    ),
    Collection.PLAYLIST: EntitySpec(
        collection=Collection.PLAYLIST,
        model=PlaylistItem,
        scope_field='owner',
        owner_field='owner',
        ordering=('-added_at', 'id'),
        writable=('title', 'url'),
        required=('title', 'url'),
        related=('owner',),
    ),
    Collection.DIARY: EntitySpec(
        collection=Collection.DIARY,
        model=DiaryEntry,
        scope_field='owner',
        owner_field='owner',
        ordering=('-date', 'id'),
        writable=('date', 'content', 'mood'),
        required=('content',),
        choices={'mood': Mood.values},
        related=('owner',),
    ),
    Collection.QUOTE: EntitySpec(
        collection=Collection.QUOTE,
        model=Quote,
        scope_field='owner',
        owner_field='owner',
        ordering=('-created_at', 'id'),
        policy=WritePolicy.PARTNER_OF_OWNER,
        writable=('text',),
        required=('text',),
        related=('owner', 'author'),
        read_field='is_read',
        author_field='author',
    ),
    Collection.CHAT: EntitySpec(
        collection=Collection.CHAT,
        model=ChatMessage,
        scope_field='sender',
        owner_field='sender',
        ordering=('sent_at', 'id'),
        writable=('text',),
        required=('text',),
        related=('sender',),
        read_field='is_read',
        author_field='sender',
    ),
    Collection.PROFILE: EntitySpec(
        collection=Collection.PROFILE,
        model=Profile,
        scope_field='',
        owner_field='',
        ordering=('created_at', 'id'),
        writable=('name',),
        required=('name',),
    ),
}

MODEL_COLLECTIONS = {spec.model: name for name, spec in REGISTRY.items()}


def get_spec(collection):
    """Look up the spec for a collection name; unknown names are a lookup error."""
    try:
        return REGISTRY[Collection(collection)]
    except ValueError:
        raise LookupError(f"Unknown collection: {collection!r}")
