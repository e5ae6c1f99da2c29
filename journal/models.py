"""
Love Nest - Data Models
=======================

Every row belongs to exactly one profile (its owner, or the sender for chat)
and is visible to that profile and to the profile's linked partner.

Ownership at a glance:
- Posts, reactions, photos, songs, diary entries: written by their owner
- Chat messages: written by their sender
- Quotes: owned by the RECIPIENT, written by the recipient's partner

Key uniqueness rules:
- One reaction per (post, owner) - switching kinds updates the row in place
- One diary entry per (owner, date) - saving again updates the row
"""

import uuid

from django.db import models
from django.conf import settings
from django.utils import timezone
from cloudinary.models import CloudinaryField


class Mood(models.TextChoices):
    """Moods offered on posts and diary entries."""
    HAPPY = 'happy', 'Happy'
    SAD = 'sad', 'Sad'
    LOVE = 'love', 'In Love'
    EXCITED = 'excited', 'Excited'
    PEACEFUL = 'peaceful', 'Peaceful'
    MISSING = 'missing', 'Missing You'
    TIRED = 'tired', 'Tired'


# Moods that count as a "happy memory" on memory lane.
HAPPY_MOODS = (Mood.HAPPY, Mood.LOVE, Mood.EXCITED)


class ReactionKind(models.TextChoices):
    LOVE = 'love', 'Love'
    HUG = 'hug', 'Hug'
    SMILE = 'smile', 'Smile'


class Profile(models.Model):
    """
    The journal identity of an authenticated user.

    Created once at sign-up. The partner link is set by an operator
    (see the link_partners command) and is symmetric by convention only.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile'
    )
    name = models.CharField(
        max_length=50,
        help_text="Name shown to your partner"
    )
    partner = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='linked_by',
        help_text="The one profile this profile shares its journal with"
    )
    avatar = CloudinaryField(
        'avatar',
        blank=True,
        null=True,
        help_text="Profile photo"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"Profile: {self.name}"

    def link(self, other):
        """Link two profiles as partners, in both directions."""
        self.partner = other
        other.partner = self
        self.save(update_fields=['partner'])
        other.save(update_fields=['partner'])

    def unlink(self):
        """Clear the link on this profile and on its partner if it points back."""
        partner = self.partner
        self.partner = None
        self.save(update_fields=['partner'])
        if partner is not None and partner.partner_id == self.id:
            partner.partner = None
            partner.save(update_fields=['partner'])

    def as_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'partner_id': str(self.partner_id) if self.partner_id else None,
            'created_at': self.created_at.isoformat(),
        }


class Post(models.Model):
    """A timeline post. Immutable once written; only the owner may delete it."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='posts',
        db_index=True
    )
    content = models.TextField()
    mood = models.CharField(
        max_length=20,
        choices=Mood.choices,
        default=Mood.HAPPY,
        db_index=True
    )
    image_url = models.URLField(max_length=500, blank=True, null=True)
    song_link = models.URLField(max_length=500, blank=True, null=True)
    is_miss_you = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at', 'id']
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='post_owner_created_at_idx'),
        ]

    def __str__(self):
        return f"{self.owner.name}: {self.content[:50]}"

    def as_dict(self):
        return {
            'id': str(self.id),
            'owner_id': str(self.owner_id),
            'owner_name': self.owner.name,
            'content': self.content,
            'mood': self.mood,
            'image_url': self.image_url,
            'song_link': self.song_link,
            'is_miss_you': self.is_miss_you,
            'created_at': self.created_at.isoformat(),
        }


class Reaction(models.Model):
    """One reaction per profile per post."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name='reactions',
        db_index=True
    )
    owner = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='reactions'
    )
    kind = models.CharField(max_length=10, choices=ReactionKind.choices)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['post', 'owner'],
                name='unique_reaction_per_post_owner'
            )
        ]

    def __str__(self):
        return f"{self.owner.name} {self.kind} {self.post_id}"

    def as_dict(self):
        return {
            'id': str(self.id),
            'post_id': str(self.post_id),
            'owner_id': str(self.owner_id),
            'kind': self.kind,
            'created_at': self.created_at.isoformat(),
        }


class DiaryEntry(models.Model):
    """A private daily diary page, one per owner per calendar day."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='diary_entries'
    )
    date = models.DateField(db_index=True)
    content = models.TextField()
    mood = models.CharField(
        max_length=20,
        choices=Mood.choices,
        default=Mood.HAPPY
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', 'id']
        verbose_name_plural = 'Diary entries'
        constraints = [
            models.UniqueConstraint(
                fields=['owner', 'date'],
                name='unique_diary_entry_per_owner_date'
            )
        ]

    def __str__(self):
        return f"{self.owner.name} - {self.date}"

    def as_dict(self):
        return {
            'id': str(self.id),
            'owner_id': str(self.owner_id),
            'owner_name': self.owner.name,
            'date': self.date.isoformat(),
            'content': self.content,
            'mood': self.mood,
            'created_at': self.created_at.isoformat(),
        }


class PlaylistItem(models.Model):
    """A song on the shared playlist."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='songs'
    )
    title = models.CharField(max_length=200)
    url = models.URLField(max_length=500)
    added_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-added_at', 'id']

    def __str__(self):
        return self.title

    def as_dict(self):
        return {
            'id': str(self.id),
            'owner_id': str(self.owner_id),
            'owner_name': self.owner.name,
            'title': self.title,
            'url': self.url,
            'added_at': self.added_at.isoformat(),
        }


class Quote(models.Model):
    """
    A love note left FOR the owner.

    The owner is the recipient; the author is the recipient's partner.
    Only the partner of the recipient may write or edit a quote, and only
    the recipient marks it read.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='quotes_received',
        help_text="Who the note is for"
    )
    author = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='quotes_written',
        help_text="Who left the note"
    )
    text = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at', 'id']

    def __str__(self):
        return f"For {self.owner.name}: {self.text[:50]}"

    def as_dict(self):
        return {
            'id': str(self.id),
            'owner_id': str(self.owner_id),
            'author_id': str(self.author_id),
            'author_name': self.author.name,
            'text': self.text,
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat(),
        }


class Photo(models.Model):
    """A photo in the shared album, referenced by URL."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='photos'
    )
    url = models.URLField(max_length=500)
    caption = models.CharField(max_length=300, blank=True, null=True)
    uploaded_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-uploaded_at', 'id']

    def __str__(self):
        return self.caption or self.url

    def as_dict(self):
        return {
            'id': str(self.id),
            'owner_id': str(self.owner_id),
            'owner_name': self.owner.name,
            'url': self.url,
            'caption': self.caption,
            'uploaded_at': self.uploaded_at.isoformat(),
        }


class ChatMessage(models.Model):
    """A private chat message, visible to the sender and the sender's partner."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='messages'
    )
    text = models.TextField()
    is_read = models.BooleanField(default=False)
    sent_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['sent_at', 'id']

    def __str__(self):
        return f"{self.sender.name}: {self.text[:50]}"

    def as_dict(self):
        return {
            'id': str(self.id),
            'sender_id': str(self.sender_id),
            'sender_name': self.sender.name,
            'text': self.text,
            'is_read': self.is_read,
            'sent_at': self.sent_at.isoformat(),
        }
