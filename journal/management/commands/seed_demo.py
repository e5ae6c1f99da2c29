"""
Management command to seed two linked demo partners with sample content.

Usage:
    python manage.py seed_demo
    python manage.py seed_demo --clear  # Remove the demo users first
"""

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from journal.models import (
    ChatMessage, DiaryEntry, Mood, Photo, PlaylistItem, Post, Profile, Quote, Reaction, ReactionKind,
)

User = get_user_model()

DEMO_PASSWORD = 'lovenest-demo-2024'
DEMO_USERS = [
    ('romeo@lovenest.local', 'Romeo'),
    ('juliet@lovenest.local', 'Juliet'),
]


class Command(BaseCommand):
    help = 'Seeds two linked demo partners with posts, diary entries, songs, photos, notes and chat'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete the demo users (and everything they wrote) before seeding',
        )

    def handle(self, *args, **options):
        emails = [email for email, _ in DEMO_USERS]
        if options['clear']:
            deleted_count = User.objects.filter(username__in=emails).delete()[0]
            self.stdout.write(self.style.WARNING(f'Deleted {deleted_count} demo rows'))

        if Profile.objects.filter(user__username__in=emails).exists():
            self.stdout.write(self.style.WARNING(
                'Demo users already exist. Run with --clear to reseed.'
            ))
            return

        with transaction.atomic():
            first, second = [self.create_profile(email, name) for email, name in DEMO_USERS]
            first.link(second)
            created = self.seed_content(first, second)

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {first.name} & {second.name} with {created} rows '
            f'(password: {DEMO_PASSWORD})'
        ))

    def create_profile(self, email, name):
        user = User.objects.create_user(username=email, email=email, password=DEMO_PASSWORD)
        return Profile.objects.create(user=user, name=name)

    def seed_content(self, first, second):
        """Create sample rows spread over the past few weeks. Returns how many."""
        now = timezone.now()
        rows = []

        for days_ago, owner, content, mood in self.get_post_data(first, second):
            rows.append(Post.objects.create(
                owner=owner, content=content, mood=mood,
                created_at=now - timedelta(days=days_ago),
            ))
        rows.append(Reaction.objects.create(post=rows[0], owner=second, kind=ReactionKind.LOVE))
        rows.append(Reaction.objects.create(post=rows[1], owner=first, kind=ReactionKind.HUG))

        for days_ago, owner, content, mood in self.get_diary_data(first, second):
            date = timezone.localdate() - timedelta(days=days_ago)
            rows.append(DiaryEntry.objects.create(
                owner=owner, date=date, content=content, mood=mood,
                created_at=now - timedelta(days=days_ago),
            ))

        rows.extend([
            PlaylistItem.objects.create(
                owner=first, title='Our first dance', url='https://example.com/songs/first-dance',
            ),
            PlaylistItem.objects.create(
                owner=second, title='Road trip anthem', url='https://example.com/songs/road-trip',
            ),
            Photo.objects.create(
                owner=second, url='https://example.com/photos/beach.jpg', caption='Sunset at the beach',
            ),
            Quote.objects.create(owner=second, author=first, text='You make every day brighter.'),
            Quote.objects.create(owner=first, author=second, text='Counting down to Friday with you.'),
            ChatMessage.objects.create(sender=first, text='Good morning, sunshine!'),
            ChatMessage.objects.create(sender=second, text='Morning! Coffee later?'),
        ])
        return len(rows)

    def get_post_data(self, first, second):
        return [
            (0, first, 'Made pancakes this morning and thought of you.', Mood.HAPPY),
            (2, second, 'Long day at work, cannot wait for the weekend.', Mood.TIRED),
            (5, first, 'That walk by the river was perfect.', Mood.LOVE),
            (12, second, 'Booked the tickets!', Mood.EXCITED),
            (30, first, 'One month of this journal already.', Mood.PEACEFUL),
        ]

    def get_diary_data(self, first, second):
        return [
            (0, first, 'Quiet evening, read a book together.', Mood.PEACEFUL),
            (1, second, 'Missed our call today.', Mood.MISSING),
            (3, first, 'Big presentation went well.', Mood.EXCITED),
        ]
