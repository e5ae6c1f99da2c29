"""
Love Nest - Couple Analytics

Mood trends and memory lane, computed for the pair: the viewer's own
numbers and, separately, the partner's.
"""

from datetime import datetime, time, timedelta, timezone as dt_timezone

from django.conf import settings
from django.db import models
from django.utils import timezone

from .aggregation import bucket_by_recency, mood_histogram
from .entities import Collection, get_spec
from .models import DiaryEntry, HAPPY_MOODS, Post
from .scoping import Audience, scoped_queryset


class MoodRange(models.TextChoices):
    WEEK = 'week', 'Last 7 days'
    MONTH = 'month', 'Last 30 days'


RANGE_DAYS = {
    MoodRange.WEEK: 7,
    MoodRange.MONTH: 30,
}


class MemoryFilter(models.TextChoices):
    ALL = 'all', 'All memories'
    MONTH = 'month', 'One month ago'
    HAPPIEST = 'happiest', 'Happiest moments'


# Memory lane's "one month ago" looks at the single day this many days back.
MEMORY_MONTH_DAYS = 30


class CoupleAnalytics:
    """
    Mood and memory analytics for one identity.

    `now` is injectable so windows are reproducible.
    """

    def __init__(self, identity, now=None):
        self.identity = identity
        self.me = identity.me
        self.partner = identity.partner
        self.now = now or timezone.now()

    # =========================================================================
    # MOOD TRENDS
    # =========================================================================

    def window_start(self, mood_range):
        return self.now - timedelta(days=RANGE_DAYS[MoodRange(mood_range)])

    def moods_for(self, profile, mood_range):
        """Moods from the profile's posts and diary entries since the window start."""
        since = self.window_start(mood_range)
        post_moods = Post.objects.filter(
            owner=profile, created_at__gte=since
        ).order_by('created_at', 'id').values_list('mood', flat=True)
        diary_moods = DiaryEntry.objects.filter(
            owner=profile, created_at__gte=since
        ).order_by('created_at', 'id').values_list('mood', flat=True)
        return list(post_moods) + list(diary_moods)

    def my_moods(self, mood_range=MoodRange.WEEK):
        return mood_histogram(self.moods_for(self.me, mood_range))

    def partner_moods(self, mood_range=MoodRange.WEEK):
        if self.partner is None:
            return []
        return mood_histogram(self.moods_for(self.partner, mood_range))

    # =========================================================================
    # MEMORY LANE
    # =========================================================================

    def month_ago_window(self):
        """
        The single calendar day MEMORY_MONTH_DAYS before now, start to end.

        Deliberately one day, not a month-long range.
        """
        day = (self.now - timedelta(days=MEMORY_MONTH_DAYS)).astimezone(dt_timezone.utc).date()
        start = datetime.combine(day, time.min, tzinfo=dt_timezone.utc)
        end = datetime.combine(day, time.max, tzinfo=dt_timezone.utc)
        return start, end

    def memory_query(self, memory_filter=MemoryFilter.ALL):
        """Filters and limit for a memory lane listing."""
        memory_filter = MemoryFilter(memory_filter)
        if memory_filter == MemoryFilter.MONTH:
            start, end = self.month_ago_window()
            return {'created_at__gte': start, 'created_at__lte': end}, None
        if memory_filter == MemoryFilter.HAPPIEST:
            return {'mood__in': list(HAPPY_MOODS)}, settings.LOVENEST_HAPPIEST_LIMIT
        return {}, settings.LOVENEST_MEMORY_LIMIT

    def memories(self, memory_filter=MemoryFilter.ALL):
        """Posts from both partners for memory lane, newest first."""
        filters, limit = self.memory_query(memory_filter)
        posts = scoped_queryset(
            get_spec(Collection.POST), self.identity, Audience.BOTH,
            filters=filters, limit=limit,
        )
        return [self.memory(post) for post in posts]

    def memory(self, post):
        data = post.as_dict()
        data['time_ago'] = bucket_by_recency(post.created_at, self.now)
        return data

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def summary(self, mood_range=MoodRange.WEEK):
        """Everything the mood page shows, ready for JSON."""
        return {
            'range': MoodRange(mood_range).value,
            'since': self.window_start(mood_range).isoformat(),
            'me': {
                'name': self.me.name,
                'moods': self.my_moods(mood_range),
            },
            'partner': {
                'name': self.partner.name,
                'moods': self.partner_moods(mood_range),
            } if self.partner else None,
        }
