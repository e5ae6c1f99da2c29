from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest

from journal.analytics import CoupleAnalytics, MemoryFilter, MoodRange
from journal.models import DiaryEntry, Mood, Post


def post(owner, mood, at, content='memory'):
    return Post.objects.create(owner=owner, content=content, mood=mood, created_at=at)


def test_mood_window_includes_posts_and_diary(alice, bob, alice_id, fixed_now):
    post(alice, Mood.HAPPY, fixed_now - timedelta(days=1))
    post(alice, Mood.HAPPY, fixed_now - timedelta(days=3))
    post(alice, Mood.SAD, fixed_now - timedelta(days=10))
    DiaryEntry.objects.create(
        owner=alice, date=date(2024, 6, 14), content='dear diary', mood=Mood.TIRED,
        created_at=fixed_now - timedelta(days=1),
    )
    post(bob, Mood.LOVE, fixed_now - timedelta(days=2))

    analytics = CoupleAnalytics(alice_id, now=fixed_now)

    week = analytics.my_moods(MoodRange.WEEK)
    assert [(s['mood'], s['count']) for s in week] == [('happy', 2), ('tired', 1)]

    month = analytics.my_moods(MoodRange.MONTH)
    assert sum(s['count'] for s in month) == 4

    assert analytics.partner_moods(MoodRange.WEEK) == [
        {'mood': 'love', 'count': 1, 'percentage': 100.0},
    ]


def test_partner_moods_without_partner(carol, carol_id, fixed_now):
    analytics = CoupleAnalytics(carol_id, now=fixed_now)
    assert analytics.partner_moods() == []
    assert analytics.summary()['partner'] is None


def test_summary_shape(alice, bob, alice_id, fixed_now):
    post(bob, Mood.EXCITED, fixed_now - timedelta(days=1))
    summary = CoupleAnalytics(alice_id, now=fixed_now).summary(MoodRange.MONTH)

    assert summary['range'] == 'month'
    assert summary['me'] == {'name': 'Alice', 'moods': []}
    assert summary['partner']['name'] == 'Bob'
    assert summary['partner']['moods'][0]['mood'] == 'excited'


def test_memory_lane_month_is_a_single_day(alice, bob, alice_id, fixed_now):
    # fixed_now is 2024-06-15 12:00 UTC, so the window is 2024-05-16.
    inside_early = post(alice, Mood.SAD, datetime(2024, 5, 16, 0, 0, tzinfo=dt_timezone.utc))
    inside_late = post(bob, Mood.HAPPY, datetime(2024, 5, 16, 23, 59, tzinfo=dt_timezone.utc))
    post(alice, Mood.HAPPY, datetime(2024, 5, 15, 23, 59, tzinfo=dt_timezone.utc))
    post(alice, Mood.HAPPY, datetime(2024, 5, 17, 0, 0, tzinfo=dt_timezone.utc))

    memories = CoupleAnalytics(alice_id, now=fixed_now).memories(MemoryFilter.MONTH)

    assert [m['id'] for m in memories] == [str(inside_late.id), str(inside_early.id)]
    assert memories[0]['time_ago'] == '29 days ago'
    assert memories[1]['time_ago'] == '1 month ago'


def test_memory_lane_happiest(alice, bob, alice_id, fixed_now, settings):
    settings.LOVENEST_HAPPIEST_LIMIT = 2
    for days, mood in enumerate([Mood.HAPPY, Mood.SAD, Mood.LOVE, Mood.EXCITED]):
        post(alice if days % 2 else bob, mood, fixed_now - timedelta(days=days))

    memories = CoupleAnalytics(alice_id, now=fixed_now).memories(MemoryFilter.HAPPIEST)
    assert [m['mood'] for m in memories] == ['happy', 'love']


def test_memory_lane_all_is_limited_and_scoped(alice, bob, carol, alice_id, fixed_now, settings):
    settings.LOVENEST_MEMORY_LIMIT = 3
    for days in range(5):
        post(alice, Mood.PEACEFUL, fixed_now - timedelta(days=days))
    post(carol, Mood.HAPPY, fixed_now)

    memories = CoupleAnalytics(alice_id, now=fixed_now).memories(MemoryFilter.ALL)
    assert len(memories) == 3
    assert {m['owner_name'] for m in memories} == {'Alice'}
    assert memories[0]['time_ago'] == 'Today'


def test_unknown_filters_are_rejected(alice_id, fixed_now):
    analytics = CoupleAnalytics(alice_id, now=fixed_now)
    with pytest.raises(ValueError):
        analytics.memory_query('yesterday')
    with pytest.raises(ValueError):
        analytics.window_start('decade')
