from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from journal.aggregation import (
    bucket_by_recency, group_by_post, mood_histogram, partition_unread, reaction_counts,
)


def test_mood_histogram_counts_and_order():
    stats = mood_histogram(['sad', 'happy', 'love', 'happy', 'love', 'happy'])

    assert [(s['mood'], s['count']) for s in stats] == [('happy', 3), ('love', 2), ('sad', 1)]
    assert stats[0]['percentage'] == pytest.approx(50.0)


def test_mood_histogram_ties_keep_first_seen_order():
    stats = mood_histogram(['tired', 'excited', 'excited', 'tired', 'peaceful'])
    assert [s['mood'] for s in stats] == ['tired', 'excited', 'peaceful']


@pytest.mark.parametrize('moods', [
    ['happy'],
    ['happy', 'sad', 'love'],
    ['happy'] * 7 + ['sad'] * 2 + ['tired'],
])
def test_mood_histogram_percentages_sum_to_100(moods):
    assert sum(s['percentage'] for s in mood_histogram(moods)) == pytest.approx(100)


def test_mood_histogram_empty():
    assert mood_histogram([]) == []


@pytest.mark.parametrize('delta, label', [
    (timedelta(hours=5), 'Today'),
    (timedelta(days=1), '1 day ago'),
    (timedelta(days=2, hours=3), '2 days ago'),
    (timedelta(days=29), '29 days ago'),
    (timedelta(days=30), '1 month ago'),
    (timedelta(days=59), '1 month ago'),
    (timedelta(days=60), '2 months ago'),
    (timedelta(days=365), '1 year ago'),
    (timedelta(days=800), '2 years ago'),
])
def test_bucket_by_recency(delta, label):
    now = datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)
    assert bucket_by_recency(now - delta, now) == label


def test_partition_unread_splits_the_input():
    me, partner = 'me', 'partner'
    rows = [
        SimpleNamespace(id=1, sender_id=partner, is_read=False),
        SimpleNamespace(id=2, sender_id=partner, is_read=True),
        SimpleNamespace(id=3, sender_id=me, is_read=False),
        SimpleNamespace(id=4, sender_id=partner, is_read=False),
    ]
    unread, rest = partition_unread(rows, me, 'sender_id')

    assert [r.id for r in unread] == [1, 4]
    assert [r.id for r in rest] == [2, 3]
    assert len(unread) + len(rest) == len(rows)
    assert {r.id for r in unread} | {r.id for r in rest} == {r.id for r in rows}
    assert not {r.id for r in unread} & {r.id for r in rest}


def test_partition_unread_accepts_related_objects():
    author = SimpleNamespace(pk='partner')
    rows = [SimpleNamespace(author=author, is_read=False)]
    unread, rest = partition_unread(rows, 'me', 'author')
    assert unread == rows
    assert rest == []


def test_reaction_counts_and_grouping():
    reactions = [
        SimpleNamespace(post_id='a', kind='love'),
        SimpleNamespace(post_id='b', kind='hug'),
        SimpleNamespace(post_id='a', kind='love'),
    ]
    grouped = group_by_post(reactions)

    assert list(grouped) == ['a', 'b']
    assert reaction_counts(grouped['a']) == {'love': 2, 'hug': 0, 'smile': 0}
    assert reaction_counts([]) == {'love': 0, 'hug': 0, 'smile': 0}
