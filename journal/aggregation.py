"""
Love Nest - Aggregation Helpers

Pure functions over already-fetched rows. No queries, no side effects.
"""

from collections import Counter, OrderedDict

from .models import ReactionKind

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


def mood_histogram(moods):
    """
    Tally moods.

    Returns a list of {'mood', 'count', 'percentage'} sorted by count
    (descending); equal counts keep the order the moods were first seen.
    Empty input gives an empty list.
    """
    counts = OrderedDict()
    for mood in moods:
        counts[mood] = counts.get(mood, 0) + 1

    total = sum(counts.values())
    stats = [
        {
            'mood': mood,
            'count': count,
            'percentage': (count / total) * 100 if total else 0,
        }
        for mood, count in counts.items()
    ]
    # sorted() is stable, so first-seen order breaks ties.
    return sorted(stats, key=lambda stat: -stat['count'])


def _plural(count, unit):
    return f"{count} {unit}{'s' if count != 1 else ''} ago"


def bucket_by_recency(timestamp, now):
    """
    Label how long ago `timestamp` was: "Today", "3 days ago",
    "1 month ago", "2 years ago". The largest whole unit wins.
    """
    days = (now - timestamp).days
    years = days // DAYS_PER_YEAR
    months = days // DAYS_PER_MONTH

    if years > 0:
        return _plural(years, 'year')
    if months > 0:
        return _plural(months, 'month')
    if days > 0:
        return _plural(days, 'day')
    return 'Today'


def partition_unread(entities, viewer_id, owner_field, read_field='is_read'):
    """
    Split rows into (unread for the viewer, everything else).

    A row is unread for the viewer when someone else wrote it
    (`owner_field` differs from `viewer_id`) and it is not read yet.
    """
    unread, rest = [], []
    for entity in entities:
        author = getattr(entity, owner_field)
        author_id = getattr(author, 'pk', author)
        if author_id != viewer_id and not getattr(entity, read_field):
            unread.append(entity)
        else:
            rest.append(entity)
    return unread, rest


def group_by_post(reactions):
    """{post_id: [reaction, ...]} keeping input order."""
    grouped = {}
    for reaction in reactions:
        grouped.setdefault(reaction.post_id, []).append(reaction)
    return grouped


def reaction_counts(reactions):
    """Count reactions per kind. Every kind is present, zero when absent."""
    counts = Counter(reaction.kind for reaction in reactions)
    return {kind: counts.get(kind, 0) for kind in ReactionKind.values}
