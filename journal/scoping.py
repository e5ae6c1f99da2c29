"""
Love Nest - Scoped Queries

Audience semantics live here and nowhere else:

    mine    -> {me}
    theirs  -> {partner}          (empty when no partner is linked)
    both    -> {me, partner}      ({me} when no partner is linked)

Row visibility is applied on top of the audience: a viewer only ever sees
rows whose scope owner is the viewer or has the viewer as linked partner.
"""

from django.db import models
from django.db.models import Q


class Audience(models.TextChoices):
    MINE = 'mine', 'Mine'
    THEIRS = 'theirs', 'Theirs'
    BOTH = 'both', 'Both'


def build_filter(audience, me, partner=None):
    """
    Return the frozenset of owner ids a query for `audience` may include.

    Pure: `me` and `partner` are profiles (partner may be None).
    """
    audience = Audience(audience)
    if audience == Audience.MINE:
        return frozenset([me.id])
    if audience == Audience.THEIRS:
        return frozenset([partner.id]) if partner is not None else frozenset()
    if partner is not None:
        return frozenset([me.id, partner.id])
    return frozenset([me.id])


def _lookup(scope_field, rest):
    return f'{scope_field}__{rest}' if scope_field else rest


def visible_to(viewer, scope_field):
    """Rows whose scope owner is the viewer, or whose scope owner's partner is the viewer."""
    return (
        Q(**{_lookup(scope_field, 'id'): viewer.id})
        | Q(**{_lookup(scope_field, 'partner'): viewer.id})
    )


def owned_by(owner_ids, scope_field):
    return Q(**{_lookup(scope_field, 'id__in'): list(owner_ids)})


def scoped_queryset(spec, identity, audience, filters=None, limit=None):
    """
    Build the queryset a listing of `spec` for `identity` runs.

    An empty owner set yields an empty queryset rather than an error.
    """
    owner_ids = build_filter(audience, identity.me, identity.partner)
    qs = spec.queryset()
    if not owner_ids:
        return qs.none()
    qs = qs.filter(owned_by(owner_ids, spec.scope_field))
    qs = qs.filter(visible_to(identity.me, spec.scope_field))
    if filters:
        qs = qs.filter(**filters)
    qs = qs.order_by(*spec.ordering)
    if limit is not None:
        qs = qs[:limit]
    return qs


def is_visible(instance_owner, viewer):
    """Python-side version of visible_to for a single scope owner profile."""
    if instance_owner is None:
        return False
    return instance_owner.id == viewer.id or instance_owner.partner_id == viewer.id
