"""
Love Nest - Views
=================

JSON endpoints over the journal. Every view gets a SessionContext built
from the request and torn down when the response is ready:

- Listings read a Live Collection snapshot (an empty list plus an "error"
  entry when the fetch failed).
- Writes go through the Mutation Gateway and answer with the written row;
  listings catch up through the change feed.
- watch/<collection>/ long-polls a Live Collection until it changes.

Errors map to statuses: not signed in / no profile 401, validation 400,
ownership 403, not found 404.
"""

import json
import logging
from functools import wraps

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from .aggregation import group_by_post, partition_unread, reaction_counts
from .analytics import CoupleAnalytics, MemoryFilter, MoodRange
from .entities import Collection, get_spec
from .exceptions import JournalError, NotFound, OwnershipViolation, ValidationError
from .forms import DiaryForm, ProfileForm, SignInForm, SignUpForm, require_valid
from .identity import SessionContext, resolve, sign_in, sign_out, sign_up
from .models import DiaryEntry, Mood
from .scoping import Audience

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def error_response(exc):
    return JsonResponse(exc.as_dict(), status=exc.status)


def journal_view(methods=('GET',)):
    """Resolve a SessionContext, call the view with it, map journal errors, tear down."""
    def decorator(view):
        @require_http_methods(list(methods))
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                ctx = SessionContext.from_request(request)
            except JournalError as exc:
                return error_response(exc)
            try:
                return view(request, ctx, *args, **kwargs)
            except JournalError as exc:
                return error_response(exc)
            finally:
                ctx.teardown()
        return wrapper
    return decorator


def read_payload(request):
    """The request body as a dict, from JSON or form encoding."""
    if request.content_type == 'application/json':
        try:
            payload = json.loads(request.body or b'{}')
        except ValueError:
            raise ValidationError('Request body is not valid JSON.')
        if not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object.')
        return payload
    payload = request.POST.dict()
    payload.pop('csrfmiddlewaretoken', None)
    return payload


def pick(payload, allowed, collection):
    """
    Keep the fields a form may send. The owner field is passed through so the
    gateway can reject an owner the caller does not control.
    """
    spec = get_spec(collection)
    owner_keys = {spec.owner_field, spec.owner_attname} if spec.owner_field else set()
    unexpected = sorted(set(payload) - set(allowed) - owner_keys)
    if unexpected:
        raise ValidationError(f"Unexpected field(s): {', '.join(unexpected)}", fields=unexpected)
    return dict(payload)


def parse_audience(request, default=Audience.BOTH):
    value = request.GET.get('audience', default)
    try:
        return Audience(value)
    except ValueError:
        raise ValidationError(f'{value!r} is not an audience.', choices=Audience.values)


def snapshot(ctx, collection, audience=Audience.BOTH, filters=None, limit=None):
    """Open a Live Collection and return (rows, error payload or None)."""
    live = ctx.open(collection, audience, filters=filters, limit=limit)
    error = live.error.as_dict() if live.has_error else None
    return list(live.items), error


def listing(items, error=None, **extra):
    payload = {'items': items, **extra}
    if error:
        payload['error'] = error
    return JsonResponse(payload)


def delete_row(ctx, collection, pk):
    """
    Delete through the gateway. Deleting someone else's row is a no-op for
    the UI (the control is never shown), reported as deleted=False.
    """
    try:
        ctx.gateway().delete(collection, pk)
    except OwnershipViolation:
        return JsonResponse({'deleted': False})
    return JsonResponse({'deleted': True})


# =============================================================================
# AUTHENTICATION
# =============================================================================

@require_http_methods(['POST'])
def sign_up_view(request):
    try:
        data = require_valid(SignUpForm(read_payload(request)))
        profile = sign_up(data['email'], data['password'], data['name'])
    except JournalError as exc:
        return error_response(exc)
    return JsonResponse({'profile': profile.as_dict()}, status=201)


@require_http_methods(['POST'])
def sign_in_view(request):
    try:
        data = require_valid(SignInForm(read_payload(request)))
        user = sign_in(request, data['email'], data['password'])
        identity = resolve(user)
    except JournalError as exc:
        return error_response(exc)
    return JsonResponse(identity_payload(identity))


@require_http_methods(['POST'])
def sign_out_view(request):
    sign_out(request)
    return JsonResponse({'signed_out': True})


def identity_payload(identity):
    return {
        'me': identity.me.as_dict(),
        'partner': identity.partner.as_dict() if identity.partner else None,
    }


@journal_view(methods=('GET', 'POST'))
def me(request, ctx):
    """Who am I and who is my partner. POST updates the display name / photo."""
    if request.method == 'POST':
        form = ProfileForm(request.POST, request.FILES, instance=ctx.me)
        require_valid(form)
        form.save()
        ctx.reload()
    return JsonResponse(identity_payload(ctx.identity))


# =============================================================================
# TIMELINE
# =============================================================================

@journal_view(methods=('GET', 'POST'))
def timeline(request, ctx):
    """Posts from me, my partner, or both, each with its reaction counts."""
    if request.method == 'POST':
        fields = pick(read_payload(request), ('content', 'mood', 'image_url', 'song_link'), Collection.POST)
        post = ctx.gateway().create(Collection.POST, fields)
        return JsonResponse({'post': post.as_dict()}, status=201)

    audience = parse_audience(request)
    posts, error = snapshot(ctx, Collection.POST, audience)
    reactions, reaction_error = snapshot(ctx, Collection.REACTION, Audience.BOTH)
    by_post = group_by_post(reactions)

    items = []
    for post in posts:
        post_reactions = by_post.get(post.id, [])
        data = post.as_dict()
        data['reactions'] = reaction_counts(post_reactions)
        data['my_reaction'] = next(
            (r.kind for r in post_reactions if r.owner_id == ctx.me.id), None
        )
        items.append(data)
    return listing(items, error or reaction_error, audience=audience.value)


@journal_view(methods=('POST',))
def miss_you(request, ctx):
    post = ctx.gateway().send_miss_you()
    return JsonResponse({'post': post.as_dict()}, status=201)


@journal_view(methods=('POST',))
def react(request, ctx, post_id):
    kind = read_payload(request).get('kind', '')
    reaction = ctx.gateway().toggle_reaction(post_id, kind)
    return JsonResponse({'reaction': reaction.as_dict() if reaction else None})


@journal_view(methods=('POST',))
def delete_post(request, ctx, post_id):
    return delete_row(ctx, Collection.POST, post_id)


# =============================================================================
# DIARY
# =============================================================================

@journal_view(methods=('GET', 'POST'))
def diary(request, ctx):
    """Today's entry (editable) plus the ten most recent entries from both of us."""
    if request.method == 'POST':
        data = require_valid(DiaryForm(read_payload(request)))
        entry = ctx.gateway().save_diary(
            date=data['date'] or timezone.localdate(),
            content=data['content'],
            mood=data['mood'] or Mood.HAPPY,
        )
        return JsonResponse({'entry': entry.as_dict()})

    today = DiaryEntry.objects.filter(owner=ctx.me, date=timezone.localdate()).first()
    entries, error = snapshot(ctx, Collection.DIARY, parse_audience(request), limit=10)
    return listing(
        [entry.as_dict() for entry in entries],
        error,
        today=today.as_dict() if today else None,
    )


# =============================================================================
# MOODS & MEMORIES
# =============================================================================

@journal_view()
def moods(request, ctx):
    mood_range = request.GET.get('range', MoodRange.WEEK)
    if mood_range not in MoodRange.values:
        raise ValidationError(f'{mood_range!r} is not a range.', choices=MoodRange.values)
    return JsonResponse(CoupleAnalytics(ctx.identity).summary(mood_range))


@journal_view()
def memories(request, ctx):
    memory_filter = request.GET.get('filter', MemoryFilter.ALL)
    if memory_filter not in MemoryFilter.values:
        raise ValidationError(f'{memory_filter!r} is not a filter.', choices=MemoryFilter.values)
    items = CoupleAnalytics(ctx.identity).memories(memory_filter)
    return listing(items, filter=memory_filter)


# =============================================================================
# PHOTOS & PLAYLIST
# =============================================================================

@journal_view(methods=('GET', 'POST'))
def photos(request, ctx):
    if request.method == 'POST':
        fields = pick(read_payload(request), ('url', 'caption'), Collection.PHOTO)
        photo = ctx.gateway().create(Collection.PHOTO, fields)
        return JsonResponse({'photo': photo.as_dict()}, status=201)

    items, error = snapshot(ctx, Collection.PHOTO, parse_audience(request))
    return listing([photo.as_dict() for photo in items], error)


@journal_view(methods=('POST',))
def delete_photo(request, ctx, photo_id):
    return delete_row(ctx, Collection.PHOTO, photo_id)


@journal_view(methods=('GET', 'POST'))
def playlist(request, ctx):
    if request.method == 'POST':
        fields = pick(read_payload(request), ('title', 'url'), Collection.PLAYLIST)
        song = ctx.gateway().create(Collection.PLAYLIST, fields)
        return JsonResponse({'song': song.as_dict()}, status=201)

    items, error = snapshot(ctx, Collection.PLAYLIST, parse_audience(request))
    return listing([song.as_dict() for song in items], error)


@journal_view(methods=('POST',))
def delete_song(request, ctx, song_id):
    return delete_row(ctx, Collection.PLAYLIST, song_id)


# =============================================================================
# QUOTES & CHAT
# =============================================================================

def read_and_acknowledge(ctx, collection, author_field):
    """
    Load the listing, then mark what was addressed to me as read.

    The response shows the rows as loaded (still unread); the next load
    shows them read.
    """
    items, error = snapshot(ctx, collection, Audience.BOTH)
    unread, _ = partition_unread(items, ctx.me.id, author_field)
    if unread:
        ctx.gateway().mark_read(collection, [row.pk for row in unread])
    return items, error, len(unread)


@journal_view(methods=('GET', 'POST'))
def quotes(request, ctx):
    """Love notes: the ones left for me and the ones I left for my partner."""
    if request.method == 'POST':
        fields = pick(read_payload(request), ('text',), Collection.QUOTE)
        quote = ctx.gateway().create(Collection.QUOTE, fields)
        return JsonResponse({'quote': quote.as_dict()}, status=201)

    items, error, unread = read_and_acknowledge(ctx, Collection.QUOTE, 'author_id')
    return listing([quote.as_dict() for quote in items], error, unread=unread)


@journal_view(methods=('GET', 'POST'))
def chat(request, ctx):
    if request.method == 'POST':
        fields = pick(read_payload(request), ('text',), Collection.CHAT)
        message = ctx.gateway().create(Collection.CHAT, fields)
        return JsonResponse({'message': message.as_dict()}, status=201)

    items, error, unread = read_and_acknowledge(ctx, Collection.CHAT, 'sender_id')
    return listing([message.as_dict() for message in items], error, unread=unread)


# =============================================================================
# WATCH (long-poll)
# =============================================================================

@journal_view()
def watch(request, ctx, collection):
    """
    Hold the request open until the collection changes for this viewer.

    Answers with the fresh snapshot, or {"changed": false} after the
    timeout (?timeout=seconds, capped by LOVENEST_WATCH_TIMEOUT).
    """
    try:
        spec = get_spec(collection)
    except LookupError:
        raise NotFound(f'No collection {collection!r}.')

    try:
        timeout = float(request.GET.get('timeout', settings.LOVENEST_WATCH_TIMEOUT))
    except ValueError:
        raise ValidationError('timeout must be a number of seconds.')
    timeout = max(0.0, min(timeout, settings.LOVENEST_WATCH_TIMEOUT))

    live = ctx.open(spec.collection, parse_audience(request))
    changed = live.wait_for_change(live.version, timeout=timeout)
    if not changed:
        return JsonResponse({'changed': False, 'collection': spec.collection})

    error = live.error.as_dict() if live.has_error else None
    return listing(
        [row.as_dict() for row in live.items],
        error,
        changed=True,
        collection=spec.collection,
        version=live.version,
    )
