"""
Love Nest - Mutation Gateway

Every write goes through here. The gateway validates fields, checks
ownership against the row's write policy, and dispatches the write. It
never touches a Live Collection: listings update through the change feed.

Write policy:
- Most rows: only the owner (or sender) may create, update or delete.
- Quotes: owned by the recipient, written by the recipient's partner.
"""

import logging
import uuid

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from .entities import Collection, WritePolicy, get_spec
from .exceptions import NotFound, OwnershipViolation, ValidationError
from .feed import Operation, feed as default_feed
from .models import DiaryEntry, Mood, Post, Profile, Reaction, ReactionKind
from .scoping import visible_to

logger = logging.getLogger(__name__)


def _as_uuid(value):
    if isinstance(value, Profile):
        return value.id
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


class MutationGateway:
    """Validated, ownership-checked writes on behalf of one identity."""

    def __init__(self, identity, feed=None):
        self.identity = identity
        self.feed = feed or default_feed

    @property
    def me(self):
        return self.identity.me

    @property
    def partner(self):
        return self.identity.partner

    # ------------------------------------------------------------------
    # Field checks
    # ------------------------------------------------------------------

    def _clean(self, spec, fields, creating):
        allowed = set(spec.writable) | (set(spec.create_only) if creating else set())
        unknown = sorted(set(fields) - allowed)
        if unknown:
            raise ValidationError(
                f"Unknown or read-only field(s) for {spec.collection}: {', '.join(unknown)}",
                fields=unknown,
            )

        for name in spec.required:
            if (creating or name in fields) and _is_blank(fields.get(name)):
                raise ValidationError(f'{name} is required.', field=name)

        for name, allowed in spec.choices.items():
            if name in fields and fields[name] not in allowed:
                raise ValidationError(
                    f'{fields[name]!r} is not a valid {name}.',
                    field=name,
                    choices=list(allowed),
                )

        cleaned = {}
        for name, value in fields.items():
            model_field = spec.model._meta.get_field(name)
            if value == '' and model_field.null:
                value = None
            cleaned[name] = value
        return cleaned

    def _full_clean(self, instance):
        try:
            instance.full_clean()
        except DjangoValidationError as exc:
            raise ValidationError(
                '; '.join(exc.messages),
                fields=getattr(exc, 'message_dict', {}),
            ) from exc

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def _owner_for_create(self, spec, requested):
        """Owner id a new row gets, or OwnershipViolation if `requested` is not allowed."""
        if spec.policy == WritePolicy.PARTNER_OF_OWNER:
            if self.partner is None:
                raise OwnershipViolation('You need a linked partner to do that.')
            expected = self.partner.id
        else:
            expected = self.me.id

        if requested is None:
            return expected
        try:
            requested = _as_uuid(requested)
        except ValueError:
            raise OwnershipViolation(f'{requested!r} is not a profile you can write for.')
        if requested != expected:
            raise OwnershipViolation(
                f'You cannot create a {spec.collection} for that profile.',
                owner=str(requested),
            )
        return expected

    def _writable_rows(self, spec):
        qs = spec.queryset()
        if spec.policy == WritePolicy.PARTNER_OF_OWNER:
            if self.partner is None:
                return qs.none()
            return qs.filter(**{spec.owner_attname: self.partner.id})
        return qs.filter(**{spec.owner_attname: self.me.id})

    def _pop_owner(self, spec, fields):
        requested = None
        if spec.owner_field:
            for key in (spec.owner_field, spec.owner_attname):
                if key in fields:
                    requested = fields.pop(key)
        return requested

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------

    def create(self, collection, fields):
        """
        Insert a row owned per the collection's write policy.

        Raises ValidationError for blank required fields and
        OwnershipViolation for an owner the caller may not write for.
        Returns the new row; listings pick it up from the change feed.
        """
        spec = get_spec(collection)
        fields = dict(fields)
        requested_owner = self._pop_owner(spec, fields)

        post = None
        if spec.collection == Collection.REACTION:
            post = self._visible_post(fields.pop('post', None))

        cleaned = self._clean(spec, fields, creating=True)
        owner_id = self._owner_for_create(spec, requested_owner)

        instance = spec.model(**cleaned)
        setattr(instance, spec.owner_attname, owner_id)
        if spec.author_field and spec.author_field != spec.owner_field:
            setattr(instance, f'{spec.author_field}_id', self.me.id)
        if post is not None:
            instance.post = post
        self._full_clean(instance)
        instance.save()

        logger.info('%s created %s %s', self.me.id, spec.collection, instance.pk)
        return instance

    def update(self, collection, pk, fields):
        """
        Update a row the caller may write. Re-applying identical fields is a no-op.

        Raises NotFound when no such writable row exists.
        """
        spec = get_spec(collection)
        fields = dict(fields)
        if self._pop_owner(spec, fields) is not None:
            raise OwnershipViolation('The owner of a row cannot be changed.')

        try:
            row = self._writable_rows(spec).filter(pk=_as_uuid(pk)).first()
        except ValueError:
            row = None
        if row is None:
            raise NotFound(f'No {spec.collection} {pk} that you can edit.')
        if spec.collection == Collection.POST and Reaction.objects.filter(post=row).exists():
            raise ValidationError('A post cannot be edited once it has reactions.')

        cleaned = self._clean(spec, fields, creating=False)
        changed = [name for name, value in cleaned.items() if getattr(row, name) != value]
        if not changed:
            return row

        for name in changed:
            setattr(row, name, cleaned[name])
        self._full_clean(row)
        row.save(update_fields=changed)

        logger.info('%s updated %s %s (%s)', self.me.id, spec.collection, row.pk, ', '.join(changed))
        return row

    def delete(self, collection, pk):
        """
        Delete a row the caller owns. For quotes that is the recipient,
        not the author.

        Raises NotFound when the row is absent or invisible, and
        OwnershipViolation when it is visible but belongs to someone else.
        """
        spec = get_spec(collection)
        try:
            row = (
                spec.model.objects
                .filter(pk=_as_uuid(pk))
                .filter(visible_to(self.me, spec.scope_field))
                .first()
            )
        except ValueError:
            row = None
        if row is None:
            raise NotFound(f'No {spec.collection} {pk}.')
        if getattr(row, spec.owner_attname) != self.me.id:
            logger.warning('%s tried to delete %s %s they do not own', self.me.id, spec.collection, pk)
            raise OwnershipViolation(f'You can only delete your own {spec.collection}.')

        row.delete()
        logger.info('%s deleted %s %s', self.me.id, spec.collection, pk)

    def mark_read(self, collection, ids):
        """
        Mark rows read for the caller: only visible rows the caller did not author.

        Returns the number of rows changed.
        """
        spec = get_spec(collection)
        if not spec.read_field:
            raise ValidationError(f'{spec.collection} has no read flag.')

        try:
            ids = [_as_uuid(pk) for pk in ids]
        except ValueError:
            raise ValidationError('Invalid id in mark-read batch.')
        if not ids:
            return 0

        rows = list(
            spec.model.objects
            .filter(pk__in=ids, **{spec.read_field: False})
            .filter(visible_to(self.me, spec.scope_field))
            .exclude(**{f'{spec.author_field}_id': self.me.id})
        )
        if not rows:
            return 0

        count = spec.model.objects.filter(pk__in=[row.pk for row in rows]).update(
            **{spec.read_field: True}
        )
        # Bulk updates skip post_save, so announce the rows here.
        for row in rows:
            self.feed.publish_instance(spec.collection, Operation.UPDATE, row)
        logger.info('%s marked %d %s read', self.me.id, count, spec.collection)
        return count

    # ------------------------------------------------------------------
    # Special cases
    # ------------------------------------------------------------------

    def _visible_post(self, post_id):
        if post_id is None:
            raise ValidationError('post is required.', field='post')
        if isinstance(post_id, Post):
            post_id = post_id.pk
        try:
            post = Post.objects.filter(pk=_as_uuid(post_id)).filter(visible_to(self.me, 'owner')).first()
        except ValueError:
            post = None
        if post is None:
            raise NotFound(f'No post {post_id}.')
        return post

    def toggle_reaction(self, post_id, kind):
        """
        React to a post.

        No reaction yet -> add `kind`. Same kind again -> remove it.
        Different kind -> switch the existing reaction to `kind`.
        Returns the caller's reaction afterwards, or None.
        """
        if kind not in ReactionKind.values:
            raise ValidationError(f'{kind!r} is not a valid reaction.', field='kind')
        post = self._visible_post(post_id)

        with transaction.atomic():
            existing = (
                Reaction.objects.select_for_update()
                .filter(post=post, owner=self.me)
                .first()
            )
            if existing is None:
                reaction = Reaction.objects.create(post=post, owner=self.me, kind=kind)
                logger.info('%s reacted %s on %s', self.me.id, kind, post.pk)
                return reaction
            if existing.kind == kind:
                existing.delete()
                logger.info('%s removed %s on %s', self.me.id, kind, post.pk)
                return None
            existing.kind = kind
            existing.save(update_fields=['kind'])
            logger.info('%s switched reaction on %s to %s', self.me.id, post.pk, kind)
            return existing

    def save_diary(self, date=None, content='', mood=Mood.HAPPY):
        """Upsert the caller's diary entry for `date` (today by default)."""
        if _is_blank(content):
            raise ValidationError('content is required.', field='content')
        if mood not in Mood.values:
            raise ValidationError(f'{mood!r} is not a valid mood.', field='mood')
        date = date or timezone.localdate()

        with transaction.atomic():
            entry, created = DiaryEntry.objects.update_or_create(
                owner=self.me,
                date=date,
                defaults={'content': content, 'mood': mood},
            )
        logger.info(
            '%s %s diary entry for %s', self.me.id, 'created' if created else 'updated', date
        )
        return entry

    def send_miss_you(self, now=None):
        """Post the one-tap "missing you" note."""
        now = timezone.localtime(now or timezone.now())
        time_str = now.strftime('%I:%M %p').lstrip('0')
        return self.create(Collection.POST, {
            'content': f'{self.me.name} was missing you at {time_str} ❤️',
            'mood': Mood.MISSING,
            'is_miss_you': True,
        })
