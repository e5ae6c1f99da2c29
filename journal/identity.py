"""
Love Nest - Identity & Session Context

Resolves "who am I and who is my partner" for an authenticated principal,
and owns the per-request SessionContext every other component is handed.

Session boundary (the whole authentication surface):
- sign_up(email, password, display_name)
- sign_in(request, email, password)
- sign_out(request, ctx)
- current_principal(request)
"""

import logging
from dataclasses import dataclass

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from .exceptions import NotAuthenticated, ProfileMissing, ValidationError
from .feed import feed as default_feed
from .gateway import MutationGateway
from .live import LiveCollection
from .models import Profile
from .scoping import Audience

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    me: Profile
    partner: Profile = None

    @property
    def has_partner(self):
        return self.partner is not None


def resolve(principal):
    """
    Resolve the principal's own profile and, if linked, the partner's.

    Raises NotAuthenticated without a valid session and ProfileMissing when
    the session has no profile row. No partner is a valid steady state.
    """
    if principal is None or not getattr(principal, 'is_authenticated', False):
        raise NotAuthenticated('Please sign in.')

    me = Profile.objects.filter(user_id=principal.pk).first()
    if me is None:
        raise ProfileMissing(f'No profile exists for user {principal.pk}.')

    partner = None
    if me.partner_id:
        partner = Profile.objects.filter(pk=me.partner_id).first()
    return Identity(me=me, partner=partner)


class SessionContext:
    """
    Explicitly owned session state for one request or one page instance.

    Created with init(), handed to whatever needs identity, and torn down on
    sign-out or when the request finishes. Live Collections opened through
    the context are disposed with it.
    """

    def __init__(self, principal, feed=None):
        self.principal = principal
        self.feed = feed or default_feed
        self._identity = None
        self._collections = []

    @classmethod
    def init(cls, principal, feed=None):
        ctx = cls(principal, feed=feed)
        ctx._identity = resolve(principal)
        return ctx

    @classmethod
    def from_request(cls, request, feed=None):
        return cls.init(current_principal(request), feed=feed)

    @property
    def active(self):
        return self._identity is not None

    @property
    def identity(self):
        if self._identity is None:
            raise NotAuthenticated('The session has ended.')
        return self._identity

    @property
    def me(self):
        return self.identity.me

    @property
    def partner(self):
        return self.identity.partner

    def reload(self):
        """Re-resolve identity, e.g. after the partner link changed."""
        self._identity = resolve(self.principal)
        return self._identity

    def open(self, collection, audience=Audience.BOTH, filters=None, limit=None):
        """Open a Live Collection owned by this context."""
        live = LiveCollection(
            collection,
            self.identity,
            audience=audience,
            feed=self.feed,
            filters=filters,
            limit=limit,
        )
        self._collections.append(live)
        return live

    def gateway(self):
        return MutationGateway(self.identity, feed=self.feed)

    def teardown(self):
        """Dispose every owned collection and drop identity. Idempotent."""
        collections, self._collections = self._collections, []
        for live in collections:
            live.dispose()
        self._identity = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.teardown()
        return False


def current_principal(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user
    return None


def sign_up(email, password, display_name):
    """Create one auth user and one Profile. Returns the profile."""
    email = (email or '').strip().lower()
    name = (display_name or '').strip()
    if not email or not name or not (password or '').strip():
        raise ValidationError('Email, password and display name are required.')

    User = get_user_model()
    if User.objects.filter(username=email).exists():
        raise ValidationError('An account with this email already exists.')

    user = User(username=email, email=email)
    try:
        validate_password(password, user)
    except DjangoValidationError as exc:
        raise ValidationError(' '.join(exc.messages)) from exc

    with transaction.atomic():
        user.set_password(password)
        user.save()
        profile = Profile.objects.create(user=user, name=name)

    logger.info('Signed up %s as profile %s', email, profile.id)
    return profile


def sign_in(request, email, password):
    """Establish a session; bad credentials raise NotAuthenticated."""
    email = (email or '').strip().lower()
    user = authenticate(request, username=email, password=password)
    if user is None:
        raise NotAuthenticated('Invalid email or password.')
    login(request, user)
    return user


def sign_out(request, ctx=None):
    if ctx is not None:
        ctx.teardown()
    logout(request)
