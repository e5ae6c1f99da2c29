import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser

from journal.entities import Collection
from journal.exceptions import NotAuthenticated, ProfileMissing, ValidationError
from journal.identity import SessionContext, resolve, sign_up
from journal.live import State
from journal.models import Profile

from .conftest import PASSWORD


def test_resolve_linked_pair(alice, bob):
    identity = resolve(alice.user)
    assert identity.me == alice
    assert identity.partner == bob
    assert identity.has_partner


def test_resolve_without_partner(carol):
    identity = resolve(carol.user)
    assert identity.me == carol
    assert identity.partner is None
    assert not identity.has_partner


def test_resolve_anonymous():
    with pytest.raises(NotAuthenticated):
        resolve(None)
    with pytest.raises(NotAuthenticated):
        resolve(AnonymousUser())


@pytest.mark.django_db
def test_resolve_without_profile():
    user = get_user_model().objects.create_user(username='ghost@example.com', password=PASSWORD)
    with pytest.raises(ProfileMissing):
        resolve(user)


@pytest.mark.django_db
def test_sign_up_creates_user_and_profile():
    profile = sign_up('  Dana@Example.com ', PASSWORD, ' Dana ')

    assert profile.name == 'Dana'
    assert profile.partner is None
    assert profile.user.username == 'dana@example.com'
    assert profile.user.check_password(PASSWORD)


@pytest.mark.django_db
def test_sign_up_rejects_duplicates_and_blanks():
    sign_up('dana@example.com', PASSWORD, 'Dana')

    with pytest.raises(ValidationError):
        sign_up('DANA@example.com', PASSWORD, 'Dana again')
    with pytest.raises(ValidationError):
        sign_up('erin@example.com', PASSWORD, '   ')
    with pytest.raises(ValidationError):
        sign_up('erin@example.com', 'short', 'Erin')
    assert Profile.objects.count() == 1


def test_session_context_lifecycle(alice, bob):
    ctx = SessionContext.init(alice.user)
    assert ctx.active
    assert ctx.me == alice
    assert ctx.partner == bob

    live = ctx.open(Collection.POST)
    assert live.state == State.READY

    ctx.teardown()
    assert not ctx.active
    assert live.state == State.DISPOSED
    with pytest.raises(NotAuthenticated):
        ctx.identity

    ctx.teardown()


def test_session_context_reload_picks_up_new_link(alice, carol):
    with SessionContext.init(carol.user) as ctx:
        assert ctx.partner is None
        carol.link(alice)
        ctx.reload()
        assert ctx.partner == alice
    assert not ctx.active
